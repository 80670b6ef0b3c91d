"""Source tree scanning for arch-test."""

from scan.files import find_manifest_files, find_source_files
from scan.sources import SourceScanner

__all__ = ["SourceScanner", "find_manifest_files", "find_source_files"]
