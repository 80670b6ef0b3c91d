"""Module manifest parsing for arch-test."""

from manifest.gomod import (
    ManifestSyntaxError,
    iter_manifests,
    parse_manifest,
    parse_manifest_text,
)

__all__ = [
    "ManifestSyntaxError",
    "iter_manifests",
    "parse_manifest",
    "parse_manifest_text",
]
