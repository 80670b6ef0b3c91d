"""Restartable scan of compilation units beneath a root."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from models.diagnostics import ParseError
from parse.go_imports import parse_file
from scan.files import find_source_files

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from models.records import CompilationUnit
    from rules.config import ArchTestConfig

logger = logging.getLogger(__name__)


class SourceScanner:
    """Iterable over the compilation units of a tree.

    Each iteration walks the filesystem again and parses files lazily, one at
    a time, in sorted path order. Files that fail to parse are yielded as
    ParseError values so that a malformed file never stops the scan.
    """

    def __init__(self, root: Path, config: ArchTestConfig) -> None:
        self.root = root
        self.config = config

    def __iter__(self) -> Iterator[CompilationUnit | ParseError]:
        for file_path in find_source_files(
            self.root,
            include_tests=self.config.include_tests,
            ignore_dirs=frozenset(self.config.ignore_dirs),
            exclude_patterns=self.config.exclude,
            nested_gitignore=self.config.nested_gitignore,
        ):
            relative_path = file_path.relative_to(self.root).as_posix()
            result = parse_file(file_path, relative_path)
            if isinstance(result, ParseError):
                logger.info("skipping %s: %s", result.location(), result.message)
            else:
                logger.debug("%s: %d import(s)", relative_path, len(result.imports))
            yield result


__all__ = ["SourceScanner"]
