"""Locating Go sources and go.mod manifests below a tree root."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".go"
TEST_SUFFIX = "_test.go"
MANIFEST_FILENAME = "go.mod"

GitignoreMatcher = Callable[[str], bool]


def _gitignore_files_below(root: Path) -> list[Path]:
    """Every regular .gitignore under root, ordered by relative path."""
    candidates = {root / ".gitignore", *root.rglob(".gitignore")}
    kept = [path for path in candidates if path.is_file() and not path.is_symlink()]
    return sorted(kept, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> GitignoreMatcher | None:
    """Return a predicate over absolute path strings, or None without ignores.

    Only the root ``.gitignore`` is honored unless ``nested_gitignore`` is set.
    Symlinked ignore files are skipped.
    """
    if not nested_gitignore:
        top = root / ".gitignore"
        if not top.is_file():
            return None
        return cast("GitignoreMatcher", parse_gitignore(top))

    matchers = [parse_gitignore(path) for path in _gitignore_files_below(root)]
    if not matchers:
        return None

    def any_match(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # Raised for paths outside that ignore file's base directory.
                continue
        return False

    return any_match


@dataclass(frozen=True)
class _TreeFilter:
    root: Path
    ignore_dirs: frozenset[str]
    exclude_patterns: Sequence[str]
    gitignore: GitignoreMatcher | None

    def _escapes_root(self, path: Path) -> bool:
        try:
            path.resolve().relative_to(self.root.resolve())
        except (OSError, ValueError):
            return True
        return False

    def _in_skipped_dir(self, rel_parts: tuple[str, ...]) -> bool:
        return any(
            part.startswith(".") or part in self.ignore_dirs for part in rel_parts[:-1]
        )

    def accepts(self, path: Path) -> bool:
        if path.is_symlink() or not path.is_file():
            return False
        if self._escapes_root(path):
            return False
        rel = path.relative_to(self.root)
        if self._in_skipped_dir(rel.parts):
            return False
        if self.gitignore is not None and self.gitignore(str(path)):
            return False
        rel_str = rel.as_posix()
        return not any(fnmatch(rel_str, pattern) for pattern in self.exclude_patterns)

    def collect(self, pattern: str) -> list[Path]:
        """Matching files, sorted by root-relative POSIX path."""
        found = [path for path in self.root.rglob(pattern) if self.accepts(path)]
        return sorted(found, key=lambda p: p.relative_to(self.root).as_posix())


def _tree_filter(
    directory: Path,
    ignore_dirs: frozenset[str],
    exclude_patterns: Sequence[str] | None,
    nested_gitignore: bool,
) -> _TreeFilter:
    return _TreeFilter(
        root=directory,
        ignore_dirs=ignore_dirs,
        exclude_patterns=tuple(exclude_patterns or ()),
        gitignore=_build_gitignore_matcher(directory, nested_gitignore=nested_gitignore),
    )


def find_source_files(
    directory: Path,
    *,
    include_tests: bool = False,
    ignore_dirs: frozenset[str] = frozenset(),
    exclude_patterns: Sequence[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find Go compilation units below ``directory``.

    Hidden directories and any directory named in ``ignore_dirs`` are never
    entered. ``exclude_patterns`` are fnmatch globs over the root-relative
    path. Files matched by ``.gitignore`` are dropped, as are symlinks and
    anything resolving outside the root. ``*_test.go`` files are kept only
    when ``include_tests`` is set.

    Yields:
        Paths in lexicographic order of their relative path.
    """
    tree = _tree_filter(directory, ignore_dirs, exclude_patterns, nested_gitignore)
    for path in tree.collect(f"*{SOURCE_SUFFIX}"):
        if path.name.endswith(TEST_SUFFIX) and not include_tests:
            continue
        yield path


def find_manifest_files(
    directory: Path,
    *,
    ignore_dirs: frozenset[str] = frozenset(),
    exclude_patterns: Sequence[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find every ``go.mod`` manifest below ``directory`` in sorted order."""
    tree = _tree_filter(directory, ignore_dirs, exclude_patterns, nested_gitignore)
    manifests = tree.collect(MANIFEST_FILENAME)
    logger.debug("found %d manifest(s) under %s", len(manifests), directory)
    yield from manifests


__all__ = [
    "MANIFEST_FILENAME",
    "SOURCE_SUFFIX",
    "TEST_SUFFIX",
    "find_manifest_files",
    "find_source_files",
]
