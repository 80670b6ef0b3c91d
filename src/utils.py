"""Shared path utilities for arch-test."""

from __future__ import annotations

from pathlib import PurePosixPath


def to_posix(path: str) -> str:
    """Normalize a relative path string to POSIX form without ``./`` prefixes.

    Examples:
        >>> to_posix("services\\\\auth/go.mod")
        'services/auth/go.mod'
        >>> to_posix("./a//b/")
        'a/b'
        >>> to_posix(".")
        ''
    """
    parts = [part for part in path.replace("\\", "/").split("/") if part not in ("", ".")]
    return "/".join(parts)


def parent_dir(path: str) -> str:
    """Return the POSIX parent directory of a relative path ("" for top level)."""
    parent = PurePosixPath(to_posix(path)).parent.as_posix()
    return "" if parent == "." else parent


def is_within(path: str, directory: str) -> bool:
    """Return True when ``path`` equals or lies beneath ``directory``.

    An empty ``directory`` denotes the scan root and contains everything.
    """
    if not directory:
        return True
    return path == directory or path.startswith(directory + "/")


def relative_to_dir(path: str, directory: str) -> str:
    """Strip ``directory`` from the front of ``path``.

    Examples:
        >>> relative_to_dir("services/auth/internal/domain", "services/auth")
        'internal/domain'
        >>> relative_to_dir("services/auth", "services/auth")
        ''
    """
    if not directory:
        return path
    if path == directory:
        return ""
    return path[len(directory) + 1 :]


def has_path_prefix(target: str, prefix: str) -> bool:
    """Return True when ``prefix`` is ``target`` or a slash-delimited prefix of it.

    Examples:
        >>> has_path_prefix("example.com/core/log", "example.com/core")
        True
        >>> has_path_prefix("example.com/corelib", "example.com/core")
        False
    """
    return target == prefix or target.startswith(prefix + "/")
