"""Line-oriented parser for ``go.mod`` module manifests.

Only two directives matter to the validator: ``module``, which names the
module, and ``require``, which declares its direct dependencies. Both the
single-line form and the parenthesized block form are accepted and produce
the same result::

    require example.com/core v0.0.0

    require (
        example.com/core v0.0.0
        golang.org/x/text v0.14.0 // indirect
    )

Requirements marked ``// indirect`` are transitive and are dropped. Blocks of
every other directive are skipped without interpretation.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from models.diagnostics import ParseError
from models.records import Manifest
from scan.files import find_manifest_files
from utils import parent_dir

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from rules.config import ArchTestConfig

logger = logging.getLogger(__name__)

_INDIRECT = re.compile(r"//\s*indirect\b")
_TOKEN = re.compile(r"[()]|[^\s()]+")

KNOWN_DIRECTIVES = frozenset(
    {
        "module",
        "go",
        "toolchain",
        "godebug",
        "require",
        "replace",
        "exclude",
        "retract",
        "tool",
        "ignore",
    }
)


class ManifestSyntaxError(ValueError):
    """Raised for a malformed manifest line."""

    def __init__(self, line: int, message: str) -> None:
        super().__init__(message)
        self.line = line
        self.message = message


@dataclass
class _ManifestState:
    name: str | None = None
    requires: list[str] = field(default_factory=list)
    block: str | None = None
    block_line: int = 0

    def add_require(self, tokens: list[str], lineno: int) -> None:
        if len(tokens) != 2:
            raw = " ".join(tokens)
            msg = f"malformed require entry {raw!r}: expected 'path version'"
            raise ManifestSyntaxError(lineno, msg)
        path = _unquote(tokens[0])
        if path not in self.requires:
            self.requires.append(path)

    def set_module(self, tokens: list[str], lineno: int) -> None:
        if len(tokens) != 1:
            msg = "module directive must name exactly one module path"
            raise ManifestSyntaxError(lineno, msg)
        if self.name is not None:
            msg = f"duplicate module directive {tokens[0]!r}"
            raise ManifestSyntaxError(lineno, msg)
        self.name = _unquote(tokens[0])


def _unquote(token: str) -> str:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ('"', "`"):
        return token[1:-1]
    return token


def _split_comment(line: str) -> tuple[str, str]:
    code, sep, comment = line.partition("//")
    return code.strip(), (sep + comment) if sep else ""


def _handle_block_line(state: _ManifestState, tokens: list[str], lineno: int) -> None:
    if state.block == "require":
        state.add_require(tokens, lineno)
    elif state.block == "module":
        state.set_module(tokens, lineno)


def _handle_directive(state: _ManifestState, tokens: list[str], lineno: int) -> None:
    directive, args = tokens[0], tokens[1:]
    if directive not in KNOWN_DIRECTIVES:
        msg = f"unknown directive {directive!r}"
        raise ManifestSyntaxError(lineno, msg)

    if args == ["("]:
        state.block = directive
        state.block_line = lineno
        return
    if "(" in args or ")" in args:
        msg = f"unexpected parenthesis in {directive} directive"
        raise ManifestSyntaxError(lineno, msg)

    if directive == "module":
        state.set_module(args, lineno)
    elif directive == "require":
        state.add_require(args, lineno)


def parse_manifest_text(text: str) -> tuple[str, list[str]]:
    """Parse manifest text into its module name and direct requirements.

    Returns:
        Tuple of (module name, required module paths in first-seen order).

    Raises:
        ManifestSyntaxError: For an unterminated block, a stray ``)``, an
            unknown directive, a malformed requirement, or a missing or
            duplicated module directive.
    """
    state = _ManifestState()

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        code, comment = _split_comment(raw_line)
        if not code:
            continue
        tokens = _TOKEN.findall(code)

        if state.block is not None:
            if tokens == [")"]:
                state.block = None
                continue
            if "(" in tokens or ")" in tokens:
                msg = f"unexpected parenthesis inside {state.block} block"
                raise ManifestSyntaxError(lineno, msg)
            if state.block == "require" and _INDIRECT.search(comment):
                continue
            _handle_block_line(state, tokens, lineno)
            continue

        if tokens == [")"]:
            msg = "closing parenthesis without an open block"
            raise ManifestSyntaxError(lineno, msg)
        if tokens[0] == "require" and _INDIRECT.search(comment):
            continue
        _handle_directive(state, tokens, lineno)

    if state.block is not None:
        msg = f"unterminated {state.block} block"
        raise ManifestSyntaxError(state.block_line, msg)

    if state.name is None:
        raise ManifestSyntaxError(1, "missing module directive")

    return state.name, state.requires


def parse_manifest(file_path: Path, relative_path: str) -> Manifest | ParseError:
    """Parse one manifest file; failures are returned as a ParseError."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        return ParseError(path=relative_path, message=f"unreadable manifest: {exc.strerror}")
    except UnicodeDecodeError:
        return ParseError(path=relative_path, message="manifest is not valid UTF-8")

    try:
        name, requires = parse_manifest_text(text)
    except ManifestSyntaxError as exc:
        return ParseError(path=relative_path, message=exc.message, line=exc.line)

    return Manifest(
        path=relative_path,
        root=parent_dir(relative_path),
        name=name,
        requires=tuple(requires),
    )


def iter_manifests(root: Path, config: ArchTestConfig) -> Iterator[Manifest | ParseError]:
    """Yield every manifest under ``root`` in sorted path order."""
    for file_path in find_manifest_files(
        root,
        ignore_dirs=frozenset(config.ignore_dirs),
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    ):
        relative_path = file_path.relative_to(root).as_posix()
        result = parse_manifest(file_path, relative_path)
        if isinstance(result, ParseError):
            logger.info("skipping manifest %s: %s", result.location(), result.message)
        else:
            logger.debug(
                "module %s at %r requires %d module(s)",
                result.name,
                result.root,
                len(result.requires),
            )
        yield result


__all__ = [
    "ManifestSyntaxError",
    "iter_manifests",
    "parse_manifest",
    "parse_manifest_text",
]
