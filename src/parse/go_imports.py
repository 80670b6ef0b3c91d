"""Tree-sitter based import clause extraction for Go sources."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tree_sitter import Language, Node, Parser
from tree_sitter_go import language as get_go_language

from models.diagnostics import ParseError
from models.records import CompilationUnit

if TYPE_CHECKING:
    from pathlib import Path

_PARSER: Parser | None = None

_PREAMBLE_SKIP = frozenset({"comment"})

_DECLARATION_KEYWORDS = frozenset({"func", "type", "var", "const"})


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the Go language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_go_language())
        _PARSER = Parser(lang)

    return _PARSER


def _first_error_line(node: Node) -> int:
    """Return the 1-based line of the first ERROR or missing node under ``node``."""
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error or child.type == "ERROR" or child.is_missing:
            return _first_error_line(child)
    return node.start_point[0] + 1


def _starts_declaration(node: Node) -> bool:
    """Return True if the node's first token is a declaration keyword."""
    first: Node | None = node
    while first is not None and first.children:
        first = first.children[0]
    return first is not None and first.type in _DECLARATION_KEYWORDS


def _unquote(raw: str) -> str:
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ('"', "`"):
        return raw[1:-1]
    return raw


def _package_name(node: Node) -> str | None:
    for child in node.children:
        if child.type == "package_identifier" and child.text:
            return child.text.decode("utf8")
    return None


def _import_paths(node: Node) -> list[str]:
    """Collect import paths from an ``import_declaration`` in source order."""
    paths: list[str] = []
    specs: list[Node] = []
    for child in node.children:
        if child.type == "import_spec":
            specs.append(child)
        elif child.type == "import_spec_list":
            specs.extend(c for c in child.children if c.type == "import_spec")

    for spec in specs:
        path_node = spec.child_by_field_name("path")
        if path_node is not None and path_node.text:
            paths.append(_unquote(path_node.text.decode("utf8")))
    return paths


def parse_source(source: bytes, relative_path: str) -> CompilationUnit | ParseError:
    """Parse the preamble (package clause and imports) of a Go source file.

    Only the top-level nodes that precede the first ordinary declaration are
    inspected. Syntax errors further down, inside function bodies or type
    declarations, do not affect the import clauses and are not reported.

    Args:
        source: Raw file contents
        relative_path: POSIX path of the file relative to the scan root

    Returns:
        A CompilationUnit whose imports preserve source order, or a
        ParseError when the package clause or an import clause is malformed.
    """
    tree = _get_parser().parse(source)

    package: str | None = None
    imports: list[str] = []

    for child in tree.root_node.children:
        if child.type in _PREAMBLE_SKIP:
            continue
        if child.type == "package_clause":
            if child.has_error or package is not None:
                return ParseError(
                    path=relative_path,
                    message="malformed package clause",
                    line=_first_error_line(child),
                )
            package = _package_name(child)
            continue
        if child.type == "import_declaration":
            if child.has_error:
                return ParseError(
                    path=relative_path,
                    message="malformed import declaration",
                    line=_first_error_line(child),
                )
            imports.extend(_import_paths(child))
            continue
        if (child.type == "ERROR" or child.is_missing) and not (
            package is not None and _starts_declaration(child)
        ):
            return ParseError(
                path=relative_path,
                message="syntax error before first declaration",
                line=_first_error_line(child),
            )
        break

    if package is None:
        return ParseError(path=relative_path, message="missing package clause", line=1)

    return CompilationUnit(path=relative_path, package=package, imports=tuple(imports))


def parse_file(file_path: Path, relative_path: str) -> CompilationUnit | ParseError:
    """Read and parse one source file; I/O and decoding failures become ParseErrors."""
    try:
        source = file_path.read_bytes()
        source.decode("utf-8")
    except OSError as exc:
        return ParseError(path=relative_path, message=f"unreadable file: {exc.strerror}")
    except UnicodeDecodeError:
        return ParseError(path=relative_path, message="file is not valid UTF-8")

    return parse_source(source, relative_path)


__all__ = ["parse_file", "parse_source"]
