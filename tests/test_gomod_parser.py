from __future__ import annotations

from pathlib import Path

import pytest

from manifest.gomod import ManifestSyntaxError, parse_manifest, parse_manifest_text
from models.diagnostics import ParseError
from models.records import Manifest


def test_single_line_and_block_requires_normalize_to_same_set() -> None:
    single = """
module example.com/shop/api

go 1.22

require example.com/shop/core v0.0.0
require github.com/google/uuid v1.6.0
"""
    block = """
module example.com/shop/api

go 1.22

require (
	example.com/shop/core v0.0.0
	github.com/google/uuid v1.6.0
)
"""

    assert parse_manifest_text(single) == parse_manifest_text(block)
    name, requires = parse_manifest_text(block)
    assert name == "example.com/shop/api"
    assert requires == ["example.com/shop/core", "github.com/google/uuid"]


def test_block_opener_without_space_is_accepted() -> None:
    text = """module example.com/shop/api

require(
	example.com/shop/core v0.0.0
)

replace(
	example.com/shop/core => ../core
)
"""

    name, requires = parse_manifest_text(text)

    assert name == "example.com/shop/api"
    assert requires == ["example.com/shop/core"]


def test_indirect_and_comment_lines_are_ignored() -> None:
    text = """
// top comment
module example.com/shop/api // trailing

require (
	// a comment inside the block
	example.com/shop/core v0.0.0
	golang.org/x/sys v0.20.0 // indirect
)

require golang.org/x/text v0.14.0 // indirect
"""

    _, requires = parse_manifest_text(text)

    assert requires == ["example.com/shop/core"]


def test_other_directive_blocks_are_skipped() -> None:
    text = """
module example.com/shop/api

toolchain go1.22.1

replace (
	example.com/shop/core => ../core
)

exclude example.com/old v1.0.0

retract (
	v1.0.1
)

require example.com/shop/core v0.0.0
"""

    name, requires = parse_manifest_text(text)

    assert name == "example.com/shop/api"
    assert requires == ["example.com/shop/core"]


def test_quoted_module_path_is_unquoted() -> None:
    name, requires = parse_manifest_text('module "example.com/shop/api"\n')

    assert name == "example.com/shop/api"
    assert requires == []


def test_duplicate_requirement_is_kept_once() -> None:
    text = """
module example.com/a
require example.com/b v1.0.0
require example.com/b v1.1.0
"""

    _, requires = parse_manifest_text(text)

    assert requires == ["example.com/b"]


@pytest.mark.parametrize(
    ("text", "match"),
    [
        ("module example.com/a\nrequire (\n\texample.com/b v1\n", "unterminated require"),
        ("module example.com/a\nrequire example.com/b\n", "malformed require"),
        ("module example.com/a\nrequire (\n\texample.com/b\n)\n", "malformed require"),
        ("module example.com/a\n)\n", "closing parenthesis"),
        ("go 1.22\nrequire example.com/b v1\n", "missing module"),
        ("module example.com/a\nmodule example.com/b\n", "duplicate module"),
        ("module example.com/a\nfrobnicate x\n", "unknown directive"),
    ],
)
def test_malformed_manifests_raise(text: str, match: str) -> None:
    with pytest.raises(ManifestSyntaxError, match=match):
        parse_manifest_text(text)


def test_unterminated_block_reports_opening_line() -> None:
    with pytest.raises(ManifestSyntaxError) as exc_info:
        parse_manifest_text("module example.com/a\n\nrequire (\n\texample.com/b v1\n")

    assert exc_info.value.line == 3


def test_parse_manifest_returns_record_with_root(tmp_path: Path) -> None:
    manifest_dir = tmp_path / "services" / "api"
    manifest_dir.mkdir(parents=True)
    (manifest_dir / "go.mod").write_text(
        "module example.com/shop/api\n\nrequire example.com/shop/core v0.0.0\n",
        encoding="utf-8",
    )

    result = parse_manifest(manifest_dir / "go.mod", "services/api/go.mod")

    assert result == Manifest(
        path="services/api/go.mod",
        root="services/api",
        name="example.com/shop/api",
        requires=("example.com/shop/core",),
    )


def test_parse_manifest_converts_syntax_error_to_parse_error(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("module example.com/a\nrequire (\n", encoding="utf-8")

    result = parse_manifest(tmp_path / "go.mod", "go.mod")

    assert isinstance(result, ParseError)
    assert result.path == "go.mod"
    assert result.line == 2
    assert "unterminated" in result.message
