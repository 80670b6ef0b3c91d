from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from models.diagnostics import ParseError
from models.records import CompilationUnit
from rules.config import ArchTestConfig
from scan.files import _build_gitignore_matcher, find_manifest_files, find_source_files
from scan.sources import SourceScanner

if TYPE_CHECKING:
    from pathlib import Path


def _write(root: Path, rel_path: str, content: str = "package x\n") -> None:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _rel(root: Path, paths: object) -> list[str]:
    return [path.relative_to(root).as_posix() for path in paths]  # type: ignore[attr-defined]


def test_find_source_files_sorted_and_filtered(tmp_path: Path) -> None:
    _write(tmp_path, "b/z.go")
    _write(tmp_path, "a/y.go")
    _write(tmp_path, "a/y_test.go")
    _write(tmp_path, "a/notes.txt")
    _write(tmp_path, "vendor/dep/d.go")
    _write(tmp_path, ".cache/c.go")
    _write(tmp_path, "a/testdata/t.go")

    results = _rel(
        tmp_path,
        find_source_files(tmp_path, ignore_dirs=frozenset({"vendor", "testdata"})),
    )

    assert results == ["a/y.go", "b/z.go"]


def test_find_source_files_can_include_tests(tmp_path: Path) -> None:
    _write(tmp_path, "a/y.go")
    _write(tmp_path, "a/y_test.go")

    results = _rel(tmp_path, find_source_files(tmp_path, include_tests=True))

    assert results == ["a/y.go", "a/y_test.go"]


def test_find_source_files_honors_exclude_patterns_and_gitignore(tmp_path: Path) -> None:
    _write(tmp_path, "keep/k.go")
    _write(tmp_path, "tools/gen.go")
    _write(tmp_path, "keep/model_gen.go")
    (tmp_path / ".gitignore").write_text("*_gen.go\n", encoding="utf-8")

    results = _rel(
        tmp_path,
        find_source_files(tmp_path, exclude_patterns=["tools/*"]),
    )

    assert results == ["keep/k.go"]


def test_find_manifest_files_skips_vendored_manifests(tmp_path: Path) -> None:
    _write(tmp_path, "go.mod", "module example.com/root\n")
    _write(tmp_path, "svc/go.mod", "module example.com/root/svc\n")
    _write(tmp_path, "vendor/example.com/dep/go.mod", "module example.com/dep\n")

    results = _rel(
        tmp_path,
        find_manifest_files(tmp_path, ignore_dirs=frozenset({"vendor"})),
    )

    assert results == ["go.mod", "svc/go.mod"]


def test_source_scanner_is_restartable_and_visits_each_file_once(tmp_path: Path) -> None:
    _write(tmp_path, "a/one.go", 'package a\n\nimport "fmt"\n')
    _write(tmp_path, "a/two.go", "package a\n")
    _write(tmp_path, "b/broken.go", "package b\n\nimport (\n")

    scanner = SourceScanner(tmp_path, ArchTestConfig())
    first = list(scanner)
    second = list(scanner)

    assert first == second
    assert [type(item) for item in first] == [CompilationUnit, CompilationUnit, ParseError]
    paths = [item.path for item in first]
    assert paths == ["a/one.go", "a/two.go", "b/broken.go"]
    on_disk = sorted(p.relative_to(tmp_path).as_posix() for p in tmp_path.rglob("*.go"))
    assert sorted(paths) == on_disk


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_source_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root, "pkg/module.go")

    external_root = tmp_path / "external"
    _write(external_root, "leak.go")

    symlink_dir = repo_root / "linked"
    symlink_dir.symlink_to(external_root, target_is_directory=True)

    results = _rel(repo_root, find_source_files(repo_root))

    assert "pkg/module.go" in results
    assert "linked/leak.go" not in results


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_nested_gitignore_skips_symlinked_gitignore(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root, "pkg/module.go")
    (repo_root / ".gitignore").write_text("*.bin\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / ".gitignore").write_text("pkg/module.go\n", encoding="utf-8")

    linked_dir = repo_root / "linked"
    linked_dir.mkdir()
    (linked_dir / ".gitignore").symlink_to(external_root / ".gitignore")

    matcher = _build_gitignore_matcher(repo_root, nested_gitignore=True)
    assert matcher is not None
    assert matcher(str(repo_root / "pkg" / "module.go")) is False
