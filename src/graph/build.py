"""Build the graph model from a source tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from graph.model import GraphModel, owning_module
from manifest.gomod import iter_manifests
from models.diagnostics import FatalError, ParseError
from models.records import CompilationUnit, Manifest, Module
from scan.sources import SourceScanner

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from rules.config import ArchTestConfig

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    model: GraphModel
    parse_errors: list[ParseError] = field(default_factory=list)
    # Every source file visited, including those that failed to parse.
    source_file_count: int = 0


def build_modules(manifests: list[Manifest]) -> list[Module]:
    """Turn parsed manifests into modules.

    Raises:
        FatalError: If two manifests declare the same module name, since
            imports of that name could not be attributed to one root.
    """
    declared_by: dict[str, str] = {}
    for manifest in manifests:
        other = declared_by.get(manifest.name)
        if other is not None:
            msg = (
                f"module {manifest.name!r} is declared by both {other} "
                f"and {manifest.path}"
            )
            raise FatalError(msg)
        declared_by[manifest.name] = manifest.path

    internal = frozenset(declared_by)
    return [
        Module(
            name=manifest.name,
            root=manifest.root,
            manifest_path=manifest.path,
            declared_dependencies=frozenset(manifest.requires),
            has_external_dependency=any(dep not in internal for dep in manifest.requires),
        )
        for manifest in manifests
    ]


def assign_owners(
    units: Iterable[CompilationUnit], modules: list[Module]
) -> list[CompilationUnit]:
    """Attach the owning module name to each unit by longest root prefix."""
    owned: list[CompilationUnit] = []
    for unit in units:
        owner = owning_module(unit.path, modules)
        if owner is None:
            logger.debug("%s is outside every module root", unit.path)
            owned.append(unit)
        else:
            owned.append(unit.model_copy(update={"owner_module": owner.name}))
    return owned


def scan_tree(root: Path, config: ArchTestConfig) -> ScanResult:
    """Run the manifest parser and the source scanner once and build the model.

    Raises:
        FatalError: If the root is missing or not a directory, if no
            manifest can be found at all, or if module identities collide.
    """
    if not root.exists():
        msg = f"root path does not exist: {root}"
        raise FatalError(msg)
    if not root.is_dir():
        msg = f"root path is not a directory: {root}"
        raise FatalError(msg)

    parse_errors: list[ParseError] = []

    manifests: list[Manifest] = []
    manifest_count = 0
    for result in iter_manifests(root, config):
        manifest_count += 1
        if isinstance(result, ParseError):
            parse_errors.append(result)
        else:
            manifests.append(result)

    if manifest_count == 0:
        msg = f"no go.mod manifests found under {root}"
        raise FatalError(msg)

    modules = build_modules(manifests)

    units: list[CompilationUnit] = []
    source_file_count = 0
    for result in SourceScanner(root, config):
        source_file_count += 1
        if isinstance(result, ParseError):
            parse_errors.append(result)
        else:
            units.append(result)

    logger.info(
        "scanned %d module(s), %d unit(s), %d parse error(s)",
        len(modules),
        len(units),
        len(parse_errors),
    )

    model = GraphModel(
        modules=modules,
        units=assign_owners(units, modules),
        config=config,
    )
    return ScanResult(
        model=model,
        parse_errors=parse_errors,
        source_file_count=source_file_count,
    )


__all__ = ["ScanResult", "assign_owners", "build_modules", "scan_tree"]
