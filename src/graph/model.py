"""Immutable graph model over compilation units and modules.

The model holds two graphs that are never mixed:

* the *unit graph*: each compilation unit with its ordered import targets,
  every target resolvable on demand to an owning module and layer tag;
* the *module graph*: each module with the internal modules its manifest
  declares as dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rules.layers import (
    build_layer_ranks,
    classify_layer,
    is_contract_module,
    is_private,
)
from utils import has_path_prefix, is_within, relative_to_dir

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from models.records import CompilationUnit, Module
    from rules.config import ArchTestConfig


@dataclass(frozen=True)
class Resolution:
    """Where an import target lives inside the scanned tree."""

    module: Module
    package_dir: str
    layer: str | None
    private: bool


@dataclass(frozen=True)
class ImportEdge:
    """One import of one unit, with its resolution (None when external)."""

    unit: CompilationUnit
    target: str
    resolution: Resolution | None

    @property
    def is_external(self) -> bool:
        return self.resolution is None


class GraphModel:
    """Read-only view of the scanned tree that rules evaluate against."""

    def __init__(
        self,
        *,
        modules: list[Module],
        units: list[CompilationUnit],
        config: ArchTestConfig,
    ) -> None:
        self.config = config
        self._modules = tuple(sorted(modules, key=lambda m: (m.root, m.name)))
        self._by_name = {module.name: module for module in self._modules}
        self._units = tuple(sorted(units, key=lambda u: u.path))
        self._by_owner: dict[str, tuple[CompilationUnit, ...]] = {}
        for module in self._modules:
            self._by_owner[module.name] = tuple(
                unit for unit in self._units if unit.owner_module == module.name
            )
        # Longest names first so nested module paths win.
        self._names_by_length = sorted(self._by_name, key=lambda n: (-len(n), n))
        self._ranks = build_layer_ranks(config.layers)
        self._graph = {
            module.name: frozenset(
                dep for dep in module.declared_dependencies if dep in self._by_name
            )
            for module in self._modules
        }

    @property
    def internal_names(self) -> frozenset[str]:
        return frozenset(self._by_name)

    @property
    def dependency_graph(self) -> Mapping[str, frozenset[str]]:
        """Module name -> declared internal dependencies."""
        return dict(self._graph)

    @property
    def layer_ranks(self) -> dict[str, int]:
        return dict(self._ranks)

    @property
    def units(self) -> tuple[CompilationUnit, ...]:
        return self._units

    def modules_of(self) -> tuple[Module, ...]:
        return self._modules

    def module_named(self, name: str) -> Module | None:
        return self._by_name.get(name)

    def units_of(self, module: Module) -> tuple[CompilationUnit, ...]:
        return self._by_owner.get(module.name, ())

    def owner_of(self, unit: CompilationUnit) -> Module | None:
        if unit.owner_module is None:
            return None
        return self._by_name.get(unit.owner_module)

    def package_dir_of(self, unit: CompilationUnit) -> str | None:
        """Module-relative directory of the unit, or None when it has no owner."""
        owner = self.owner_of(unit)
        if owner is None:
            return None
        return relative_to_dir(unit.directory, owner.root)

    def layer_of(self, unit: CompilationUnit) -> str | None:
        package_dir = self.package_dir_of(unit)
        if package_dir is None:
            return None
        return classify_layer(package_dir, self.config.layers)

    def is_contract(self, module: Module) -> bool:
        return is_contract_module(module, self.config.contracts)

    def resolve_import(self, target: str) -> Resolution | None:
        """Resolve an import target by longest matching module name.

        Returns None for targets outside every scanned module (standard
        library and third-party packages).
        """
        for name in self._names_by_length:
            if has_path_prefix(target, name):
                module = self._by_name[name]
                package_dir = relative_to_dir(target, name)
                return Resolution(
                    module=module,
                    package_dir=package_dir,
                    layer=classify_layer(package_dir, self.config.layers),
                    private=is_private(package_dir, self.config.layers),
                )
        return None

    def import_edges(self, unit: CompilationUnit) -> Iterator[ImportEdge]:
        """Yield the unit's imports in source order with their resolutions."""
        for target in unit.imports:
            yield ImportEdge(unit=unit, target=target, resolution=self.resolve_import(target))


def owning_module(path: str, modules: list[Module]) -> Module | None:
    """Return the module whose root is the longest directory prefix of ``path``."""
    best: Module | None = None
    for module in modules:
        if is_within(path, module.root) and (
            best is None or len(module.root) > len(best.root)
        ):
            best = module
    return best


__all__ = ["GraphModel", "ImportEdge", "Resolution", "owning_module"]
