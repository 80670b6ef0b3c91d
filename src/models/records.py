"""Records describing the scanned tree: compilation units, manifests, modules.

All records are frozen pydantic models. They are created once per scan pass
and never mutated afterwards; derived values (owner module, external
dependency flag) are attached with ``model_copy`` while the graph model is
being built.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CompilationUnit(BaseModel):
    """One source file and the import targets it declares."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="POSIX path relative to the scan root")
    package: str = Field(description="Declared package clause identifier")
    imports: tuple[str, ...] = Field(
        default=(),
        description="Raw import targets in the order they are written",
    )
    owner_module: str | None = Field(
        default=None,
        description="Name of the module whose root contains this file",
    )

    @property
    def directory(self) -> str:
        """POSIX directory of the unit relative to the scan root."""
        head, _, _ = self.path.rpartition("/")
        return head


class Manifest(BaseModel):
    """One parsed ``go.mod`` manifest."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="POSIX path of the manifest file")
    root: str = Field(description="POSIX module root directory ('' for scan root)")
    name: str = Field(description="Declared module identity")
    requires: tuple[str, ...] = Field(
        default=(),
        description="Direct dependency module paths, first occurrence order",
    )


class Module(BaseModel):
    """A module in the dependency graph."""

    model_config = ConfigDict(frozen=True)

    name: str
    root: str
    manifest_path: str
    declared_dependencies: frozenset[str] = Field(default_factory=frozenset)
    has_external_dependency: bool = False

    def external_dependencies(self, internal: frozenset[str]) -> list[str]:
        """Declared dependencies outside ``internal``, sorted."""
        return sorted(dep for dep in self.declared_dependencies if dep not in internal)


__all__ = ["CompilationUnit", "Manifest", "Module"]
