"""Layer classification for package directories."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.records import Module
    from rules.config import ContractsConfig, LayersConfig


def classify_layer(package_dir: str, layers_config: LayersConfig) -> str | None:
    """Classify a module-relative package directory into a layer tag.

    Uses first-match-wins semantics: the first layer definition whose
    glob patterns match the directory determines the layer. The module
    root itself is the empty string and only matches an explicit ``""``
    pattern.
    """
    for layer_def in layers_config.layer:
        for glob_pattern in layer_def.globs:
            if fnmatch(package_dir, glob_pattern):
                return layer_def.name
    return None


def is_private(package_dir: str, layers_config: LayersConfig) -> bool:
    """Return True when the directory is private to its owning module."""
    return any(fnmatch(package_dir, pattern) for pattern in layers_config.private)


def build_layer_ranks(layers_config: LayersConfig) -> dict[str, int]:
    """Build a mapping of layer -> rank for ordered layers only."""
    return {
        layer_def.name: layer_def.rank
        for layer_def in layers_config.layer
        if layer_def.rank is not None
    }


def is_outward(
    from_layer: str | None,
    to_layer: str | None,
    ranks: dict[str, int],
) -> bool:
    """Check if a dependency points strictly outward in the layer order.

    Unclassified or unranked layers on either side are never outward.
    """
    if from_layer is None or to_layer is None:
        return False
    if from_layer not in ranks or to_layer not in ranks:
        return False
    return ranks[to_layer] > ranks[from_layer]


def is_contract_module(module: Module, contracts_config: ContractsConfig) -> bool:
    """Return True when the module root or name matches a contract glob."""
    return any(
        fnmatch(module.root, pattern) or fnmatch(module.name, pattern)
        for pattern in contracts_config.modules
    )
