"""Built-in structural rules.

Each check is a pure function of the graph model. None of them reads another
rule's output, so any subset can be evaluated in any order with the same
per-rule results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph.algos import find_cycles
from models.diagnostics import Violation
from rules.config import ADAPTER, DOMAIN, PORT
from rules.engine import Rule
from rules.layers import is_outward

if TYPE_CHECKING:
    from collections.abc import Iterator

    from graph.model import GraphModel

MODULE_ISOLATION = "module-isolation"
LAYER_PURITY = "layer-purity"
DEPENDENCY_DIRECTION = "dependency-direction"
CONTRACT_PURITY = "contract-purity"
LAYER_ORDERING = "layer-ordering"
MODULE_CYCLES = "module-cycles"


def _is_third_party(target: str) -> bool:
    # Standard library paths never carry a dot in their first element.
    return "." in target.split("/", 1)[0]


def check_module_isolation(model: GraphModel) -> Iterator[Violation]:
    """No unit may import a private package of a module other than its own."""
    for unit in model.units:
        owner = model.owner_of(unit)
        if owner is None:
            continue
        for edge in model.import_edges(unit):
            resolution = edge.resolution
            if resolution is None or resolution.module.name == owner.name:
                continue
            if resolution.private:
                yield Violation(
                    rule=MODULE_ISOLATION,
                    subject=unit.path,
                    token=edge.target,
                    message=(
                        f"{unit.path} imports {edge.target!r}, an internal package "
                        f"of module {resolution.module.name}"
                    ),
                )


def check_layer_purity(model: GraphModel) -> Iterator[Violation]:
    """Domain units must not reach infrastructure, adapters or denied libraries."""
    forbidden = set(model.config.purity.forbidden_layers)
    deny = model.config.purity.deny

    for unit in model.units:
        if model.layer_of(unit) != DOMAIN:
            continue
        for edge in model.import_edges(unit):
            resolution = edge.resolution
            if resolution is not None:
                if resolution.layer in forbidden:
                    yield Violation(
                        rule=LAYER_PURITY,
                        subject=unit.path,
                        token=edge.target,
                        message=(
                            f"{unit.path} ({DOMAIN}) imports {edge.target!r} "
                            f"from layer {resolution.layer}"
                        ),
                    )
                continue
            fragment = next((frag for frag in deny if frag in edge.target), None)
            if fragment is not None:
                yield Violation(
                    rule=LAYER_PURITY,
                    subject=unit.path,
                    token=edge.target,
                    message=(
                        f"{unit.path} ({DOMAIN}) imports external package "
                        f"{edge.target!r} (denied: {fragment!r})"
                    ),
                )


def check_dependency_direction(model: GraphModel) -> Iterator[Violation]:
    """Ports may be depended upon by adapters, never the reverse."""
    for unit in model.units:
        if model.layer_of(unit) != PORT:
            continue
        for edge in model.import_edges(unit):
            resolution = edge.resolution
            if resolution is not None and resolution.layer == ADAPTER:
                yield Violation(
                    rule=DEPENDENCY_DIRECTION,
                    subject=unit.path,
                    token=edge.target,
                    message=(
                        f"{unit.path} ({PORT}) imports adapter package "
                        f"{edge.target!r} of module {resolution.module.name}"
                    ),
                )


def check_contract_purity(model: GraphModel) -> Iterator[Violation]:
    """Contract modules carry no external dependencies and no internal imports."""
    internal = model.internal_names
    for module in model.modules_of():
        if not model.is_contract(module):
            continue

        if module.has_external_dependency:
            for dependency in module.external_dependencies(internal):
                yield Violation(
                    rule=CONTRACT_PURITY,
                    subject=module.manifest_path,
                    token=dependency,
                    message=(
                        f"contract module {module.name} declares external "
                        f"dependency {dependency!r}"
                    ),
                )

        for unit in model.units_of(module):
            for edge in model.import_edges(unit):
                resolution = edge.resolution
                if resolution is None:
                    if _is_third_party(edge.target):
                        yield Violation(
                            rule=CONTRACT_PURITY,
                            subject=unit.path,
                            token=edge.target,
                            message=(
                                f"{unit.path} in contract module {module.name} "
                                f"imports external package {edge.target!r}"
                            ),
                        )
                    continue
                if resolution.private:
                    yield Violation(
                        rule=CONTRACT_PURITY,
                        subject=unit.path,
                        token=edge.target,
                        message=(
                            f"{unit.path} in contract module {module.name} imports "
                            f"{edge.target!r}, an internal package of module "
                            f"{resolution.module.name}"
                        ),
                    )


def check_layer_ordering(model: GraphModel) -> Iterator[Violation]:
    """Imports must never point outward in the layer order."""
    ranks = model.layer_ranks
    for unit in model.units:
        from_layer = model.layer_of(unit)
        if from_layer is None:
            continue
        for edge in model.import_edges(unit):
            resolution = edge.resolution
            if resolution is None:
                continue
            if is_outward(from_layer, resolution.layer, ranks):
                yield Violation(
                    rule=LAYER_ORDERING,
                    subject=unit.path,
                    token=edge.target,
                    message=(
                        f"{unit.path} ({from_layer}) imports {edge.target!r} "
                        f"from outer layer {resolution.layer}"
                    ),
                )


def check_module_cycles(model: GraphModel) -> Iterator[Violation]:
    """Declared module dependencies must form no cycle."""
    for cycle in find_cycles(model.dependency_graph):
        first = model.module_named(cycle[0])
        subject = first.manifest_path if first is not None else cycle[0]
        path = " -> ".join([*cycle, cycle[0]])
        yield Violation(
            rule=MODULE_CYCLES,
            subject=subject,
            token=", ".join(cycle),
            message=f"module dependency cycle: {path}",
        )


BUILTIN_RULES: tuple[Rule, ...] = (
    Rule(
        name=MODULE_ISOLATION,
        description="Modules must not import internal packages of other modules",
        check=check_module_isolation,
    ),
    Rule(
        name=LAYER_PURITY,
        description=(
            "Domain packages must not import infrastructure, adapters "
            "or denied external libraries"
        ),
        check=check_layer_purity,
    ),
    Rule(
        name=DEPENDENCY_DIRECTION,
        description="Port packages must not import adapter packages",
        check=check_dependency_direction,
    ),
    Rule(
        name=CONTRACT_PURITY,
        description=(
            "Contract modules must have no external dependencies "
            "and no internal-package imports"
        ),
        check=check_contract_purity,
    ),
    Rule(
        name=LAYER_ORDERING,
        description="Packages must not import packages from an outer layer",
        check=check_layer_ordering,
    ),
    Rule(
        name=MODULE_CYCLES,
        description="Declared module dependencies must be acyclic",
        check=check_module_cycles,
    ),
)

BUILTIN_RULE_NAMES: tuple[str, ...] = tuple(rule.name for rule in BUILTIN_RULES)


__all__ = [
    "BUILTIN_RULES",
    "BUILTIN_RULE_NAMES",
    "check_contract_purity",
    "check_dependency_direction",
    "check_layer_ordering",
    "check_layer_purity",
    "check_module_cycles",
    "check_module_isolation",
]
