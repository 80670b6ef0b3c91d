from __future__ import annotations

from models.records import Module
from rules.config import ContractsConfig, LayersConfig
from rules.layers import (
    build_layer_ranks,
    classify_layer,
    is_contract_module,
    is_outward,
    is_private,
)


def _layers_config(
    *,
    layer: list[dict[str, object]],
    private: list[str] | None = None,
) -> LayersConfig:
    data: dict[str, object] = {"layer": layer}
    if private is not None:
        data["private"] = private
    return LayersConfig.model_validate(data)


def test_classify_layer_first_match_wins_with_overlapping_globs() -> None:
    config = _layers_config(
        layer=[
            {"name": "A", "globs": ["internal/*"]},
            {"name": "B", "globs": ["internal/domain"]},
        ],
    )

    assert classify_layer("internal/domain", config) == "A"


def test_classify_layer_returns_none_when_no_glob_matches() -> None:
    config = _layers_config(layer=[{"name": "core", "globs": ["internal/core"]}])

    assert classify_layer("cmd/server", config) is None
    assert classify_layer("", config) is None


def test_default_layers_put_ports_before_application() -> None:
    config = LayersConfig()

    assert classify_layer("internal/application/ports", config) == "port"
    assert classify_layer("internal/application/ports/billing", config) == "port"
    assert classify_layer("internal/application", config) == "application"
    assert classify_layer("internal/domain/invoice", config) == "domain"
    assert classify_layer("internal/infra/db", config) == "infrastructure"


def test_is_private_matches_internal_segments() -> None:
    config = LayersConfig()

    assert is_private("internal", config)
    assert is_private("internal/domain", config)
    assert is_private("pkg/internal/helpers", config)
    assert not is_private("pkg/internalize", config)
    assert not is_private("", config)


def test_is_private_uses_configured_globs() -> None:
    config = _layers_config(layer=[], private=["private/*"])

    assert is_private("private/x", config)
    assert not is_private("internal/x", config)


def test_build_layer_ranks_skips_unranked_layers() -> None:
    config = _layers_config(
        layer=[
            {"name": "domain", "globs": ["d"], "rank": 0},
            {"name": "contract", "globs": ["c"]},
        ],
    )

    assert build_layer_ranks(config) == {"domain": 0}


def test_is_outward_requires_two_ranked_layers() -> None:
    ranks = {"domain": 0, "application": 1, "adapter": 2}

    assert is_outward("domain", "adapter", ranks) is True
    assert is_outward("adapter", "domain", ranks) is False
    assert is_outward("application", "application", ranks) is False
    assert is_outward("domain", None, ranks) is False
    assert is_outward(None, "adapter", ranks) is False
    assert is_outward("domain", "contract", ranks) is False


def test_is_contract_module_matches_root_or_name() -> None:
    contracts = ContractsConfig()

    by_root = Module(name="example.com/billing-api", root="contracts/billing", manifest_path="x")
    by_name = Module(name="example.com/auth-contract", root="libs/auth", manifest_path="y")
    service = Module(name="example.com/billing", root="services/billing", manifest_path="z")

    assert is_contract_module(by_root, contracts)
    assert is_contract_module(by_name, contracts)
    assert not is_contract_module(service, contracts)
