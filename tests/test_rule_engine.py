from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from graph.model import GraphModel
from models.diagnostics import Violation
from rules.builtin import BUILTIN_RULE_NAMES, BUILTIN_RULES
from rules.config import ArchTestConfig
from rules.engine import Rule, run_rule, run_rules, select_rules

if TYPE_CHECKING:
    from collections.abc import Iterator


def _empty_model() -> GraphModel:
    return GraphModel(modules=[], units=[], config=ArchTestConfig())


def _always(model: GraphModel) -> Iterator[Violation]:
    yield Violation(rule="always", subject="x.go", message="x.go is always wrong")


def _broken(model: GraphModel) -> Iterator[Violation]:
    yield Violation(rule="broken", subject="a.go", message="partial output")
    raise KeyError("boom")


def test_builtin_rule_table_order_is_fixed() -> None:
    assert BUILTIN_RULE_NAMES == (
        "module-isolation",
        "layer-purity",
        "dependency-direction",
        "contract-purity",
        "layer-ordering",
        "module-cycles",
    )
    assert all(rule.description for rule in BUILTIN_RULES)


def test_select_rules_keeps_registration_order() -> None:
    selected = select_rules(BUILTIN_RULES, only=["module-cycles", "module-isolation"])

    assert [rule.name for rule in selected] == ["module-isolation", "module-cycles"]


def test_select_rules_skip_removes_rule() -> None:
    selected = select_rules(BUILTIN_RULES, skip=["layer-purity"])

    assert "layer-purity" not in [rule.name for rule in selected]
    assert len(selected) == len(BUILTIN_RULES) - 1


def test_select_rules_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="Unknown rule"):
        select_rules(BUILTIN_RULES, skip=["no-such-rule"])


def test_rule_fault_is_converted_and_does_not_stop_other_rules(
    caplog: pytest.LogCaptureFixture,
) -> None:
    rules = [
        Rule(name="broken", description="raises", check=_broken),
        Rule(name="always", description="always fails", check=_always),
    ]

    with caplog.at_level(logging.ERROR, logger="rules.engine"):
        results = run_rules(rules, _empty_model())

    broken, always = results
    assert broken.fault is not None
    assert broken.fault.rule == "broken"
    assert broken.fault.message == "KeyError: 'boom'"
    assert broken.violations == ()
    assert broken.passed is False
    assert always.fault is None
    assert [v.subject for v in always.violations] == ["x.go"]
    assert "rule broken failed" in caplog.text


def test_builtin_rules_pass_on_empty_model() -> None:
    model = _empty_model()

    assert all(run_rule(rule, model).passed for rule in BUILTIN_RULES)
