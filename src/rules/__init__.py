"""Rule definitions for arch-test."""

from rules.config import (
    ArchTestConfig,
    ConfigError,
    LayersConfig,
    load_config,
)
from rules.layers import classify_layer, is_outward, is_private
from rules.engine import Rule, RuleResult, run_rules, select_rules
from rules.builtin import BUILTIN_RULE_NAMES, BUILTIN_RULES

__all__ = [
    "BUILTIN_RULES",
    "BUILTIN_RULE_NAMES",
    "ArchTestConfig",
    "ConfigError",
    "LayersConfig",
    "Rule",
    "RuleResult",
    "classify_layer",
    "is_outward",
    "is_private",
    "load_config",
    "run_rules",
    "select_rules",
]
