"""Report rendering for arch-test."""

from report.render import (
    RENDERERS,
    render_json,
    render_rule_table,
    render_text,
    report_dict,
)

__all__ = [
    "RENDERERS",
    "render_json",
    "render_rule_table",
    "render_text",
    "report_dict",
]
