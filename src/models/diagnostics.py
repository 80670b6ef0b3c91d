"""Diagnostic values produced by a check run."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Violation:
    """A structural breach reported by one rule."""

    rule: str
    subject: str
    message: str
    token: str = ""

    def location(self) -> str:
        return self.subject

    def to_dict(self) -> dict[str, object]:
        return {
            "rule": self.rule,
            "subject": self.subject,
            "token": self.token,
            "message": self.message,
        }


@dataclass(frozen=True)
class ParseError:
    """A source file or manifest that could not be parsed."""

    path: str
    message: str
    line: int | None = None
    kind: str = "parse-error"

    def location(self) -> str:
        if self.line is None:
            return self.path
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "path": self.path,
            "line": self.line,
            "message": self.message,
        }


@dataclass(frozen=True)
class RuleFault:
    """An internal error raised while a rule was evaluating."""

    rule: str
    message: str
    kind: str = "rule-fault"

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind, "rule": self.rule, "message": self.message}


class FatalError(Exception):
    """Raised when the tree cannot be evaluated at all."""


__all__ = ["FatalError", "ParseError", "RuleFault", "Violation"]
