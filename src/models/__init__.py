"""Model namespace for arch-test records and diagnostics."""

from models.diagnostics import FatalError, ParseError, RuleFault, Violation
from models.records import CompilationUnit, Manifest, Module

__all__ = [
    "CompilationUnit",
    "FatalError",
    "Manifest",
    "Module",
    "ParseError",
    "RuleFault",
    "Violation",
]
