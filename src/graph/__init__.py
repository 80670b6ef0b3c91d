"""Graph model and algorithms for arch-test."""

from graph.algos import canonical_rotation, find_cycles
from graph.model import GraphModel, ImportEdge, Resolution

__all__ = [
    "GraphModel",
    "ImportEdge",
    "Resolution",
    "canonical_rotation",
    "find_cycles",
]
