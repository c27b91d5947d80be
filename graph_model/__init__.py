"""
graph_model — typy elementów grafowej bazy wiedzy ProveGraph.

Moduły:
  types    — Handle, INVALID, Bindings, ElementType, Element
  keynodes — Keynodes (węzły kluczowe rozwiązywane po identyfikatorze)
"""

from .types import (
    INVALID,
    Bindings,
    Element,
    ElementType,
    Handle,
)
from .keynodes import Keynodes

__all__ = [
    "INVALID",
    "Bindings",
    "Element",
    "ElementType",
    "Handle",
    "Keynodes",
]
