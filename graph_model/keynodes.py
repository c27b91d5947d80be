"""
graph_model/keynodes.py — węzły kluczowe (stałe identyfikatory) bazy wiedzy.

Keynodes.resolve(kb) wyszukuje każdy węzeł po identyfikatorze systemowym,
tworząc brakujące. Wynik traktujemy jako niezmienny przez cały przebieg wnioskowania.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING

from .types import ElementType, Handle

if TYPE_CHECKING:
    from kb.store import KnowledgeBase


@dataclass(frozen=True, slots=True)
class Keynodes:
    """
    Węzły kluczowe; nazwa pola = identyfikator systemowy węzła.

    Relacje sterujące:
      rrel_main_key_element     — reguła → jej formuła główna
      nrel_satisfiable_formula  — werdykt spełnialności (reguła, model)
      rrel_1                    — pierwszy element zbioru (pierwsza warstwa reguł)
      nrel_basic_sequence       — następnik w zbiorze uporządkowanym
      knowledge_base            — domyślny model (cała baza)

    Rodzaje formuł:
      atomic_logical_formula, conjunction, disjunction, negation, nrel_implication

    Rozwiązania:
      concept_solution, concept_success_solution, nrel_generated
    """
    rrel_main_key_element:    Handle
    nrel_satisfiable_formula: Handle
    rrel_1:                   Handle
    nrel_basic_sequence:      Handle
    knowledge_base:           Handle
    atomic_logical_formula:   Handle
    conjunction:              Handle
    disjunction:              Handle
    negation:                 Handle
    nrel_implication:         Handle
    concept_solution:         Handle
    concept_success_solution: Handle
    nrel_generated:           Handle

    @classmethod
    def resolve(cls, kb: KnowledgeBase) -> Keynodes:
        """Rozwiązuje (i w razie potrzeby tworzy) wszystkie węzły kluczowe w kb."""
        return cls(**{
            f.name: kb.resolve_node(f.name, ElementType.NODE_CONST)
            for f in fields(cls)
        })
