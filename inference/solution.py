"""
inference/solution.py — rekord rozwiązania przebiegu wnioskowania.

Węzeł rozwiązania w bazie:
  concept_solution → rozwiązanie
  concept_success_solution → rozwiązanie        (tylko gdy cel osiągnięty)
  rozwiązanie ⇒ zbiór_wygenerowanych            (łuk oznaczony nrel_generated)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from graph_model.keynodes import Keynodes
from graph_model.types import INVALID, ElementType, Handle
from kb.store import KnowledgeBase
from kb.utils import add_to_set


@dataclass(slots=True)
class RuleAttempt:
    """Jedna próba użycia reguły w przebiegu."""
    rule:      Handle
    idtf:      str
    tier:      int
    used:      bool
    generated: int = 0


@dataclass(slots=True)
class Solution:
    """
    Wynik apply_inference.

    - achieved:  czy cel został osiągnięty
    - node:      węzeł rozwiązania w bazie
    - attempts:  próby reguł w kolejności wykonania
    - generated: elementy utworzone przez użyte reguły
    - restarts:  liczba powrotów do warstwy 0
    """
    achieved:  bool
    node:      Handle = INVALID
    attempts:  list[RuleAttempt] = field(default_factory=list)
    generated: list[Handle]      = field(default_factory=list)
    restarts:  int = 0

    @property
    def used_rules(self) -> list[RuleAttempt]:
        return [a for a in self.attempts if a.used]


class SolutionTreeGenerator:
    def __init__(self, kb: KnowledgeBase, keynodes: Keynodes) -> None:
        self._kb       = kb
        self._keynodes = keynodes

    def create_solution(
        self,
        achieved:  bool,
        attempts:  Iterable[RuleAttempt] = (),
        generated: Iterable[Handle]      = (),
        restarts:  int = 0,
    ) -> Solution:
        kb, k = self._kb, self._keynodes
        generated = [h for h in generated if kb.is_valid(h)]

        node = kb.create_node(ElementType.NODE_CONST_STRUCT)
        add_to_set(kb, k.concept_solution, node)
        if achieved:
            add_to_set(kb, k.concept_success_solution, node)

        if generated:
            generated_set = kb.create_node(ElementType.NODE_CONST_STRUCT)
            for handle in generated:
                add_to_set(kb, generated_set, handle)
            arc = kb.create_arc(ElementType.ARC_COMMON_CONST, node, generated_set)
            add_to_set(kb, k.nrel_generated, arc)

        return Solution(
            achieved=achieved,
            node=node,
            attempts=list(attempts),
            generated=generated,
            restarts=restarts,
        )
