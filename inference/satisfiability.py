"""
inference/satisfiability.py — werdykty spełnialności reguł względem modelu.

Werdykt dla pary (reguła, model) trzymany jest w indeksie w pamięci,
a przy persist=True także w bazie wiedzy:

    reguła ⇒ model                      (łuk wspólny stały)
    nrel_satisfiable_formula → ten łuk  (pos_temp = spełnialna, neg_temp = niespełnialna)

Dla każdej pary istnieje co najwyżej jeden werdykt; zapis zawsze najpierw czyści.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from graph_model.keynodes import Keynodes
from graph_model.types import ElementType, Handle
from kb.store import KnowledgeBase

logger = logging.getLogger(__name__)


class Verdict(StrEnum):
    UNKNOWN       = "unknown"
    SATISFIABLE   = "satisfiable"
    UNSATISFIABLE = "unsatisfiable"


class SatisfiabilityRegistry:
    """Indeks werdyktów (reguła, model) → Verdict, opcjonalnie odzwierciedlany w bazie."""

    def __init__(self, kb: KnowledgeBase, keynodes: Keynodes, persist: bool = True) -> None:
        self._kb       = kb
        self._keynodes = keynodes
        self._persist  = persist
        self._verdicts: dict[tuple[Handle, Handle], Verdict] = {}

    def get(self, rule: Handle, model: Handle) -> Verdict:
        verdict = self._verdicts.get((rule, model))
        if verdict is not None:
            return verdict
        if self._persist:
            return self._read_from_kb(rule, model)
        return Verdict.UNKNOWN

    def clear(self, rule: Handle, model: Handle) -> None:
        self._verdicts.pop((rule, model), None)
        if self._persist:
            for arc in self._verdict_arcs(rule, model):
                self._kb.erase_element(arc)

    def add(self, rule: Handle, model: Handle, verdict: Verdict) -> None:
        self.clear(rule, model)
        if verdict is Verdict.UNKNOWN:
            return
        self._verdicts[(rule, model)] = verdict
        if self._persist:
            arc = self._kb.create_arc(ElementType.ARC_COMMON_CONST, rule, model)
            access = (
                ElementType.ARC_ACCESS_CONST_POS_TEMP
                if verdict is Verdict.SATISFIABLE
                else ElementType.ARC_ACCESS_CONST_NEG_TEMP
            )
            self._kb.create_arc(access, self._keynodes.nrel_satisfiable_formula, arc)
        logger.debug(
            "Reguła %s w modelu %s: %s",
            self._kb.system_idtf(rule), self._kb.system_idtf(model), verdict,
        )

    def count(self, rule: Handle, model: Handle) -> int:
        """Liczba zapisanych werdyktów dla pary (w bazie albo w pamięci)."""
        if self._persist:
            return len(self._verdict_arcs(rule, model))
        return int((rule, model) in self._verdicts)

    # ------------------------------------------------------------------

    def _verdict_arcs(self, rule: Handle, model: Handle) -> list[Handle]:
        if not (self._kb.is_valid(rule) and self._kb.is_valid(model)):
            return []
        return [
            arc
            for _, arc, _, _, _ in self._kb.iterator5(
                rule,
                ElementType.ARC_COMMON,
                model,
                ElementType.ARC_ACCESS,
                self._keynodes.nrel_satisfiable_formula,
            )
        ]

    def _read_from_kb(self, rule: Handle, model: Handle) -> Verdict:
        if not (self._kb.is_valid(rule) and self._kb.is_valid(model)):
            return Verdict.UNKNOWN
        for *_, attr_arc, _ in self._kb.iterator5(
            rule,
            ElementType.ARC_COMMON,
            model,
            ElementType.ARC_ACCESS,
            self._keynodes.nrel_satisfiable_formula,
        ):
            type = self._kb.get_type(attr_arc)
            if type.matches(ElementType.NEG):
                return Verdict.UNSATISFIABLE
            if type.matches(ElementType.POS):
                return Verdict.SATISFIABLE
        return Verdict.UNKNOWN
