"""
inference/rule_queues.py — kolejki reguł według priorytetu (warstw).

Zbiór reguł jest zbiorem uporządkowanym warstw:
  zbiór_reguł —rrel_1→ warstwa_1
  (zbiór_reguł → warstwa_k) ⇒ (zbiór_reguł → warstwa_k+1)   oznaczone nrel_basic_sequence
Elementy warstwy to reguły, w kolejności dodania.
"""

from __future__ import annotations

import logging
from collections import deque

from graph_model.keynodes import Keynodes
from graph_model.types import INVALID, ElementType, Handle
from kb.store import KnowledgeBase
from kb.utils import get_all_with_type, get_any_by_out_relation, get_next_from_set

logger = logging.getLogger(__name__)


class RuleSetStructureError(ValueError):
    """Łańcuch warstw zbioru reguł jest niepoprawny (np. cykliczny)."""


def get_rule_tiers(kb: KnowledgeBase, keynodes: Keynodes, rule_set: Handle) -> list[Handle]:
    """
    Warstwy zbioru reguł w kolejności priorytetu.

    Raises:
        RuleSetStructureError gdy łańcuch nrel_basic_sequence tworzy cykl.
    """
    tiers: list[Handle] = []
    tier = get_any_by_out_relation(kb, rule_set, keynodes.rrel_1)
    while tier != INVALID:
        if tier in tiers:
            raise RuleSetStructureError(
                f"Cykl w łańcuchu warstw zbioru {kb.system_idtf(rule_set)}: "
                f"warstwa {kb.system_idtf(tier)} powtarza się"
            )
        tiers.append(tier)
        tier = get_next_from_set(kb, rule_set, tier, keynodes.nrel_basic_sequence)
    return tiers


def create_rules_queues_by_priority(
    kb:       KnowledgeBase,
    keynodes: Keynodes,
    rule_set: Handle,
) -> list[deque[Handle]]:
    """Jedna kolejka reguł na warstwę; indeks 0 = najwyższy priorytet."""
    queues = [
        deque(get_all_with_type(kb, tier, ElementType.NODE))
        for tier in get_rule_tiers(kb, keynodes, rule_set)
    ]
    logger.debug(
        "Zbiór reguł %s: %d warstw, reguł: %s",
        kb.system_idtf(rule_set), len(queues), [len(q) for q in queues],
    )
    return queues
