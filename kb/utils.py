"""
kb/utils.py — pomocnicze przejścia po bazie wiedzy (zbiory, relacje, sekwencje).

Publiczne API:
  get_all_with_type(kb, set_node, type)             -> list[Handle]
  get_any_by_out_relation(kb, node, relation)       -> Handle
  get_next_from_set(kb, set_node, current, seq_rel) -> Handle
  is_in_set(kb, set_node, element)                  -> bool
  add_to_set(kb, set_node, element)                 -> Handle
"""

from __future__ import annotations

from graph_model.types import INVALID, ElementType, Handle

from .store import KnowledgeBase

_ACCESS = ElementType.ARC_ACCESS_CONST_POS_PERM


def get_all_with_type(
    kb:       KnowledgeBase,
    set_node: Handle,
    type:     ElementType = ElementType.ANY,
) -> list[Handle]:
    """Elementy zbioru (cele pozytywnych łuków przynależności) pasujące do typu, w kolejności dodania."""
    return [tgt for _, _, tgt in kb.iterator3(set_node, _ACCESS, type)]


def get_any_by_out_relation(kb: KnowledgeBase, node: Handle, relation: Handle) -> Handle:
    """
    Zwraca cel łuku wychodzącego z node oznaczonego relacją (rolą) relation,
    np. reguła —rrel_main_key_element→ formuła. INVALID gdy brak.
    """
    found = kb.iterator5(node, ElementType.ANY, ElementType.ANY, _ACCESS, relation)
    if not found:
        return INVALID
    return found[0][2]


def _membership_arc(kb: KnowledgeBase, set_node: Handle, element: Handle) -> Handle:
    found = kb.iterator3(set_node, _ACCESS, element)
    return found[0][1] if found else INVALID


def get_next_from_set(
    kb:       KnowledgeBase,
    set_node: Handle,
    current:  Handle,
    sequence: Handle,
) -> Handle:
    """
    Następnik elementu w zbiorze uporządkowanym.

    Kolejność kodowana jest łukiem wspólnym między łukami przynależności:
        (set → current) ⇒ (set → next),  oznaczonym relacją sequence.
    Zwraca INVALID gdy current nie należy do zbioru albo nie ma następnika.
    """
    arc = _membership_arc(kb, set_node, current)
    if arc == INVALID:
        return INVALID
    for _, _, next_arc, _, _ in kb.iterator5(
        arc, ElementType.ARC_COMMON, ElementType.ARC_ACCESS, _ACCESS, sequence
    ):
        if kb.get_source(next_arc) == set_node:
            return kb.get_target(next_arc)
    return INVALID


def is_in_set(kb: KnowledgeBase, set_node: Handle, element: Handle) -> bool:
    return kb.check_arc(set_node, element, _ACCESS)


def add_to_set(kb: KnowledgeBase, set_node: Handle, element: Handle) -> Handle:
    """Dodaje element do zbioru (idempotentnie). Zwraca łuk przynależności."""
    arc = _membership_arc(kb, set_node, element)
    if arc == INVALID:
        arc = kb.create_arc(_ACCESS, set_node, element)
    return arc
