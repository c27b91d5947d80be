"""
Pomocnicze budowanie małych baz wiedzy dla testów.

Konwencja nazw: identyfikator zaczynający się od "_" to zmienna (node_var),
pozostałe to stałe. Formuła atomowa concept(x) to struktura z jednym
łukiem-zmienną concept → x.
"""

from __future__ import annotations

from graph_model import INVALID, ElementType, Handle, Keynodes
from kb import KnowledgeBase
from kb.utils import add_to_set, is_in_set


class RuleKB:
    """Baza wiedzy z metodami do budowania faktów, formuł, reguł i zbiorów reguł."""

    def __init__(self) -> None:
        self.kb = KnowledgeBase()
        self.k  = Keynodes.resolve(self.kb)

    # ------------------------------------------------------------------
    # Elementy i fakty
    # ------------------------------------------------------------------

    def node(self, idtf: str) -> Handle:
        type = ElementType.NODE_VAR if idtf.startswith("_") else ElementType.NODE_CONST
        return self.kb.resolve_node(idtf, type)

    def fact(self, concept: str, element: str) -> Handle:
        return add_to_set(self.kb, self.node(concept), self.node(element))

    def has(self, concept: str, element: str) -> bool:
        c, e = self.kb.find_by_idtf(concept), self.kb.find_by_idtf(element)
        return c != INVALID and e != INVALID and is_in_set(self.kb, c, e)

    def structure(self, *elements: Handle) -> Handle:
        s = self.kb.create_node(ElementType.NODE_CONST_STRUCT)
        for element in elements:
            add_to_set(self.kb, s, element)
        return s

    # ------------------------------------------------------------------
    # Formuły
    # ------------------------------------------------------------------

    def template(self, *triples: tuple[str, ElementType, str]) -> Handle:
        """Formuła atomowa z dowolnych łuków (source, typ łuku-zmiennej, target)."""
        elements: list[Handle] = []
        for source, arc_type, target in triples:
            s, t = self.node(source), self.node(target)
            arc = self.kb.create_arc(arc_type, s, t)
            elements += [s, t, arc]
        s = self.structure(*elements)
        add_to_set(self.kb, self.k.atomic_logical_formula, s)
        return s

    def atom(self, concept: str, element: str) -> Handle:
        return self.template((concept, ElementType.ARC_ACCESS_VAR_POS_PERM, element))

    def _compound(self, kind: Handle, operands: tuple[Handle, ...]) -> Handle:
        node = self.kb.create_node(ElementType.NODE_CONST)
        for operand in operands:
            add_to_set(self.kb, node, operand)
        add_to_set(self.kb, kind, node)
        return node

    def conj(self, *operands: Handle) -> Handle:
        return self._compound(self.k.conjunction, operands)

    def disj(self, *operands: Handle) -> Handle:
        return self._compound(self.k.disjunction, operands)

    def neg(self, *operands: Handle) -> Handle:
        return self._compound(self.k.negation, operands)

    def implication(self, premise: Handle, conclusion: Handle) -> Handle:
        arc = self.kb.create_arc(ElementType.ARC_COMMON_CONST, premise, conclusion)
        add_to_set(self.kb, self.k.nrel_implication, arc)
        return arc

    # ------------------------------------------------------------------
    # Reguły
    # ------------------------------------------------------------------

    def rule(self, idtf: str, key: Handle = INVALID) -> Handle:
        rule = self.node(idtf)
        if key != INVALID:
            arc = add_to_set(self.kb, rule, key)
            add_to_set(self.kb, self.k.rrel_main_key_element, arc)
        return rule

    def simple_rule(self, idtf: str, premise: tuple[str, str], conclusion: tuple[str, str]) -> Handle:
        """Reguła premise_concept(x) → conclusion_concept(x)."""
        return self.rule(idtf, self.implication(self.atom(*premise), self.atom(*conclusion)))

    def rule_set(self, *tiers: list[Handle], idtf: str = "rules") -> Handle:
        """Zbiór reguł; kolejne argumenty to reguły kolejnych warstw (pierwszy = rrel_1)."""
        rule_set = self.node(idtf)
        previous = INVALID
        for index, rules in enumerate(tiers):
            tier = self.node(f"{idtf}_tier_{index}")
            for rule in rules:
                add_to_set(self.kb, tier, rule)
            arc = add_to_set(self.kb, rule_set, tier)
            if previous == INVALID:
                add_to_set(self.kb, self.k.rrel_1, arc)
            else:
                seq = self.kb.create_arc(ElementType.ARC_COMMON_CONST, previous, arc)
                add_to_set(self.kb, self.k.nrel_basic_sequence, seq)
            previous = arc
        return rule_set
