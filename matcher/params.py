"""
matcher/params.py — generator wiązań (kandydackich podstawień) dla szablonu.

TemplateManager.create_template_params(structure, arguments) -> list[Bindings]

Dla każdej zmiennej-węzła ograniczonej w szablonie łukiem ze stałego źródła
(np. concept_person → _x) kandydatami są argumenty spełniające wszystkie takie
ograniczenia. Wynikiem jest iloczyn kartezjański niepustych list kandydatów.
Zmienne bez kandydatów pozostają wolne (wiąże je dopiero wyszukiwanie).
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable

from graph_model.types import Bindings, ElementType, Handle
from kb.store import KnowledgeBase

from .template import Template, build_template


class TemplateManager:
    """Generator zestawów wiązań szablonu względem listy argumentów."""

    def __init__(self, kb: KnowledgeBase) -> None:
        self._kb = kb

    def create_template_params(
        self,
        structure: Handle | Template,
        arguments: Iterable[Handle],
    ) -> list[Bindings]:
        """
        Zwraca uporządkowaną listę zestawów wiązań do sprawdzenia.

        Zawsze co najmniej jeden zestaw: przy braku argumentów lub kandydatów
        jest to pusty zestaw (wyszukiwanie bez ograniczeń).
        """
        template  = structure if isinstance(structure, Template) else build_template(self._kb, structure)
        arguments = list(arguments)
        if not arguments:
            return [{}]

        variables:  list[Handle]       = []
        candidates: list[list[Handle]] = []
        for var in template.var_nodes:
            constraints = self._constraints(template, var)
            if not constraints:
                continue
            fitting = [a for a in arguments if self._fits(a, constraints)]
            if fitting:
                variables.append(var)
                candidates.append(fitting)

        if not variables:
            return [{}]
        return [dict(zip(variables, combo)) for combo in itertools.product(*candidates)]

    @staticmethod
    def _constraints(template: Template, var: Handle) -> list[tuple[Handle, ElementType]]:
        """Pary (stałe źródło, typ łuku) dla łuków szablonu prowadzących do zmiennej."""
        return [
            (t.source, t.arc_type)
            for t in template.triples
            if t.target == var and not template.is_var(t.source)
        ]

    def _fits(self, argument: Handle, constraints: list[tuple[Handle, ElementType]]) -> bool:
        return all(self._kb.check_arc(source, argument, arc_type) for source, arc_type in constraints)
