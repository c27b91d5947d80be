"""
matcher/searcher.py — wyszukiwanie szablonów w bazie wiedzy (backtracking).

TemplateSearcher.search_template(structure, bindings) -> list[Bindings]

Każdy wynik rozszerza przekazane wiązania o wartości wszystkich zmiennych szablonu.
Gdy ustawiono strukturę wejściową, zmienne-węzły mogą być wiązane wyłącznie
z zarejestrowanymi parametrami (add_param).
"""

from __future__ import annotations

import logging

from graph_model.types import INVALID, Bindings, Handle
from kb.store import KnowledgeBase

from .arguments import ArgumentSet
from .template import Template, TemplateTriple, build_template

logger = logging.getLogger(__name__)


class TemplateSearcher:
    """
    Wyszukiwarka szablonów.

    Użycie::

        searcher = TemplateSearcher(kb)
        searcher.add_param(john)
        searcher.set_input_structure(case)
        results = searcher.search_template(atom_structure, {})
    """

    def __init__(self, kb: KnowledgeBase, params: ArgumentSet | None = None) -> None:
        self._kb              = kb
        self._params          = params if params is not None else ArgumentSet()
        self._input_structure = INVALID

    # ------------------------------------------------------------------
    # Parametry
    # ------------------------------------------------------------------

    @property
    def params(self) -> ArgumentSet:
        return self._params

    def add_param(self, handle: Handle) -> None:
        self._params.add(handle)

    def set_input_structure(self, structure: Handle) -> None:
        self._input_structure = structure

    @property
    def input_structure(self) -> Handle:
        return self._input_structure

    # ------------------------------------------------------------------
    # Wyszukiwanie
    # ------------------------------------------------------------------

    def search_template(self, structure: Handle | Template, bindings: Bindings) -> list[Bindings]:
        """
        Zwraca wszystkie podstawienia rozszerzające bindings, przy których
        szablon występuje w bazie. Pusta lista gdy brak dopasowań.
        """
        template = structure if isinstance(structure, Template) else build_template(self._kb, structure)

        results: list[Bindings] = []
        self._match(template, list(template.triples), dict(bindings), results)

        if self._kb.is_valid(self._input_structure):
            results = [r for r in results if self._within_params(template, r)]

        logger.debug(
            "Szablon %s: %d dopasowań",
            self._kb.system_idtf(template.structure), len(results),
        )
        return results

    def _within_params(self, template: Template, bindings: Bindings) -> bool:
        return all(bindings[v] in self._params for v in template.var_nodes if v in bindings)

    def _match(
        self,
        template:  Template,
        remaining: list[TemplateTriple],
        current:   Bindings,
        results:   list[Bindings],
    ) -> None:
        if not remaining:
            results.append(dict(current))
            return

        triple = max(remaining, key=lambda t: self._bound_count(template, t, current))
        rest   = [t for t in remaining if t is not triple]

        for candidate in self._candidates(template, triple, current):
            extended = self._bind(template, triple, candidate, current)
            if extended is not None:
                self._match(template, rest, extended, results)

    @staticmethod
    def _bound_count(template: Template, triple: TemplateTriple, current: Bindings) -> int:
        return sum(
            template.value(h, current) != INVALID
            for h in (triple.source, triple.arc, triple.target)
        )

    def _candidates(
        self,
        template: Template,
        triple:   TemplateTriple,
        current:  Bindings,
    ) -> list[tuple[Handle, Handle, Handle]]:
        kb  = self._kb
        arc = template.value(triple.arc, current)

        # łuk już znany (stała albo związana zmienna): jedyny kandydat
        if arc != INVALID:
            if not kb.is_valid(arc) or not kb.get_type(arc).matches(triple.arc_type):
                return []
            return [(kb.get_source(arc), arc, kb.get_target(arc))]

        source = template.value(triple.source, current)
        target = template.value(triple.target, current)
        if source != INVALID and not kb.is_valid(source):
            return []
        if target != INVALID and not kb.is_valid(target):
            return []
        return kb.iterator3(
            source if source != INVALID else template.var_type(triple.source),
            triple.arc_type,
            target if target != INVALID else template.var_type(triple.target),
        )

    @staticmethod
    def _bind(
        template:  Template,
        triple:    TemplateTriple,
        candidate: tuple[Handle, Handle, Handle],
        current:   Bindings,
    ) -> Bindings | None:
        extended = dict(current)
        for element, value in zip((triple.source, triple.arc, triple.target), candidate):
            if template.is_var(element):
                bound = extended.get(element, INVALID)
                if bound == INVALID:
                    extended[element] = value
                elif bound != value:
                    return None
            elif element != value:
                return None
        return extended
