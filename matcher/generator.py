"""
matcher/generator.py — generowanie konstrukcji wg szablonu.

TemplateGenerator.generate(structure, bindings, output)           -> (Bindings, list[Handle])
TemplateGenerator.search_or_generate(structure, bindings, output) -> GenerationResult

Generowanie:
  - niezwiązane zmienne-węzły → nowe węzły stałe (dopisywane do argumentów,
    gdy wyszukiwarka ma strukturę wejściową)
  - łuki-zmienne szablonu → nowe łuki stałe (w kolejności zależności)
  - wszystkie nowe elementy trafiają do struktury wyjściowej (jeśli podana)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from graph_model.types import INVALID, Bindings, Handle
from kb.store import KnowledgeBase
from kb.utils import add_to_set

from .searcher import TemplateSearcher
from .template import Template, TemplateError, build_template

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GenerationResult:
    """
    Wynik search_or_generate.

    - found:     szablon był już w bazie
    - generated: elementy utworzone (pusta lista gdy found)
    - bindings:  podstawienia — znalezione albo użyte do generowania
    """
    found:     bool
    generated: list[Handle] = field(default_factory=list)
    bindings:  list[Bindings] = field(default_factory=list)

    @property
    def value(self) -> bool:
        return self.found or bool(self.generated)


class TemplateGenerator:
    """
    Generator konstrukcji; korzysta z wyszukiwarki (i jej zbioru parametrów).

    generated_count — łączna liczba utworzonych elementów; menedżer wnioskowania
    porównuje ją przed i po próbie reguły, żeby wykryć brak postępu.
    created_since(n) — elementy utworzone od chwili, gdy generated_count było n
    (także te z generowania przerwanego błędem).
    """

    def __init__(self, kb: KnowledgeBase, searcher: TemplateSearcher) -> None:
        self._kb       = kb
        self._searcher = searcher
        self._created: list[Handle] = []

    @property
    def generated_count(self) -> int:
        return len(self._created)

    def created_since(self, count: int) -> list[Handle]:
        return self._created[count:]

    def generate(
        self,
        structure: Handle | Template,
        bindings:  Bindings,
        output:    Handle = INVALID,
    ) -> tuple[Bindings, list[Handle]]:
        """
        Tworzy konstrukcję szablonu przy danych wiązaniach.

        Returns:
            (rozszerzone wiązania, lista utworzonych elementów)

        Raises:
            TemplateError gdy łuków szablonu nie da się utworzyć (np. stały łuk nie istnieje).
        """
        kb       = self._kb
        template = structure if isinstance(structure, Template) else build_template(kb, structure)
        result   = dict(bindings)
        created: list[Handle] = []

        try:
            # bez struktury wejściowej modelem jest cała baza i lista argumentów nie rośnie
            scoped = kb.is_valid(self._searcher.input_structure)
            for var in template.var_nodes:
                if result.get(var, INVALID) == INVALID:
                    node = kb.create_node(template.var_type(var))
                    result[var] = node
                    created.append(node)
                    if scoped:
                        self._searcher.add_param(node)

            pending = list(template.triples)
            while pending:
                remaining = []
                for triple in pending:
                    arc = template.value(triple.arc, result)
                    if arc != INVALID:
                        if not kb.is_valid(arc):
                            raise TemplateError(
                                f"Łuk {kb.system_idtf(triple.arc)} szablonu "
                                f"{kb.system_idtf(template.structure)} nie istnieje"
                            )
                        continue
                    source = template.value(triple.source, result)
                    target = template.value(triple.target, result)
                    if source == INVALID or target == INVALID:
                        remaining.append(triple)
                        continue
                    new_arc = kb.create_arc(triple.arc_type, source, target)
                    result[triple.arc] = new_arc
                    created.append(new_arc)
                if len(remaining) == len(pending):
                    raise TemplateError(
                        f"Nie można wygenerować szablonu {kb.system_idtf(template.structure)}: "
                        f"nierozwiązane zależności łuków"
                    )
                pending = remaining
        finally:
            # elementy utworzone przed błędem też trafiają do wyjścia i licznika
            if kb.is_valid(output):
                for handle in created:
                    add_to_set(kb, output, handle)
            self._created.extend(created)

        logger.debug(
            "Wygenerowano %d elementów wg szablonu %s",
            len(created), kb.system_idtf(template.structure),
        )
        return result, created

    def search_or_generate(
        self,
        structure: Handle | Template,
        bindings:  Bindings,
        output:    Handle = INVALID,
    ) -> GenerationResult:
        """Szuka szablonu; gdy brak dopasowań — generuje go przy danych wiązaniach."""
        template = structure if isinstance(structure, Template) else build_template(self._kb, structure)
        found = self._searcher.search_template(template, bindings)
        if found:
            return GenerationResult(found=True, bindings=found)
        extended, created = self.generate(template, bindings, output)
        return GenerationResult(found=False, generated=created, bindings=[extended])
