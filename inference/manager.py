"""
inference/manager.py — menedżer wnioskowania w przód (forward chaining).

Algorytm apply_inference(target, rule_set, input_structure, output_structure):
  1. Argumenty = węzły struktury wejściowej (pusta struktura → porażka).
  2. Cel już osiągnięty → sukces bez sięgania po reguły.
  3. Niepoprawny zbiór reguł / brak warstw / błąd struktury warstw → porażka.
  4. Dla warstw od 0: zdejmuj reguły z kolejki, czyść werdykt (reguła, model),
     próbuj regułę. Użyta → werdykt spełnialna, sprawdź cel; gdy reguła coś
     wygenerowała, a cel nieosiągnięty → od nowa od warstwy 0.
     Nieużyta → werdykt niespełnialna, następna reguła.
  5. Koniec gdy cel osiągnięty albo pełny przebieg nie dał postępu.

Model = struktura wejściowa, a gdy jej brak: węzeł knowledge_base.
"""

from __future__ import annotations

import logging
from collections import deque

from graph_model.keynodes import Keynodes
from graph_model.types import INVALID, ElementType, Handle
from kb.store import KnowledgeBase
from kb.utils import get_all_with_type, get_any_by_out_relation
from logic import FormulaStructureError, LogicExpression
from matcher import (
    ArgumentSet,
    Template,
    TemplateError,
    TemplateGenerator,
    TemplateManager,
    TemplateSearcher,
    build_template,
)

from .config import InferenceConfig
from .rule_queues import RuleSetStructureError, create_rules_queues_by_priority
from .satisfiability import SatisfiabilityRegistry, Verdict
from .solution import RuleAttempt, Solution, SolutionTreeGenerator

logger = logging.getLogger(__name__)


class InferenceManager:
    """
    Menedżer wnioskowania dla jednej bazy wiedzy (jeden przebieg naraz).

    Użycie::

        manager  = InferenceManager(kb)
        solution = manager.apply_inference(target, rule_set, input_structure=case)
        if solution.achieved:
            ...
    """

    def __init__(self, kb: KnowledgeBase, config: InferenceConfig | None = None) -> None:
        self._kb       = kb
        self._config   = config or InferenceConfig()
        self._keynodes = Keynodes.resolve(kb)

        self._satisfiability = SatisfiabilityRegistry(
            kb, self._keynodes, persist=self._config.persist_satisfiability
        )
        self._solutions = SolutionTreeGenerator(kb, self._keynodes)
        self._templates = TemplateManager(kb)

        self._start_run(INVALID)

    # ------------------------------------------------------------------
    # Właściwości
    # ------------------------------------------------------------------

    @property
    def keynodes(self) -> Keynodes:
        return self._keynodes

    @property
    def arguments(self) -> ArgumentSet:
        return self._arguments

    @property
    def satisfiability(self) -> SatisfiabilityRegistry:
        return self._satisfiability

    @property
    def config(self) -> InferenceConfig:
        return self._config

    # ------------------------------------------------------------------
    # Przebieg
    # ------------------------------------------------------------------

    def _start_run(self, output_structure: Handle) -> None:
        self._arguments        = ArgumentSet()
        self._searcher         = TemplateSearcher(self._kb, self._arguments)
        self._generator        = TemplateGenerator(self._kb, self._searcher)
        self._output_structure = output_structure
        self._generated: list[Handle]      = []
        self.attempts:   list[RuleAttempt] = []

    def _finish(self, achieved: bool, restarts: int = 0) -> Solution:
        return self._solutions.create_solution(
            achieved,
            attempts=self.attempts,
            generated=self._generated,
            restarts=restarts,
        )

    def apply_inference(
        self,
        target:           Handle,
        rule_set:         Handle,
        input_structure:  Handle = INVALID,
        output_structure: Handle = INVALID,
    ) -> Solution:
        """Uruchamia wnioskowanie; zawsze zwraca Solution (nie podnosi wyjątków strukturalnych)."""
        kb = self._kb
        self._start_run(output_structure)

        if kb.is_valid(input_structure):
            for node in get_all_with_type(kb, input_structure, ElementType.NODE):
                self._arguments.add(node)
            if not self._arguments:
                logger.warning("Struktura wejściowa %s nie zawiera węzłów", kb.system_idtf(input_structure))
                return self._finish(False)
        self._searcher.set_input_structure(input_structure)

        try:
            target_template = build_template(kb, target)
        except TemplateError as e:
            logger.error("Niepoprawny cel: %s", e)
            return self._finish(False)

        if self.is_target_achieved(target_template, self._arguments):
            logger.info("Cel %s jest już osiągnięty", kb.system_idtf(target))
            return self._finish(True)

        if not kb.is_valid(rule_set):
            logger.warning("Zbiór reguł %s jest niepoprawny", rule_set)
            return self._finish(False)

        try:
            tiers = create_rules_queues_by_priority(kb, self._keynodes, rule_set)
        except RuleSetStructureError as e:
            logger.error("%s", e)
            return self._finish(False)

        if not tiers:
            logger.warning("Zbiór reguł %s nie ma żadnej warstwy", kb.system_idtf(rule_set))
            return self._finish(False)

        model = input_structure if kb.is_valid(input_structure) else self._keynodes.knowledge_base
        logger.info(
            "Start wnioskowania: cel %s, %d warstw, %d argumentów",
            kb.system_idtf(target), len(tiers), len(self._arguments),
        )

        achieved = False
        restarts = 0
        index    = 0
        while index < len(tiers) and not achieved:
            # kolejka tworzona od nowa przy każdym wejściu do warstwy
            queue     = tiers[index].copy()
            restarted = False
            while queue:
                rule   = queue.popleft()
                before = self._generator.generated_count
                self.clear_satisfiability_information(rule, model)
                used     = self.use_rule(rule, self._arguments)
                progress = self._generator.generated_count - before
                self.attempts.append(RuleAttempt(
                    rule=rule,
                    idtf=kb.system_idtf(rule),
                    tier=index,
                    used=used,
                    generated=progress,
                ))

                if not used:
                    self.add_satisfiability_information(rule, model, Verdict.UNSATISFIABLE)
                    continue

                self.add_satisfiability_information(rule, model, Verdict.SATISFIABLE)
                if self.is_target_achieved(target_template, self._arguments):
                    logger.info("Cel osiągnięty po regule %s", kb.system_idtf(rule))
                    achieved = True
                    break
                if progress:
                    restarts += 1
                    if restarts > self._config.max_restarts:
                        logger.warning(
                            "Przekroczono limit powrotów do warstwy 0 (%d)", self._config.max_restarts
                        )
                        return self._finish(False, restarts)
                    logger.debug("Reguła %s dała postęp, powrót do warstwy 0", kb.system_idtf(rule))
                    restarted = True
                    break
            index = 0 if restarted else index + 1

        if not achieved:
            logger.info("Cel %s nieosiągnięty", kb.system_idtf(target))
        return self._finish(achieved, restarts)

    # ------------------------------------------------------------------
    # Reguły i cel
    # ------------------------------------------------------------------

    def use_rule(self, rule: Handle, arguments: ArgumentSet) -> bool:
        """Próbuje użyć reguły: buduje drzewo z elementu kluczowego i je oblicza."""
        kb   = self._kb
        idtf = kb.system_idtf(rule)
        logger.info("Próba reguły %s", idtf)

        key = get_any_by_out_relation(kb, rule, self._keynodes.rrel_main_key_element)
        if key == INVALID:
            logger.info("Reguła %s nie ma elementu kluczowego", idtf)
            return False

        expression = LogicExpression(
            kb,
            self._keynodes,
            self._searcher,
            self._generator,
            self._templates,
            arguments,
            self._output_structure,
        )
        start = self._generator.generated_count
        try:
            result = expression.build(key).compute({})
        except (FormulaStructureError, TemplateError) as e:
            # elementy utworzone przed błędem zostają w bazie i w rozwiązaniu
            partial = self._generator.created_since(start)
            self._generated.extend(partial)
            logger.error("Reguła %s: %s (utworzono wcześniej %d elementów)", idtf, e, len(partial))
            return False

        self._generated.extend(result.generated)
        logger.info("Reguła %s: wyrażenie %s", idtf, "prawdziwe" if result.value else "fałszywe")
        return result.value

    def is_target_achieved(self, target: Handle | Template, arguments: ArgumentSet) -> bool:
        """Czy szablon celu ma dopasowanie dla któregoś z zestawów wiązań? (tylko odczyt)"""
        for params in self._templates.create_template_params(target, arguments):
            if self._searcher.search_template(target, params):
                return True
        return False

    # ------------------------------------------------------------------
    # Spełnialność
    # ------------------------------------------------------------------

    def clear_satisfiability_information(self, rule: Handle, model: Handle) -> None:
        self._satisfiability.clear(rule, model)

    def add_satisfiability_information(self, rule: Handle, model: Handle, verdict: Verdict | bool) -> None:
        if isinstance(verdict, bool):
            verdict = Verdict.SATISFIABLE if verdict else Verdict.UNSATISFIABLE
        self._satisfiability.add(rule, model, verdict)

    def create_rules_queues_by_priority(self, rule_set: Handle) -> list[deque[Handle]]:
        return create_rules_queues_by_priority(self._kb, self._keynodes, rule_set)
