"""
logic/expression.py — drzewo wyrażenia logicznego reguły.

Formuła reguły zapisana jest w bazie wiedzy:
  - formuła atomowa:  struktura należąca do atomic_logical_formula (jej elementy = szablon)
  - koniunkcja:       węzeł należący do conjunction, operandy = elementy węzła (po kolei)
  - alternatywa:      węzeł należący do disjunction
  - negacja:          węzeł należący do negation, dokładnie jeden operand
  - implikacja:       łuk wspólny przesłanka ⇒ wniosek, należący do nrel_implication

Każdy węzeł drzewa ma dwie operacje:
  evaluate(bindings) — wyłącznie sprawdzenie (bez zmian w bazie)
  compute(bindings)  — sprawdzenie z materializacją: gdy (pod)formuła nie jest
                       już prawdziwa, atom generuje brakującą konstrukcję (przy
                       bieżących wiązaniach); koniunkcja i alternatywa obliczają
                       operandy od lewej; negacja tylko sprawdza

Implikacja: compute sprawdza przesłankę (evaluate), a dla każdego jej podstawienia
materializuje wniosek (compute). Reguła jest użyta gdy przesłanka jest prawdziwa.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from graph_model.keynodes import Keynodes
from graph_model.types import INVALID, Bindings, Handle
from kb.store import KnowledgeBase
from kb.utils import get_all_with_type, is_in_set
from matcher import (
    ArgumentSet,
    Template,
    TemplateError,
    TemplateGenerator,
    TemplateManager,
    TemplateSearcher,
    build_template,
)


class FormulaStructureError(ValueError):
    """Formuła w bazie wiedzy nie daje się zbudować jako drzewo wyrażenia."""


# ---------------------------------------------------------------------------
# Wynik i kontekst
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class FormulaResult:
    """
    Wynik obliczenia (pod)formuły.

    - value:     wartość logiczna
    - bindings:  podstawienia, przy których formuła jest prawdziwa
    - generated: elementy utworzone podczas compute
    """
    value:     bool
    bindings:  list[Bindings] = field(default_factory=list)
    generated: list[Handle]   = field(default_factory=list)


@dataclass(slots=True)
class EvaluationContext:
    """Współdzielone zależności węzłów drzewa (jedna próba reguły)."""
    kb:        KnowledgeBase
    searcher:  TemplateSearcher
    generator: TemplateGenerator
    templates: TemplateManager
    arguments: ArgumentSet
    output:    Handle = INVALID


def _add_unique(target: list[Bindings], items: list[Bindings]) -> None:
    seen = {tuple(sorted(b.items())) for b in target}
    for item in items:
        key = tuple(sorted(item.items()))
        if key not in seen:
            seen.add(key)
            target.append(item)


# ---------------------------------------------------------------------------
# Węzły drzewa
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class AtomNode:
    """Liść: formuła atomowa — szablon wyszukiwany w bazie."""
    formula:  Handle
    template: Template
    context:  EvaluationContext = field(repr=False)

    def _candidate_bindings(self, bindings: Bindings) -> list[Bindings]:
        ctx = self.context
        candidates: list[Bindings] = []
        for params in ctx.templates.create_template_params(self.template, ctx.arguments):
            # wiązania z wcześniejszych podformuł mają pierwszeństwo
            _add_unique(candidates, [{**params, **bindings}])
        return candidates

    def evaluate(self, bindings: Bindings) -> FormulaResult:
        found: list[Bindings] = []
        for candidate in self._candidate_bindings(bindings):
            _add_unique(found, self.context.searcher.search_template(self.template, candidate))
        return FormulaResult(value=bool(found), bindings=found)

    def compute(self, bindings: Bindings) -> FormulaResult:
        # najpierw szukanie po wszystkich kandydatach, generowanie tylko gdy nic nie pasuje
        found = self.evaluate(bindings)
        if found.value:
            return found
        ctx = self.context
        outcome = ctx.generator.search_or_generate(self.template, bindings, ctx.output)
        return FormulaResult(value=outcome.value, bindings=outcome.bindings, generated=outcome.generated)

    def describe(self) -> str:
        return self.context.kb.system_idtf(self.formula)


@dataclass(slots=True)
class AndNode:
    """Koniunkcja: operandy od lewej, przerwanie na pierwszym fałszu."""
    operands: list[ExpressionNode]

    def evaluate(self, bindings: Bindings) -> FormulaResult:
        solutions = [bindings]
        for operand in self.operands:
            extended: list[Bindings] = []
            for solution in solutions:
                result = operand.evaluate(solution)
                if result.value:
                    _add_unique(extended, result.bindings)
            if not extended:
                return FormulaResult(value=False)
            solutions = extended
        return FormulaResult(value=True, bindings=solutions)

    def compute(self, bindings: Bindings) -> FormulaResult:
        # koniunkcja już prawdziwa w bazie: nic do materializacji
        found = self.evaluate(bindings)
        if found.value:
            return found
        solutions = [bindings]
        generated: list[Handle] = []
        for operand in self.operands:
            extended: list[Bindings] = []
            for solution in solutions:
                result = operand.compute(solution)
                generated.extend(result.generated)
                if result.value:
                    _add_unique(extended, result.bindings)
            if not extended:
                return FormulaResult(value=False, generated=generated)
            solutions = extended
        return FormulaResult(value=True, bindings=solutions, generated=generated)

    def describe(self) -> str:
        return "(" + " ∧ ".join(o.describe() for o in self.operands) + ")"


@dataclass(slots=True)
class OrNode:
    """Alternatywa: operandy od lewej, przerwanie na pierwszej prawdzie."""
    operands: list[ExpressionNode]

    def evaluate(self, bindings: Bindings) -> FormulaResult:
        for operand in self.operands:
            result = operand.evaluate(bindings)
            if result.value:
                return result
        return FormulaResult(value=False)

    def compute(self, bindings: Bindings) -> FormulaResult:
        found = self.evaluate(bindings)
        if found.value:
            return found
        # materializowany jest pierwszy operand, który da się obliczyć
        generated: list[Handle] = []
        for operand in self.operands:
            result = operand.compute(bindings)
            generated.extend(result.generated)
            if result.value:
                return FormulaResult(value=True, bindings=result.bindings, generated=generated)
        return FormulaResult(value=False, generated=generated)

    def describe(self) -> str:
        return "(" + " ∨ ".join(o.describe() for o in self.operands) + ")"


@dataclass(slots=True)
class NotNode:
    """Negacja: odwraca wynik operandu; nigdy nie generuje."""
    operand: ExpressionNode

    def evaluate(self, bindings: Bindings) -> FormulaResult:
        result = self.operand.evaluate(bindings)
        if result.value:
            return FormulaResult(value=False)
        return FormulaResult(value=True, bindings=[dict(bindings)])

    def compute(self, bindings: Bindings) -> FormulaResult:
        return self.evaluate(bindings)

    def describe(self) -> str:
        return "¬" + self.operand.describe()


@dataclass(slots=True)
class ImplicationNode:
    """Implikacja przesłanka ⇒ wniosek (korzeń reguły)."""
    premise:    ExpressionNode
    conclusion: ExpressionNode

    def evaluate(self, bindings: Bindings) -> FormulaResult:
        premise = self.premise.evaluate(bindings)
        if not premise.value:
            return FormulaResult(value=True, bindings=[dict(bindings)])
        solutions: list[Bindings] = []
        for solution in premise.bindings:
            conclusion = self.conclusion.evaluate(solution)
            if not conclusion.value:
                return FormulaResult(value=False)
            _add_unique(solutions, conclusion.bindings)
        return FormulaResult(value=True, bindings=solutions)

    def compute(self, bindings: Bindings) -> FormulaResult:
        premise = self.premise.evaluate(bindings)
        if not premise.value:
            return FormulaResult(value=False)
        result = FormulaResult(value=False)
        for solution in premise.bindings:
            conclusion = self.conclusion.compute(solution)
            result.value = result.value or conclusion.value
            _add_unique(result.bindings, conclusion.bindings)
            result.generated.extend(conclusion.generated)
        return result

    def describe(self) -> str:
        return f"{self.premise.describe()} → {self.conclusion.describe()}"


type ExpressionNode = AtomNode | AndNode | OrNode | NotNode | ImplicationNode


# ---------------------------------------------------------------------------
# Budowa drzewa
# ---------------------------------------------------------------------------

class LogicExpression:
    """
    Buduje drzewo wyrażenia z formuły zapisanej w bazie wiedzy.

    Użycie::

        expression = LogicExpression(kb, keynodes, searcher, generator, templates, arguments, output)
        root   = expression.build(key_element)
        result = root.compute({})
    """

    def __init__(
        self,
        kb:        KnowledgeBase,
        keynodes:  Keynodes,
        searcher:  TemplateSearcher,
        generator: TemplateGenerator,
        templates: TemplateManager,
        arguments: ArgumentSet,
        output:    Handle = INVALID,
    ) -> None:
        self._kb       = kb
        self._keynodes = keynodes
        self._context  = EvaluationContext(
            kb=kb,
            searcher=searcher,
            generator=generator,
            templates=templates,
            arguments=arguments,
            output=output,
        )

    def build(self, formula: Handle) -> ExpressionNode:
        """
        Raises:
            FormulaStructureError gdy formuła jest nieznanego rodzaju, pusta,
            cykliczna albo jej szablon jest niepoprawny.
        """
        return self._build(formula, ())

    def _build(self, formula: Handle, path: tuple[Handle, ...]) -> ExpressionNode:
        kb, k = self._kb, self._keynodes
        if not kb.is_valid(formula):
            raise FormulaStructureError(f"Formuła {formula} nie istnieje")
        if formula in path:
            raise FormulaStructureError(f"Formuła {kb.system_idtf(formula)} zawiera samą siebie")
        path = path + (formula,)

        if kb.get_type(formula).is_arc:
            if not is_in_set(kb, k.nrel_implication, formula):
                raise FormulaStructureError(
                    f"Łuk {kb.system_idtf(formula)} nie jest implikacją (brak nrel_implication)"
                )
            return ImplicationNode(
                premise=self._build(kb.get_source(formula), path),
                conclusion=self._build(kb.get_target(formula), path),
            )

        if is_in_set(kb, k.atomic_logical_formula, formula):
            try:
                template = build_template(kb, formula)
            except TemplateError as e:
                raise FormulaStructureError(str(e)) from e
            return AtomNode(formula=formula, template=template, context=self._context)

        operands = get_all_with_type(kb, formula)
        if is_in_set(kb, k.conjunction, formula):
            return AndNode([self._build(o, path) for o in self._require(formula, operands)])
        if is_in_set(kb, k.disjunction, formula):
            return OrNode([self._build(o, path) for o in self._require(formula, operands)])
        if is_in_set(kb, k.negation, formula):
            if len(operands) != 1:
                raise FormulaStructureError(
                    f"Negacja {kb.system_idtf(formula)} musi mieć dokładnie jeden operand, ma {len(operands)}"
                )
            return NotNode(self._build(operands[0], path))

        raise FormulaStructureError(f"Nieznany rodzaj formuły: {kb.system_idtf(formula)}")

    def _require(self, formula: Handle, operands: list[Handle]) -> list[Handle]:
        if not operands:
            raise FormulaStructureError(f"Formuła {self._kb.system_idtf(formula)} nie ma operandów")
        return operands
