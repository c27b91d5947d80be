"""
validator/rule_set_validator.py — walidator zbioru reguł zapisanego w bazie wiedzy.

RuleSetValidator.validate(rule_set) -> ValidationReport

Etapy:
  A — zbiór reguł          (istnieje, ma pierwszą warstwę rrel_1)
  B — łańcuch warstw       (brak cykli; pusta warstwa = ostrzeżenie)
  C — reguły               (element kluczowy, rodzaje formuł, arność negacji,
                            niepuste formuły atomowe, oznaczenie implikacji)
"""

from __future__ import annotations

from graph_model.keynodes import Keynodes
from graph_model.types import INVALID, ElementType, Handle
from inference.rule_queues import RuleSetStructureError, get_rule_tiers
from kb.store import KnowledgeBase
from kb.utils import get_all_with_type, get_any_by_out_relation, is_in_set

from .types import ErrorCode, ValidationError, ValidationReport

# Limit błędów: po przekroczeniu przerywamy sprawdzanie kolejnych reguł
MAX_ERRORS = 20


class RuleSetValidator:
    """
    Walidator zbioru reguł.

    Użycie:
        validator = RuleSetValidator(kb)
        report    = validator.validate(kb.find_by_idtf("rules"))
        for e in report.errors:
            print(e.code, e.path, e.message)
    """

    def __init__(self, kb: KnowledgeBase, keynodes: Keynodes | None = None) -> None:
        self._kb       = kb
        self._keynodes = keynodes or Keynodes.resolve(kb)

    # ------------------------------------------------------------------
    # Publiczny interfejs
    # ------------------------------------------------------------------

    def validate(self, rule_set: Handle) -> ValidationReport:
        errors: list[ValidationError] = []
        warnings: list[str] = []

        # A: zbiór reguł (fail-fast, bez warstw nie ma czego sprawdzać)
        self._stage_rule_set(rule_set, errors)
        if errors:
            return ValidationReport(is_valid=False, errors=errors, warnings=warnings)

        # B: łańcuch warstw
        tiers = self._stage_tiers(rule_set, errors, warnings)
        if errors:
            return ValidationReport(is_valid=False, errors=errors, warnings=warnings)

        # C: reguły
        root = self._idtf(rule_set)
        for tier, rules in tiers:
            for rule in rules:
                if len(errors) >= MAX_ERRORS:
                    break
                self._check_rule(rule, f"/{root}/{self._idtf(tier)}/{self._idtf(rule)}", errors, warnings)

        return ValidationReport(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            tiers=[rules for _, rules in tiers],
        )

    # ------------------------------------------------------------------
    # Stage A: zbiór reguł
    # ------------------------------------------------------------------

    def _stage_rule_set(self, rule_set: Handle, errors: list[ValidationError]) -> None:
        if not self._kb.is_valid(rule_set):
            errors.append(ValidationError(
                code=ErrorCode.RULE_SET_INVALID,
                path="/",
                message=f"Zbiór reguł {rule_set} nie istnieje w bazie wiedzy.",
                expected_fix="Podaj identyfikator istniejącego węzła zbioru reguł.",
            ))
            return
        if get_any_by_out_relation(self._kb, rule_set, self._keynodes.rrel_1) == INVALID:
            errors.append(ValidationError(
                code=ErrorCode.NO_FIRST_TIER,
                path=f"/{self._idtf(rule_set)}",
                message=f"Zbiór reguł {self._idtf(rule_set)} nie ma warstwy oznaczonej rrel_1.",
                expected_fix="Oznacz łuk do pierwszej warstwy relacją rrel_1.",
            ))

    # ------------------------------------------------------------------
    # Stage B: łańcuch warstw
    # ------------------------------------------------------------------

    def _stage_tiers(
        self,
        rule_set: Handle,
        errors:   list[ValidationError],
        warnings: list[str],
    ) -> list[tuple[Handle, list[Handle]]]:
        try:
            tiers = get_rule_tiers(self._kb, self._keynodes, rule_set)
        except RuleSetStructureError as e:
            errors.append(ValidationError(
                code=ErrorCode.TIER_CYCLE,
                path=f"/{self._idtf(rule_set)}",
                message=str(e),
                expected_fix="Usuń łuk nrel_basic_sequence zamykający cykl warstw.",
            ))
            return []

        result: list[tuple[Handle, list[Handle]]] = []
        for index, tier in enumerate(tiers):
            rules = get_all_with_type(self._kb, tier, ElementType.NODE)
            if not rules:
                warnings.append(f"Warstwa {index} ({self._idtf(tier)}) nie zawiera reguł.")
            result.append((tier, rules))
        return result

    # ------------------------------------------------------------------
    # Stage C: reguły i formuły
    # ------------------------------------------------------------------

    def _check_rule(
        self,
        rule:     Handle,
        path:     str,
        errors:   list[ValidationError],
        warnings: list[str],
    ) -> None:
        key = get_any_by_out_relation(self._kb, rule, self._keynodes.rrel_main_key_element)
        if key == INVALID:
            errors.append(ValidationError(
                code=ErrorCode.KEY_ELEMENT_MISSING,
                path=path,
                message=f"Reguła {self._idtf(rule)} nie ma elementu kluczowego.",
                expected_fix="Dodaj łuk reguła → formuła oznaczony rrel_main_key_element.",
            ))
            return

        self._check_formula(key, path, (), errors)

        kind = self._kind(key)
        if kind == "negation":
            warnings.append(
                f"Reguła {self._idtf(rule)}: formuła główna jest negacją "
                f"(reguła tylko sprawdza, niczego nie wygeneruje)."
            )
        elif kind == "implication" and self._kind(self._kb.get_target(key)) == "negation":
            warnings.append(
                f"Reguła {self._idtf(rule)}: wniosek jest negacją "
                f"(reguła tylko sprawdza, niczego nie wygeneruje)."
            )

    def _check_formula(
        self,
        formula: Handle,
        path:    str,
        visited: tuple[Handle, ...],
        errors:  list[ValidationError],
    ) -> None:
        kb   = self._kb
        path = f"{path}/{self._idtf(formula)}"
        if formula in visited:
            errors.append(ValidationError(
                code=ErrorCode.FORMULA_CYCLE,
                path=path,
                message=f"Formuła {self._idtf(formula)} zawiera samą siebie.",
                expected_fix="Usuń operand wskazujący na formułę nadrzędną.",
            ))
            return
        visited = visited + (formula,)

        match self._kind(formula):
            case "implication":
                self._check_formula(kb.get_source(formula), path, visited, errors)
                self._check_formula(kb.get_target(formula), path, visited, errors)
            case "arc":
                errors.append(ValidationError(
                    code=ErrorCode.IMPLICATION_UNMARKED,
                    path=path,
                    message=f"Łuk {self._idtf(formula)} użyty jako formuła nie należy do nrel_implication.",
                    expected_fix="Dodaj łuk nrel_implication → łuk przesłanka ⇒ wniosek.",
                ))
            case "atom":
                arcs = [m for m in get_all_with_type(kb, formula) if kb.get_type(m).is_arc]
                if not arcs:
                    errors.append(ValidationError(
                        code=ErrorCode.ATOM_EMPTY,
                        path=path,
                        message=f"Formuła atomowa {self._idtf(formula)} nie zawiera żadnego łuku.",
                        expected_fix="Dodaj do struktury formuły łuki szablonu (members).",
                    ))
            case "conjunction" | "disjunction":
                operands = get_all_with_type(kb, formula)
                if not operands:
                    errors.append(ValidationError(
                        code=ErrorCode.FORMULA_NO_OPERANDS,
                        path=path,
                        message=f"Formuła {self._idtf(formula)} nie ma operandów.",
                        expected_fix="Dodaj operandy jako elementy formuły.",
                    ))
                for operand in operands:
                    self._check_formula(operand, path, visited, errors)
            case "negation":
                operands = get_all_with_type(kb, formula)
                if len(operands) != 1:
                    errors.append(ValidationError(
                        code=ErrorCode.NEGATION_ARITY,
                        path=path,
                        message=(
                            f"Negacja {self._idtf(formula)} musi mieć dokładnie jeden operand, "
                            f"ma {len(operands)}."
                        ),
                        expected_fix="Pozostaw w negacji dokładnie jeden operand.",
                        details={"expected": 1, "actual": len(operands)},
                    ))
                for operand in operands:
                    self._check_formula(operand, path, visited, errors)
            case _:
                errors.append(ValidationError(
                    code=ErrorCode.FORMULA_KIND_UNKNOWN,
                    path=path,
                    message=f"Formuła {self._idtf(formula)} nie należy do żadnej klasy formuł.",
                    expected_fix=(
                        "Dodaj formułę do atomic_logical_formula, conjunction, "
                        "disjunction albo negation."
                    ),
                ))

    # ------------------------------------------------------------------
    # Pomocnicze
    # ------------------------------------------------------------------

    def _kind(self, formula: Handle) -> str | None:
        kb, k = self._kb, self._keynodes
        if not kb.is_valid(formula):
            return None
        if kb.get_type(formula).is_arc:
            return "implication" if is_in_set(kb, k.nrel_implication, formula) else "arc"
        for kind, cls in (
            ("atom",        k.atomic_logical_formula),
            ("conjunction", k.conjunction),
            ("disjunction", k.disjunction),
            ("negation",    k.negation),
        ):
            if is_in_set(kb, cls, formula):
                return kind
        return None

    def _idtf(self, handle: Handle) -> str:
        return self._kb.system_idtf(handle)
