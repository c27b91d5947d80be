"""
validator/types.py — kody błędów i struktury raportu walidacji zbioru reguł.

ValidationError — pojedynczy błąd z kodem, ścieżką (identyfikatory od zbioru
    reguł do miejsca błędu), komunikatem i mechaniczną instrukcją naprawy.
ValidationReport — wynik walidacji: is_valid, errors, warnings,
    oraz odczytane warstwy reguł.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from graph_model.types import Handle


class ErrorCode(StrEnum):
    """Stałe kody błędów walidatora (stage A–C)."""

    # A: zbiór reguł
    RULE_SET_INVALID       = "E_RULE_SET_INVALID"
    NO_FIRST_TIER          = "E_NO_FIRST_TIER"

    # B: łańcuch warstw
    TIER_CYCLE             = "E_TIER_CYCLE"

    # C: reguły i formuły
    KEY_ELEMENT_MISSING    = "E_KEY_ELEMENT_MISSING"
    FORMULA_KIND_UNKNOWN   = "E_FORMULA_KIND_UNKNOWN"
    FORMULA_CYCLE          = "E_FORMULA_CYCLE"
    FORMULA_NO_OPERANDS    = "E_FORMULA_NO_OPERANDS"
    NEGATION_ARITY         = "E_NEGATION_ARITY"
    ATOM_EMPTY             = "E_ATOM_EMPTY"
    IMPLICATION_UNMARKED   = "E_IMPLICATION_UNMARKED"


@dataclass(slots=True)
class ValidationError:
    """
    Pojedynczy błąd walidacji.

    - code:         stały identyfikator klasy błędu (ErrorCode)
    - path:         ścieżka identyfikatorów, np. "/rules/tier_1/rule_p"
    - message:      czytelny opis błędu
    - expected_fix: krótka mechaniczna instrukcja naprawy
    - details:      opcjonalny słownik z dodatkowymi danymi
    """

    code: ErrorCode
    path: str
    message: str
    expected_fix: str
    details: dict[str, Any] | None = None


@dataclass(slots=True)
class ValidationReport:
    """
    Wynik pełnej walidacji zbioru reguł.

    - is_valid: True gdy brak błędów (warnings nie wpływają)
    - errors:   lista błędów (ValidationError)
    - warnings: lista komunikatów ostrzegawczych (str)
    - tiers:    reguły kolejnych warstw (pusta gdy etap A/B nie przeszedł)
    """

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    tiers: list[list[Handle]] = field(default_factory=list)
