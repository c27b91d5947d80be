"""
validator — walidator zbioru reguł zapisanego w bazie wiedzy.

Interfejs publiczny:
    RuleSetValidator  — główny walidator (etapy A–C)
    ValidationReport, ValidationError, ErrorCode — typy raportu

Typowe użycie:
    import pathlib
    from kb import load_kb_json
    from validator import RuleSetValidator

    kb     = load_kb_json(pathlib.Path("data/example_kb.json"))
    report = RuleSetValidator(kb).validate(kb.find_by_idtf("rules"))
    if not report.is_valid:
        for e in report.errors:
            print(e.code, e.path, e.message)
"""

from .types import ErrorCode, ValidationError, ValidationReport
from .rule_set_validator import RuleSetValidator

__all__ = [
    "ErrorCode",
    "ValidationError",
    "ValidationReport",
    "RuleSetValidator",
]
