"""
inference — wnioskowanie w przód po bazie wiedzy z priorytetowymi warstwami reguł.

Publiczne API:
  InferenceManager(kb, config).apply_inference(target, rule_set, input, output) → Solution
  InferenceConfig                      konfiguracja (max_restarts, persist_satisfiability)
  create_rules_queues_by_priority      kolejki reguł według warstw
  SatisfiabilityRegistry, Verdict      werdykty spełnialności (reguła, model)
  Solution, RuleAttempt                wynik przebiegu
"""

from .config         import InferenceConfig
from .manager        import InferenceManager
from .rule_queues    import RuleSetStructureError, create_rules_queues_by_priority, get_rule_tiers
from .satisfiability import SatisfiabilityRegistry, Verdict
from .solution       import RuleAttempt, Solution, SolutionTreeGenerator

__all__ = [
    "InferenceConfig",
    "InferenceManager",
    "RuleAttempt",
    "RuleSetStructureError",
    "SatisfiabilityRegistry",
    "Solution",
    "SolutionTreeGenerator",
    "Verdict",
    "create_rules_queues_by_priority",
    "get_rule_tiers",
]
