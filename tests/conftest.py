import pathlib

import pytest

from helpers import RuleKB

ROOT       = pathlib.Path(__file__).resolve().parent.parent
EXAMPLE_KB = ROOT / "data" / "example_kb.json"


@pytest.fixture
def rkb() -> RuleKB:
    return RuleKB()


@pytest.fixture
def example_kb_path() -> pathlib.Path:
    return EXAMPLE_KB


@pytest.fixture
def socrates(rkb: RuleKB) -> RuleKB:
    """
    Dwie warstwy:
      warstwa 0: rule_mortal  human(_m) → mortal(_m)
      warstwa 1: rule_human   greek(_h) → human(_h)
    Fakty: greek(socrates), greek(plato), barbarian(xerxes).
    """
    rkb.fact("concept_greek", "socrates")
    rkb.fact("concept_greek", "plato")
    rkb.fact("concept_barbarian", "xerxes")
    mortal = rkb.simple_rule("rule_mortal", ("concept_human", "_m"), ("concept_mortal", "_m"))
    human  = rkb.simple_rule("rule_human",  ("concept_greek", "_h"), ("concept_human", "_h"))
    rkb.rule_set([mortal], [human])
    return rkb
