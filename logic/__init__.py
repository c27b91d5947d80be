"""
logic — drzewo wyrażenia logicznego reguł (AND / OR / NOT / ATOM / implikacja).

Publiczne API:
  LogicExpression(kb, keynodes, ...).build(formula) → ExpressionNode
  FormulaResult, FormulaStructureError
"""

from .expression import (
    AndNode,
    AtomNode,
    EvaluationContext,
    ExpressionNode,
    FormulaResult,
    FormulaStructureError,
    ImplicationNode,
    LogicExpression,
    NotNode,
    OrNode,
)

__all__ = [
    "AndNode",
    "AtomNode",
    "EvaluationContext",
    "ExpressionNode",
    "FormulaResult",
    "FormulaStructureError",
    "ImplicationNode",
    "LogicExpression",
    "NotNode",
    "OrNode",
]
