"""Local calculator tool that evaluates arithmetic expressions without ``eval``."""

from __future__ import annotations

import ast
import operator
from typing import Any, Callable, Dict, Union

from agents.tools.base import Tool

Number = Union[int, float]

_BINARY_OPS: Dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}
_UNARY_OPS: Dict[type, Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}
_MAX_EXPONENT = 1000
_MAX_RESULT_BITS = 100_000


class CalculatorTool(Tool):
    description = "Evaluate an arithmetic expression using + - * / // % ** and parentheses."
    parameters = {
        "expression": {
            "type": "string",
            "description": "The expression to evaluate, e.g. '(2 + 3) * 4'",
        },
    }
    required = ["expression"]

    def call(self, expression: str) -> str:
        try:
            tree = ast.parse(str(expression), mode="eval")
        except SyntaxError as exc:
            raise ValueError(f"Invalid expression: {expression!r}") from exc
        value = _evaluate(tree.body)
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)


def _evaluate(node: ast.AST) -> Number:
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left, right = _evaluate(node.left), _evaluate(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        return _BINARY_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_evaluate(node.operand))
    raise ValueError(f"Unsupported expression element: {type(node).__name__}")


def _check_power(base: Number, exponent: Number) -> None:
    if abs(exponent) > _MAX_EXPONENT:
        raise ValueError("Exponent too large")
    # An integer power needs about bit_length(base) * exponent bits.
    if isinstance(base, int) and isinstance(exponent, int) and exponent > 0:
        if base.bit_length() * exponent > _MAX_RESULT_BITS:
            raise ValueError("Result too large")
