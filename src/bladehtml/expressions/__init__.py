"""Restricted expression language.

Literals, property paths, arithmetic, comparison, logic, the ``||``
fallback and a ternary, with no calls, assignment or method invocation.

Public API:
    evaluate: Evaluate an expression; failures yield None
    evaluate_condition: Evaluate and coerce to bool
    evaluate_object: Evaluate an object literal to a dict
    parse_expression: Compile (cached) expression source to nodes
    to_string: Output coercion for evaluated values

"""

from bladehtml.expressions.evaluator import (
    UNDEFINED,
    eval_node,
    evaluate,
    evaluate_condition,
    get_property,
    to_string,
)
from bladehtml.expressions.objects import evaluate_object, split_top_level, string_literal
from bladehtml.expressions.parser import parse_expression, tokenize

__all__ = [
    "UNDEFINED",
    "eval_node",
    "evaluate",
    "evaluate_condition",
    "evaluate_object",
    "get_property",
    "parse_expression",
    "split_top_level",
    "string_literal",
    "to_string",
    "tokenize",
]
