"""Expression evaluation against a read-only context mapping.

Evaluation never mutates the context and never raises to the caller:
``evaluate()`` converts any parse or evaluation failure into ``None`` and
logs it at DEBUG level. Property paths short-circuit to an internal
``UNDEFINED`` marker the moment an intermediate value is missing, which
``evaluate()`` reports as ``None``.

Thread-Safety:
    All functions are stateless; the compiled-expression cache in
    ``bladehtml.expressions.parser`` is an ``lru_cache`` and safe for
    concurrent use.

"""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Mapping, Sized
from typing import Any

from bladehtml.environment.exceptions import ExpressionError
from bladehtml.expressions.parser import parse_expression
from bladehtml.nodes.expressions import (
    BinOp,
    BoolOp,
    Compare,
    CondExpr,
    Const,
    Expr,
    Fallback,
    Getattr,
    Getitem,
    Name,
    UnaryOp,
)

logger = logging.getLogger(__name__)


class _Undefined:
    """Marker for a missing variable or property. Falsy, renders as ''."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()

_ORDERING: dict[str, Callable[[Any, Any], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def evaluate(expr: str, context: Mapping[str, Any]) -> Any:
    """Evaluate ``expr`` against ``context``; failures yield ``None``.

    Example:
        >>> evaluate("user.name || 'Guest'", {"user": {"name": "Ada"}})
        'Ada'
        >>> evaluate("user.missing.deep", {"user": {}}) is None
        True

    """
    try:
        value = eval_node(parse_expression(expr), context)
    except Exception as exc:
        logger.debug("Expression %r failed: %s", expr, exc)
        return None
    return None if value is UNDEFINED else value


def evaluate_condition(expr: str, context: Mapping[str, Any]) -> bool:
    """Evaluate ``expr`` and coerce the result to a boolean."""
    return bool(evaluate(expr, context))


def to_string(value: Any) -> str:
    """Convert an evaluated value to output text.

    ``None`` and undefined become ``''``; booleans become ``true``/``false``;
    integral floats drop the trailing ``.0``; lists and tuples are joined
    with commas. Strings (including ``Markup``) are returned unchanged.
    """
    if isinstance(value, str):
        return value
    if value is None or value is UNDEFINED:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_string(item) for item in value)
    return str(value)


def is_missing(value: Any) -> bool:
    return value is None or value is UNDEFINED


# =============================================================================
# Node evaluation
# =============================================================================


def eval_node(node: Expr, context: Mapping[str, Any]) -> Any:
    """Evaluate a compiled expression node.

    Raises:
        ExpressionError: Unsupported operand types, division by zero
    """
    handler = _DISPATCH.get(type(node))
    if handler is None:
        raise ExpressionError(f"Unsupported expression node: {type(node).__name__}")
    return handler(node, context)


def _eval_const(node: Const, context: Mapping[str, Any]) -> Any:
    return node.value


def _eval_name(node: Name, context: Mapping[str, Any]) -> Any:
    return context.get(node.name, UNDEFINED)


def _eval_getattr(node: Getattr, context: Mapping[str, Any]) -> Any:
    return get_property(eval_node(node.obj, context), node.attr)


def _eval_getitem(node: Getitem, context: Mapping[str, Any]) -> Any:
    obj = eval_node(node.obj, context)
    if is_missing(obj):
        return UNDEFINED
    key = eval_node(node.key, context)
    if isinstance(key, float) and key.is_integer():
        key = int(key)
    if isinstance(key, str):
        return get_property(obj, key)
    if isinstance(obj, Mapping):
        try:
            return obj.get(key, UNDEFINED)
        except TypeError:
            return UNDEFINED
    if isinstance(key, int) and not isinstance(key, bool) and isinstance(obj, (list, tuple, str)):
        if 0 <= key < len(obj):
            return obj[key]
    return UNDEFINED


def get_property(obj: Any, name: str) -> Any:
    """Resolve one path segment on ``obj``.

    Mappings are looked up by key, ``length`` on any sized non-mapping is
    its length, numeric segments index sequences, and other objects expose
    public non-callable attributes only.
    """
    if is_missing(obj):
        return UNDEFINED
    if isinstance(obj, Mapping):
        return obj.get(name, UNDEFINED)
    if name == "length" and isinstance(obj, Sized):
        return len(obj)
    if isinstance(obj, (list, tuple, str)):
        if name.isdigit() and int(name) < len(obj):
            return obj[int(name)]
        return UNDEFINED
    if name.startswith("_"):
        return UNDEFINED
    value = getattr(obj, name, UNDEFINED)
    if callable(value):
        return UNDEFINED
    return value


def _eval_unary(node: UnaryOp, context: Mapping[str, Any]) -> Any:
    value = eval_node(node.operand, context)
    if node.op == "not":
        return not value
    if not _is_number(value):
        raise ExpressionError(f"Bad operand for unary {node.op}: {value!r}")
    return -value if node.op == "-" else +value


def _eval_binop(node: BinOp, context: Mapping[str, Any]) -> Any:
    left = eval_node(node.left, context)
    right = eval_node(node.right, context)
    op = node.op

    if op == "+" and (isinstance(left, str) or isinstance(right, str)):
        return to_string(left) + to_string(right)

    if not (_is_number(left) and _is_number(right)):
        raise ExpressionError(f"Unsupported operands for {op}: {left!r}, {right!r}")

    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if right == 0:
        raise ExpressionError(f"Division by zero: {left!r} {op} 0")
    if op == "%":
        return left % right
    # Exact integer division stays an int so ``{{ 6 / 2 }}`` prints 3
    if isinstance(left, int) and isinstance(right, int) and left % right == 0:
        return left // right
    return left / right


def _eval_compare(node: Compare, context: Mapping[str, Any]) -> bool:
    left = _normalize(eval_node(node.left, context))
    right = _normalize(eval_node(node.right, context))
    op = node.op
    if op in ("==", "==="):
        return bool(left == right)
    if op in ("!=", "!=="):
        return bool(left != right)
    try:
        return bool(_ORDERING[op](left, right))
    except TypeError as exc:
        raise ExpressionError(f"Cannot compare {left!r} {op} {right!r}") from exc


def _eval_boolop(node: BoolOp, context: Mapping[str, Any]) -> Any:
    value: Any = None
    if node.op == "and":
        for operand in node.values:
            value = eval_node(operand, context)
            if not value:
                return value
        return value
    for operand in node.values:
        value = eval_node(operand, context)
        if value:
            return value
    return value


def _eval_fallback(node: Fallback, context: Mapping[str, Any]) -> Any:
    try:
        value = eval_node(node.left, context)
    except ExpressionError:
        return eval_node(node.right, context)
    if is_missing(value) or value is False:
        return eval_node(node.right, context)
    return value


def _eval_condexpr(node: CondExpr, context: Mapping[str, Any]) -> Any:
    if eval_node(node.test, context):
        return eval_node(node.if_true, context)
    return eval_node(node.if_false, context)


def _normalize(value: Any) -> Any:
    return None if value is UNDEFINED else value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float))


_DISPATCH: dict[type, Callable[[Any, Mapping[str, Any]], Any]] = {
    Const: _eval_const,
    Name: _eval_name,
    Getattr: _eval_getattr,
    Getitem: _eval_getitem,
    UnaryOp: _eval_unary,
    BinOp: _eval_binop,
    Compare: _eval_compare,
    BoolOp: _eval_boolop,
    Fallback: _eval_fallback,
    CondExpr: _eval_condexpr,
}
