"""Object-literal arguments for ``@include`` and ``@component``.

``{ key: expr, 'quoted key': 'literal', nested: { a: 1 }, tags: [a, b] }``

Splitting is depth-aware over ``{}``, ``[]`` and ``()`` and skips quoted
strings, so commas and colons inside nested values or strings never split
the outer literal. Anything that cannot be parsed evaluates to ``{}``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from bladehtml._types import TokenType
from bladehtml.environment.exceptions import ExpressionError
from bladehtml.expressions.evaluator import UNDEFINED, eval_node
from bladehtml.expressions.parser import parse_expression, tokenize

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"[A-Za-z_$][\w$-]*")
_IDENT_RE = re.compile(r"[A-Za-z_$][\w$]*")

_OPENERS = {"{": "}", "[": "]", "(": ")"}
_CLOSERS = frozenset(_OPENERS.values())


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split ``text`` on ``sep`` occurrences outside brackets and quotes.

    Raises:
        ExpressionError: Unbalanced brackets or an unterminated string
    """
    parts: list[str] = []
    stack: list[str] = []
    quote: str | None = None
    start = 0
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if quote:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char in _OPENERS:
            stack.append(_OPENERS[char])
        elif char in _CLOSERS:
            if not stack or stack.pop() != char:
                raise ExpressionError(f"Unbalanced {char!r} in {text!r}")
        elif char == sep and not stack:
            parts.append(text[start:i])
            start = i + 1
        i += 1
    if quote or stack:
        raise ExpressionError(f"Unterminated literal in {text!r}")
    parts.append(text[start:])
    return parts


def string_literal(text: str) -> str | None:
    """Return the value of ``text`` if it is exactly one quoted string."""
    try:
        tokens = tokenize(text.strip())
    except ExpressionError:
        return None
    if len(tokens) == 2 and tokens[0].type == TokenType.STRING:
        return tokens[0].value
    return None


def evaluate_object(text: str, context: Mapping[str, Any]) -> dict[str, Any]:
    """Evaluate an object literal (or a name bound to a mapping) to a dict.

    Example:
        >>> evaluate_object("{ type: 'info', title: page.title }", {"page": {"title": "Hi"}})
        {'type': 'info', 'title': 'Hi'}

    Failures are logged at DEBUG level and yield ``{}``.
    """
    try:
        return _evaluate_object(text.strip(), context)
    except Exception as exc:
        logger.debug("Object literal %r failed: %s", text, exc)
        return {}


def _evaluate_object(text: str, context: Mapping[str, Any]) -> dict[str, Any]:
    if not text:
        return {}

    if not (text.startswith("{") and text.endswith("}")):
        value = _evaluate_value(text, context)
        if isinstance(value, Mapping):
            return dict(value)
        raise ExpressionError(f"Not an object literal: {text!r}")

    inner = text[1:-1].strip()
    if not inner:
        return {}

    # ``{ user }`` spreads a mapping bound to a single name
    if _IDENT_RE.fullmatch(inner):
        value = context.get(inner.lstrip("$"), UNDEFINED)
        if isinstance(value, Mapping):
            return dict(value)

    result: dict[str, Any] = {}
    for part in split_top_level(inner, ","):
        part = part.strip()
        if not part:
            continue
        pieces = split_top_level(part, ":")
        if len(pieces) == 1:
            if not _IDENT_RE.fullmatch(part):
                raise ExpressionError(f"Expected 'key: value', got {part!r}")
            key = part.lstrip("$")
            result[key] = _evaluate_value(key, context)
            continue
        raw_key = pieces[0].strip()
        # Rejoin so a ternary's ``:`` stays in the value
        raw_value = ":".join(pieces[1:]).strip()
        result[_parse_key(raw_key)] = _evaluate_value(raw_value, context)
    return result


def _parse_key(raw_key: str) -> str:
    quoted = string_literal(raw_key)
    if quoted is not None:
        return quoted
    if _KEY_RE.fullmatch(raw_key):
        return raw_key.lstrip("$")
    raise ExpressionError(f"Invalid object key {raw_key!r}")


def _evaluate_value(text: str, context: Mapping[str, Any]) -> Any:
    if text.startswith("{") and text.endswith("}"):
        return _evaluate_object(text, context)
    if text.startswith("[") and text.endswith("]"):
        items = [item.strip() for item in split_top_level(text[1:-1], ",")]
        return [_evaluate_value(item, context) for item in items if item]
    try:
        value = eval_node(parse_expression(text), context)
    except Exception as exc:
        logger.debug("Object value %r failed: %s", text, exc)
        return None
    return None if value is UNDEFINED else value
