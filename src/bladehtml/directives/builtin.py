"""Built-in directives registered on every Environment.

Each handler takes the raw argument text and the current context and
returns output text. Handlers evaluate their arguments with the restricted
expression evaluator, never with Python ``eval``.

- ``@json(expr)``: JSON encoding of the value (indented)
- ``@raw(expr)``: the value's string form, unescaped
- ``@date(expr[, 'format'])``: date formatting
- ``@class(['name' => cond, 'always'])``: space-joined class names
- ``@style(['prop' => value])``: ``prop: value`` pairs joined by ``; ``
- ``@dump(expr)``: escaped JSON inside a styled ``<pre>`` block

"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from datetime import date, datetime, timezone
from typing import Any

from bladehtml.expressions import evaluate, evaluate_condition, split_top_level, string_literal, to_string
from bladehtml.utils.html import Markup, html_escape

# Names of JavaScript Date methods accepted as @date formats
DATE_FORMATS: dict[str, str] = {
    "toLocaleString": "%c",
    "toLocaleDateString": "%x",
    "toLocaleTimeString": "%X",
    "toDateString": "%a %b %d %Y",
    "toTimeString": "%H:%M:%S",
}

DUMP_STYLE = "background: #f4f4f4; padding: 10px; border-radius: 5px; color: #333;"


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, Mapping):
        return dict(value)
    return str(value)


def to_json(value: Any, indent: int | None = 2) -> str:
    return json.dumps(value, indent=indent, default=_json_default, ensure_ascii=False)


def json_directive(args: str, context: Mapping[str, Any]) -> str:
    return to_json(evaluate(args, context))


def raw_directive(args: str, context: Mapping[str, Any]) -> str:
    return to_string(evaluate(args, context))


def coerce_datetime(value: Any) -> datetime | None:
    """Datetime for a datetime, date, POSIX timestamp or ISO 8601 string."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def date_directive(args: str, context: Mapping[str, Any]) -> str:
    parts = [part.strip() for part in split_top_level(args, ",")]
    moment = coerce_datetime(evaluate(parts[0], context)) if parts and parts[0] else None
    if moment is None:
        return "Invalid Date"

    fmt = string_literal(parts[1]) if len(parts) > 1 else None
    if fmt is None or fmt == "toLocaleString":
        return moment.strftime(DATE_FORMATS["toLocaleString"])
    if fmt in ("toISOString", "toJSON"):
        return moment.isoformat()
    return moment.strftime(DATE_FORMATS.get(fmt, fmt))


def _pairs(args: str) -> list[tuple[str, str | None]]:
    """``['a' => expr, 'b']`` → ``[('a', 'expr'), ('b', None)]``."""
    text = args.strip()
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    pairs: list[tuple[str, str | None]] = []
    for item in split_top_level(text, ","):
        item = item.strip()
        if not item:
            continue
        key, arrow, value = item.partition("=>")
        name = string_literal(key)
        if name is None:
            name = key.strip()
        pairs.append((name, value.strip() if arrow else None))
    return pairs


def class_directive(args: str, context: Mapping[str, Any]) -> str:
    classes = [
        name
        for name, condition in _pairs(args)
        if condition is None or evaluate_condition(condition, context)
    ]
    return " ".join(name for name in classes if name)


def style_directive(args: str, context: Mapping[str, Any]) -> str:
    styles = []
    for prop, value_expr in _pairs(args):
        if value_expr is None:
            styles.append(prop)
            continue
        value = evaluate(value_expr, context)
        if value is not None and value is not False and value != "":
            styles.append(f"{prop}: {to_string(value)}")
    return "; ".join(styles)


def dump_directive(args: str, context: Mapping[str, Any]) -> str:
    return Markup(f'<pre style="{DUMP_STYLE}">{html_escape(to_json(evaluate(args, context)))}</pre>')


BUILTIN_DIRECTIVES: dict[str, Callable[[str, Mapping[str, Any]], str]] = {
    "json": json_directive,
    "raw": raw_directive,
    "date": date_directive,
    "class": class_directive,
    "style": style_directive,
    "dump": dump_directive,
}
