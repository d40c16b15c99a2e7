"""Expression nodes.

The expression language is a pure data query: literals, property paths,
arithmetic, comparison, logic, the ``||`` fallback and a ternary. There are
no call, assignment or method nodes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from bladehtml.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""


@dataclass(frozen=True, slots=True)
class Const(Expr):
    """Literal: string, number, boolean, None."""

    value: str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class Name(Expr):
    """Variable reference: ``user``"""

    name: str


@dataclass(frozen=True, slots=True)
class Getattr(Expr):
    """Dotted access: ``user.name``"""

    obj: Expr
    attr: str


@dataclass(frozen=True, slots=True)
class Getitem(Expr):
    """Subscript access: ``users[i]``, ``row['key']``"""

    obj: Expr
    key: Expr


@dataclass(frozen=True, slots=True)
class UnaryOp(Expr):
    """Unary operator: ``-x``, ``!x``, ``not x``"""

    op: str
    operand: Expr


@dataclass(frozen=True, slots=True)
class BinOp(Expr):
    """Arithmetic: ``a + b``, ``i % 2``"""

    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Compare(Expr):
    """Comparison: ``a == b``, ``count < 10``"""

    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class BoolOp(Expr):
    """Logical ``and``/``or`` over two or more operands."""

    op: str
    values: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class Fallback(Expr):
    """Fallback operator: ``title || 'Untitled'``

    Evaluates to ``right`` when ``left`` is None, undefined or False.
    """

    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class CondExpr(Expr):
    """Ternary: ``active ? 'on' : 'off'``"""

    test: Expr
    if_true: Expr
    if_false: Expr
