"""Immutable tree nodes produced by the bladehtml parsers.

Template nodes keep expression arguments as source text; the expression
evaluator compiles them on first use and caches the result by text.
"""

from bladehtml.nodes.base import Node
from bladehtml.nodes.control_flow import For, Foreach, If
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
from bladehtml.nodes.output import Data, DirectiveCall, Output
from bladehtml.nodes.structure import (
    Component,
    Extends,
    Include,
    Section,
    Slot,
    Template,
    Yield,
)

__all__ = [
    "BinOp",
    "BoolOp",
    "Compare",
    "Component",
    "CondExpr",
    "Const",
    "Data",
    "DirectiveCall",
    "Expr",
    "Extends",
    "Fallback",
    "For",
    "Foreach",
    "Getattr",
    "Getitem",
    "If",
    "Include",
    "Name",
    "Node",
    "Output",
    "Section",
    "Slot",
    "Template",
    "UnaryOp",
    "Yield",
]
