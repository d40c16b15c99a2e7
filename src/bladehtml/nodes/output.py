"""Output nodes: literal text, interpolation, custom directives."""

from __future__ import annotations

from dataclasses import dataclass

from bladehtml.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Literal text emitted unchanged."""

    value: str


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Interpolation: ``{{ expr }}`` (escape=True) or ``{!! expr !!}``."""

    expr: str
    escape: bool = True


@dataclass(frozen=True, slots=True)
class DirectiveCall(Node):
    """Custom directive: ``@name(args)``.

    ``raw`` is the original source, emitted verbatim when no directive of
    that name is registered at render time.
    """

    name: str
    args: str
    raw: str
