"""Control flow nodes: conditionals and loops."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from bladehtml.nodes.base import Node


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: ``@if(test) … [@elseif(test) …] [@else …] @endif``"""

    test: str
    body: Sequence[Node]
    elif_: Sequence[tuple[str, Sequence[Node]]] = ()
    else_: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class Foreach(Node):
    """Collection loop: ``@foreach(items as item) … @endforeach``"""

    iter: str
    target: str
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class For(Node):
    """Counting loop: ``@for(i = 0; i < n; i = i + 1) … @endfor``

    The three clauses are kept as source text; the renderer accepts only the
    restricted counting forms.
    """

    init: str
    test: str
    step: str
    body: Sequence[Node]
