"""Control flow block parsing: ``@if``, ``@foreach`` and ``@for``."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from bladehtml.environment.exceptions import ExpressionError
from bladehtml.expressions.objects import split_top_level
from bladehtml.nodes import Data, For, Foreach, If, Node
from bladehtml.parser.blocks.core import BlockStackMixin

if TYPE_CHECKING:
    from bladehtml._types import Token

_IF_CLOSERS = frozenset({"elseif", "else", "endif"})
_ELSE_CLOSERS = frozenset({"endif"})
_FOREACH_CLOSERS = frozenset({"endforeach"})
_FOR_CLOSERS = frozenset({"endfor"})

_FOREACH_RE = re.compile(r"^(?P<iter>.+?)\s+as\s+\$?(?P<target>[A-Za-z_][\w]*)\s*$", re.DOTALL)


class ControlFlowBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing control flow blocks.

    Required Host Attributes:
        - All from BlockStackMixin
        - _parse_body: method
        - _advance: method
    """

    def _parse_if(self) -> list[Node]:
        """Parse @if(cond) … [@elseif(cond) …] [@else …] @endif."""
        start = self._advance()
        self._push_block(start, _IF_CLOSERS)

        body, end = self._parse_body(_IF_CLOSERS)
        literal: list[Node] = list(body)
        elif_: list[tuple[str, tuple[Node, ...]]] = []
        else_: list[Node] = []

        while end is not None and end.value == "elseif":
            self._advance()
            branch, next_end = self._parse_body(_IF_CLOSERS)
            elif_.append(((end.args or "").strip(), tuple(branch)))
            literal += [Data(end.lineno, end.col_offset, end.raw), *branch]
            end = next_end

        if end is not None and end.value == "else":
            self._advance()
            self._pop_block()
            self._push_block(start, _ELSE_CLOSERS)
            else_, else_end = self._parse_body(_ELSE_CLOSERS)
            literal += [Data(end.lineno, end.col_offset, end.raw), *else_]
            end = else_end

        self._pop_block()
        if end is None:
            return self._unclosed(start, "endif", literal)
        self._advance()

        return [
            If(
                lineno=start.lineno,
                col_offset=start.col_offset,
                test=(start.args or "").strip(),
                body=tuple(body),
                elif_=tuple(elif_),
                else_=tuple(else_),
            )
        ]

    def _parse_foreach(self) -> list[Node]:
        """Parse @foreach(items as item) … @endforeach."""
        start = self._advance()
        body, end = self._parse_block_body(start, _FOREACH_CLOSERS)
        if end is None:
            return self._unclosed(start, "endforeach", body)

        match = _FOREACH_RE.match((start.args or "").strip())
        if match is None:
            self._invalid_arguments(start, "'collection as item'")
            return self._as_text(start, body, end)

        return [
            Foreach(
                lineno=start.lineno,
                col_offset=start.col_offset,
                iter=match.group("iter").strip(),
                target=match.group("target"),
                body=tuple(body),
            )
        ]

    def _parse_for(self) -> list[Node]:
        """Parse @for(init; cond; step) … @endfor.

        Only the clause split happens here; the renderer decides whether
        the clauses form a supported counting loop.
        """
        start = self._advance()
        body, end = self._parse_block_body(start, _FOR_CLOSERS)
        if end is None:
            return self._unclosed(start, "endfor", body)

        try:
            clauses = [clause.strip() for clause in split_top_level(start.args or "", ";")]
        except ExpressionError:
            clauses = []
        if len(clauses) != 3:
            self._invalid_arguments(start, "'init; condition; increment'")
            return self._as_text(start, body, end)

        init, test, step = clauses
        return [
            For(
                lineno=start.lineno,
                col_offset=start.col_offset,
                init=init,
                test=test,
                step=step,
                body=tuple(body),
            )
        ]

    # -- shared ------------------------------------------------------------

    def _parse_block_body(self, start: Token, closers: frozenset[str]) -> tuple[list[Node], Token | None]:
        """Parse a single-closer block body, consuming the closer if found."""
        self._push_block(start, closers)
        body, end = self._parse_body(closers)
        self._pop_block()
        if end is not None:
            self._advance()
        return body, end

    def _as_text(self, start: Token, body: list[Node], end: Token) -> list[Node]:
        return [
            Data(start.lineno, start.col_offset, start.raw),
            *body,
            Data(end.lineno, end.col_offset, end.raw),
        ]
