"""Template structure parsing for the bladehtml parser.

Provides the mixin for ``@extends``, ``@section``, ``@yield`` and
``@include``.
"""

from __future__ import annotations

from bladehtml.environment.exceptions import ExpressionError
from bladehtml.expressions.objects import split_top_level, string_literal
from bladehtml.nodes import Data, Extends, Include, Node, Output, Section, Yield
from bladehtml.parser.blocks.core import BlockStackMixin

_SECTION_CLOSERS = frozenset({"endsection"})


def literal_or_text(text: str) -> str:
    """Value of a quoted string literal, else the stripped text itself."""
    value = string_literal(text)
    return value if value is not None else text.strip()


class TemplateStructureBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing template structure directives.

    Required Host Attributes:
        - All from BlockStackMixin
        - _parse_body: method
        - _parse_block_body: method
        - _advance: method
        - _extends: Extends | None
    """

    _extends: Extends | None

    def _split_args(self, text: str | None) -> list[str]:
        try:
            return [part.strip() for part in split_top_level(text or "", ",")]
        except ExpressionError:
            return []

    def _parse_extends(self) -> list[Node]:
        """Parse @extends('layouts.app')."""
        start = self._advance()
        template = (start.args or "").strip()
        if not template:
            self._invalid_arguments(start, "a layout name")
            return [Data(start.lineno, start.col_offset, start.raw)]

        node = Extends(lineno=start.lineno, col_offset=start.col_offset, template=template)
        if self._extends is None:
            self._extends = node
        return [node]

    def _parse_section(self) -> list[Node]:
        """Parse @section('name') … @endsection or @section('name', 'inline')."""
        start = self._advance()
        args = self._split_args(start.args)
        if not args or not args[0] or len(args) > 2:
            self._invalid_arguments(start, "'name' or 'name', 'content'")
            return [Data(start.lineno, start.col_offset, start.raw)]

        name = literal_or_text(args[0])

        if len(args) == 2:
            inline = string_literal(args[1])
            content: Node
            if inline is not None:
                content = Data(start.lineno, start.col_offset, inline)
            else:
                content = Output(start.lineno, start.col_offset, args[1])
            return [Section(lineno=start.lineno, col_offset=start.col_offset, name=name, body=(content,))]

        body, end = self._parse_block_body(start, _SECTION_CLOSERS)
        if end is None:
            return self._unclosed(start, "endsection", body)

        return [Section(lineno=start.lineno, col_offset=start.col_offset, name=name, body=tuple(body))]

    def _parse_yield(self) -> list[Node]:
        """Parse @yield('name'[, 'default'])."""
        start = self._advance()
        args = self._split_args(start.args)
        if not args or not args[0] or len(args) > 2:
            self._invalid_arguments(start, "'name' or 'name', 'default'")
            return [Data(start.lineno, start.col_offset, start.raw)]

        default = literal_or_text(args[1]) if len(args) == 2 else None
        return [
            Yield(
                lineno=start.lineno,
                col_offset=start.col_offset,
                name=literal_or_text(args[0]),
                default=default,
            )
        ]

    def _parse_include(self) -> list[Node]:
        """Parse @include('partials.nav'[, { active: 'home' }])."""
        start = self._advance()
        args = self._split_args(start.args)
        if not args or not args[0]:
            self._invalid_arguments(start, "'name' or 'name', { data }")
            return [Data(start.lineno, start.col_offset, start.raw)]

        data = ", ".join(args[1:]) or None
        return [Include(lineno=start.lineno, col_offset=start.col_offset, template=args[0], data=data)]
