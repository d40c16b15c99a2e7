"""Component block parsing: ``@component … @endcomponent`` and ``@slot``.

The default slot is kept as raw source (the body minus ``@slot`` blocks)
because a component renders its slot text in its own scope, not the
caller's. The parsed body is kept alongside it for static analysis.
"""

from __future__ import annotations

from bladehtml.nodes import Component, Data, Node, Slot
from bladehtml.parser.blocks.core import BlockStackMixin
from bladehtml.parser.blocks.template_structure import literal_or_text

_COMPONENT_CLOSERS = frozenset({"endcomponent"})
_SLOT_CLOSERS = frozenset({"endslot"})


class ComponentBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing component invocations.

    Required Host Attributes:
        - All from BlockStackMixin
        - _parse_body: method
        - _split_args: method
        - _raw_between: method
        - _advance: method
        - _pos: int
        - _slot_spans: list[list[tuple[int, int]]]
    """

    _pos: int
    _slot_spans: list[list[tuple[int, int]]]

    def _in_component_body(self) -> bool:
        return bool(self._block_stack) and self._block_stack[-1].name == "component"

    def _parse_component(self) -> list[Node]:
        """Parse @component(name[, { props }]) … @endcomponent."""
        start = self._advance()
        body_start = self._pos

        self._push_block(start, _COMPONENT_CLOSERS)
        self._slot_spans.append([])
        body, end = self._parse_body(_COMPONENT_CLOSERS)
        body_end = self._pos
        spans = self._slot_spans.pop()
        self._pop_block()

        if end is None:
            return self._unclosed(start, "endcomponent", body)
        self._advance()

        args = self._split_args(start.args)
        if not args or not args[0]:
            self._invalid_arguments(start, "a component name")
            return [
                Data(start.lineno, start.col_offset, start.raw),
                *body,
                Data(end.lineno, end.col_offset, end.raw),
            ]

        return [
            Component(
                lineno=start.lineno,
                col_offset=start.col_offset,
                name=args[0],
                props=", ".join(args[1:]) or None,
                content=self._raw_between(body_start, body_end, spans),
                body=tuple(body),
                slots=tuple(node for node in body if isinstance(node, Slot)),
            )
        ]

    def _parse_slot(self) -> list[Node]:
        """Parse @slot('name') … @endslot directly inside a component body."""
        start = self._advance()
        slot_start = self._pos - 1
        body_start = self._pos

        self._push_block(start, _SLOT_CLOSERS)
        body, end = self._parse_body(_SLOT_CLOSERS)
        body_end = self._pos
        self._pop_block()

        if end is None:
            return self._unclosed(start, "endslot", body)
        self._advance()

        args = self._split_args(start.args)
        name = literal_or_text(args[0]) if args and args[0] else "default"
        self._slot_spans[-1].append((slot_start, self._pos))

        return [
            Slot(
                lineno=start.lineno,
                col_offset=start.col_offset,
                name=name,
                body=tuple(body),
                raw=self._raw_between(body_start, body_end, []),
            )
        ]
