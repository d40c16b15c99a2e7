"""The ``loop`` variable bound inside ``@foreach`` bodies."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any


class LoopContext:
    """Position of the current ``@foreach`` iteration.

    Both the Jinja-style and the Blade-style spellings are available, so
    ``loop.index`` and ``loop.iteration`` agree, as do ``loop.length`` and
    ``loop.count``. Nested loops link to the enclosing one via ``parent``:

        @foreach(groups as group)
            @foreach(group.items as item)
                {{ loop.parent.iteration }}.{{ loop.iteration }} {{ item }}
            @endforeach
        @endforeach

    """

    __slots__ = ("_items", "_position", "parent")

    def __init__(self, items: Sequence[Any], parent: LoopContext | None = None) -> None:
        self._items = items
        self._position = 0
        self.parent = parent

    def __iter__(self) -> Iterator[Any]:
        for self._position, item in enumerate(self._items):
            yield item

    @property
    def index0(self) -> int:
        return self._position

    @property
    def index(self) -> int:
        """1-based position."""
        return self._position + 1

    iteration = index

    @property
    def length(self) -> int:
        return len(self._items)

    count = length

    @property
    def revindex(self) -> int:
        return self.length - self._position

    @property
    def revindex0(self) -> int:
        """Items left after the current one."""
        return self.length - self._position - 1

    remaining = revindex0

    @property
    def first(self) -> bool:
        return self._position == 0

    @property
    def last(self) -> bool:
        return self._position == self.length - 1

    @property
    def even(self) -> bool:
        return self.index % 2 == 0

    @property
    def odd(self) -> bool:
        return self.index % 2 == 1

    @property
    def depth(self) -> int:
        """Nesting level, 1 for the outermost loop."""
        return 1 if self.parent is None else self.parent.depth + 1

    @property
    def previtem(self) -> Any:
        return self._items[self._position - 1] if self._position > 0 else None

    @property
    def nextitem(self) -> Any:
        return self._items[self._position + 1] if self._position + 1 < self.length else None

    def __repr__(self) -> str:
        return f"<LoopContext {self.index}/{self.length} depth={self.depth}>"
