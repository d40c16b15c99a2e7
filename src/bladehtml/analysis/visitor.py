"""Shared traversal helpers for bladehtml template trees.

Provides ``iter_child_nodes`` for generic walks. Used by the dependency
analyzer and by the renderer's section collection.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bladehtml.nodes import Node

# Shared attr lists for generic child traversal
CONTAINER_ATTRS = ("body", "else_")
BRANCH_ATTRS = ("elif_",)


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield the template-level children of ``node`` in source order.

    Expression attributes are source text, not nodes, so only statement
    containers are followed. ``elif_`` branches are ``(test, body)`` pairs.
    """
    for attr in CONTAINER_ATTRS:
        children = getattr(node, attr, None)
        if children:
            yield from children
        if attr == "body":
            for branch_attr in BRANCH_ATTRS:
                for _test, body in getattr(node, branch_attr, None) or ():
                    yield from body


def walk(node: Node) -> Iterator[Node]:
    """Depth-first pre-order walk over ``node`` and all descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_child_nodes(current))))
