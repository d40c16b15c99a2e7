"""Base node class for the bladehtml tree."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all tree nodes.

    All nodes track their source location for error reporting.
    Nodes are immutable, so a parsed tree can be cached and shared
    between concurrent renders.

    """

    lineno: int
    col_offset: int
