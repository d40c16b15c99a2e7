"""Static analysis of template trees.

Public API:
    DependencyAnalyzer: transitive component/template reference walker
    DependencyGraph: result of ``DependencyAnalyzer.analyze_graph()``
    walk / iter_child_nodes: generic tree traversal

"""

from bladehtml.analysis.dependencies import (
    DependencyAnalyzer,
    DependencyGraph,
    iter_references,
    literal_reference,
)
from bladehtml.analysis.visitor import iter_child_nodes, walk

__all__ = [
    "DependencyAnalyzer",
    "DependencyGraph",
    "iter_child_nodes",
    "iter_references",
    "literal_reference",
    "walk",
]
