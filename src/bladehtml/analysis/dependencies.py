"""Static dependency analysis: which components does a template need?

Walks ``@extends``, ``@include`` and ``@component`` references with
literal names, breadth-first from a root template, so a host can load
every component a page needs before rendering it. Dynamic references
(``@include(partialName)``) are skipped. They are only known at render time.

Component names are dual-indexed: ``alert`` is also reported as
``components.alert`` (and vice versa), matching how the component runtime
probes the default namespace.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from bladehtml.analysis.visitor import walk
from bladehtml.environment.exceptions import TemplateError
from bladehtml.expressions.objects import string_literal
from bladehtml.lexer import TEMPLATE_NAME_RE
from bladehtml.nodes import Component, Extends, Include
from bladehtml.nodes import Template as TemplateNode
from bladehtml.parser import parse

logger = logging.getLogger(__name__)

SourceResolver = Callable[[str], "str | None"]


@dataclass(frozen=True, slots=True)
class DependencyGraph:
    """Result of one analysis run.

    Attributes:
        root: Template the walk started from
        templates: Templates reached (and found)
        components: Component names reached, dual-indexed
        edges: ``(from_template, reference, kind)`` with kind one of
            ``extends``, ``include``, ``component``
        missing: Template references with no source
    """

    root: str
    templates: frozenset[str]
    components: frozenset[str]
    edges: frozenset[tuple[str, str, str]]
    missing: frozenset[str]


class DependencyAnalyzer:
    """Breadth-first reference walker over template sources.

    Example:
        >>> analyzer = DependencyAnalyzer(env.templates.get)
        >>> analyzer.analyze("pages.dashboard")
        frozenset({'alert', 'components.alert', 'card', 'components.card'})

    Terminates on cycles and missing references: every template is
    processed at most once.
    """

    def __init__(self, source_resolver: SourceResolver, *, default_namespace: str = "components"):
        self._resolve = source_resolver
        self._prefix = f"{default_namespace}."

    def analyze(self, root: str) -> frozenset[str]:
        """Component names transitively reachable from ``root``."""
        return self.analyze_graph(root).components

    def analyze_graph(self, root: str) -> DependencyGraph:
        queue: deque[str] = deque([root])
        visited: set[str] = set()
        templates: set[str] = set()
        components: set[str] = set()
        edges: set[tuple[str, str, str]] = set()
        missing: set[str] = set()

        while queue:
            name = queue.popleft()
            if name in visited:
                continue
            visited.add(name)

            tree = self._load(name)
            if tree is None:
                missing.add(name)
                continue
            templates.add(name)

            for kind, reference in iter_references(tree):
                edges.add((name, reference, kind))
                if kind != "component":
                    queue.append(reference)
                    continue

                spellings = self.component_names(reference)
                components.update(spellings)
                # A component backed by a template may use further components
                for spelling in spellings:
                    if spelling not in visited and self._has_source(spelling):
                        queue.append(spelling)
                        break

        logger.debug(
            "Dependencies of %r: %d templates, %d components, %d missing",
            root,
            len(templates),
            len(components),
            len(missing),
        )
        return DependencyGraph(
            root=root,
            templates=frozenset(templates),
            components=frozenset(components),
            edges=frozenset(edges),
            missing=frozenset(missing),
        )

    def component_names(self, name: str) -> tuple[str, str]:
        """``(requested, alternate)`` spellings of a component name."""
        if name.startswith(self._prefix):
            return name, name[len(self._prefix):]
        return name, self._prefix + name

    def _has_source(self, name: str) -> bool:
        return self._source(name) is not None

    def _source(self, name: str) -> str | None:
        try:
            return self._resolve(name)
        except TemplateError:
            return None

    def _load(self, name: str) -> TemplateNode | None:
        source = self._source(name)
        if source is None:
            return None
        return parse(source, name)


def literal_reference(argument: str) -> str | None:
    """Template or component name of a literal argument, else None."""
    value = string_literal(argument)
    if value is not None:
        return value
    argument = argument.strip()
    if TEMPLATE_NAME_RE.fullmatch(argument) and "." in argument:
        return argument
    return None


def iter_references(tree: TemplateNode) -> Iterator[tuple[str, str]]:
    """Yield ``(kind, name)`` for each literal reference in ``tree``."""
    for node in walk(tree):
        if isinstance(node, Extends):
            kind, argument = "extends", node.template
        elif isinstance(node, Include):
            kind, argument = "include", node.template
        elif isinstance(node, Component):
            kind, argument = "component", node.name
        else:
            continue
        name = literal_reference(argument)
        if name:
            yield kind, name
