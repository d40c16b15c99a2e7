"""Directive processor: renders a parsed template tree to a string.

Resolution order for one template:

1. ``@extends``: every ``@section`` in the child (at any depth) is captured
   into the call's section map, then the parent's tree becomes the working
   body. Repeated until a template without ``@extends`` is reached; the
   most-derived definition of a section wins.
2. ``@yield``: renders the captured section, else its literal default.
3. Blocks, includes, components and custom directives, walked structurally.
4. ``{{ }}`` / ``{!! !!}`` interpolation of the text those produce.

Failure Handling:
    Fatal errors (unknown parent layout, unregistered alias, recursion
    bound) propagate. A missing include, unknown component, failing
    component or failing custom directive renders a placeholder comment.
    Expression failures render as empty output.

Thread-Safety:
    A Renderer keeps no per-render state on itself; section maps and loop
    scopes are local to each call.

"""

from __future__ import annotations

import logging
import re
from collections import ChainMap
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from bladehtml.analysis.visitor import walk
from bladehtml.environment.exceptions import RenderDepthError, TemplateNotFoundError
from bladehtml.expressions import evaluate, evaluate_condition, evaluate_object, to_string
from bladehtml.lexer import TEMPLATE_NAME_RE
from bladehtml.nodes import (
    Component,
    Data,
    DirectiveCall,
    Extends,
    For,
    Foreach,
    If,
    Include,
    Node,
    Output,
    Section,
    Slot,
    Yield,
)
from bladehtml.nodes import Template as TemplateNode
from bladehtml.render_context import render_context
from bladehtml.template.loop_context import LoopContext
from bladehtml.utils.html import html_escape

if TYPE_CHECKING:
    from bladehtml.environment.core import Environment
    from bladehtml.template.core import Template

logger = logging.getLogger(__name__)

Sections = dict[str, Sequence[Node]]

# Restricted counting-loop clauses for @for
_FOR_INIT_RE = re.compile(r"^(?:(?:let|var|const)\s+)?\$?(?P<var>[A-Za-z_]\w*)\s*=\s*(?P<start>-?\d+)$")
_FOR_TEST_RE = re.compile(r"^\$?(?P<var>[A-Za-z_]\w*)\s*(?P<op><=|<)\s*(?P<limit>.+)$")
_FOR_STEP_RES = (
    re.compile(r"^\$?(?P<var>[A-Za-z_]\w*)\s*\+\+$"),
    re.compile(r"^\+\+\s*\$?(?P<var>[A-Za-z_]\w*)$"),
    re.compile(r"^\$?(?P<var>[A-Za-z_]\w*)\s*\+=\s*(?P<step>-?\d+)$"),
    re.compile(r"^\$?(?P<var>[A-Za-z_]\w*)\s*=\s*\$?(?P<var2>[A-Za-z_]\w*)\s*\+\s*(?P<step>-?\d+)$"),
)
_INT_RE = re.compile(r"^-?\d+$")


def placeholder(kind: str, name: str) -> str:
    return f'<!-- {kind} "{name}" not found -->'


class Renderer:
    """Walks template trees for one Environment.

    Example:
        >>> renderer = Renderer(env)
        >>> renderer.render(env.from_string("Hi {{ name }}"), {"name": "Ada"})
        'Hi Ada'

    """

    def __init__(self, env: Environment):
        self._env = env
        self._dispatch: dict[str, Callable[[Any, Mapping[str, Any], Sections], str]] = {}
        for name in dir(self):
            if name.startswith("_render_") and name not in ("_render_nodes", "_render_tree"):
                method = getattr(self, name)
                if callable(method):
                    self._dispatch[name[8:]] = method

    def render(self, template: Template, context: Mapping[str, Any]) -> str:
        """Render ``template`` against ``context`` with a fresh section map."""
        with render_context(template.name, max_depth=self._env.max_depth):
            return self._render_tree(template.tree, context, {})

    # -- inheritance ---------------------------------------------------------

    def _render_tree(self, tree: TemplateNode, context: Mapping[str, Any], sections: Sections) -> str:
        if tree.extends is None:
            return self._render_nodes(tree.body, context, sections)

        collect_sections(tree.body, sections)
        parent_name = self.template_name(tree.extends, context)
        try:
            parent = self._env.get_template(parent_name)
        except TemplateNotFoundError as exc:
            raise TemplateNotFoundError(
                f"Parent template '{parent_name}' not found (extended by '{tree.extends.template}')",
                name=parent_name,
            ) from exc

        with render_context(parent.name, max_depth=self._env.max_depth):
            return self._render_tree(parent.tree, context, sections)

    def template_name(self, node: Extends | Include, context: Mapping[str, Any]) -> str:
        """Resolve a template reference argument to a name.

        The argument is an expression (normally a quoted literal); an
        unquoted reference such as ``layouts.app`` is taken literally.
        """
        value = evaluate(node.template, context)
        if isinstance(value, str) and value:
            return value
        if TEMPLATE_NAME_RE.fullmatch(node.template):
            return node.template
        return to_string(value) or node.template

    # -- node dispatch -------------------------------------------------------

    def _render_nodes(self, nodes: Iterable[Node], context: Mapping[str, Any], sections: Sections) -> str:
        dispatch = self._dispatch
        return "".join(dispatch[type(node).__name__.lower()](node, context, sections) for node in nodes)

    def _render_data(self, node: Data, context: Mapping[str, Any], sections: Sections) -> str:
        return node.value

    def _render_output(self, node: Output, context: Mapping[str, Any], sections: Sections) -> str:
        try:
            text = to_string(evaluate(node.expr, context))
        except Exception as exc:
            # str() itself can fail: huge ints, a raising __str__
            logger.debug("Cannot print %r: %s", node.expr, exc)
            return ""
        if node.escape and self._env.autoescape:
            return html_escape(text)
        return text

    def _render_extends(self, node: Extends, context: Mapping[str, Any], sections: Sections) -> str:
        return ""

    def _render_section(self, node: Section, context: Mapping[str, Any], sections: Sections) -> str:
        # Captured for the parent layout; a template without @extends renders nothing here
        return ""

    def _render_slot(self, node: Slot, context: Mapping[str, Any], sections: Sections) -> str:
        return ""

    def _render_yield(self, node: Yield, context: Mapping[str, Any], sections: Sections) -> str:
        body = sections.get(node.name)
        if body is None:
            return node.default or ""
        with render_context(f"@yield('{node.name}')", max_depth=self._env.max_depth):
            return self._render_nodes(body, context, sections)

    def _render_if(self, node: If, context: Mapping[str, Any], sections: Sections) -> str:
        if evaluate_condition(node.test, context):
            return self._render_nodes(node.body, context, sections)
        for test, body in node.elif_:
            if evaluate_condition(test, context):
                return self._render_nodes(body, context, sections)
        return self._render_nodes(node.else_, context, sections)

    def _render_foreach(self, node: Foreach, context: Mapping[str, Any], sections: Sections) -> str:
        items = as_sequence(evaluate(node.iter, context))
        if not items:
            return ""

        outer = context.get("loop")
        loop = LoopContext(items, parent=outer if isinstance(outer, LoopContext) else None)
        scope: dict[str, Any] = {"loop": loop}
        local = ChainMap(scope, context)
        parts = []
        for item in loop:
            scope[node.target] = item
            parts.append(self._render_nodes(node.body, local, sections))
        return "".join(parts)

    def _render_for(self, node: For, context: Mapping[str, Any], sections: Sections) -> str:
        bounds = self.for_bounds(node, context)
        if bounds is None:
            return ""

        var, start, stop, step = bounds
        scope: dict[str, Any] = {}
        local = ChainMap(scope, context)
        parts = []
        for i in range(start, stop, step):
            scope[var] = i
            parts.append(self._render_nodes(node.body, local, sections))
        return "".join(parts)

    def for_bounds(self, node: For, context: Mapping[str, Any]) -> tuple[str, int, int, int] | None:
        """Parse ``@for`` clauses into ``(var, start, stop, step)`` for ``range()``.

        Returns None (after logging) when the clauses are not a supported
        counting loop.
        """
        init = _FOR_INIT_RE.match(node.init)
        test = _FOR_TEST_RE.match(node.test)
        step_match = next((m for m in (r.match(node.step) for r in _FOR_STEP_RES) if m), None)

        if init is None or test is None or step_match is None:
            logger.warning("Unsupported @for(%s; %s; %s) rendered empty", node.init, node.test, node.step)
            return None

        var = init.group("var")
        groups = step_match.groupdict()
        if test.group("var") != var or groups["var"] != var or groups.get("var2", var) != var:
            logger.warning("@for clauses use different loop variables: %s; %s; %s", node.init, node.test, node.step)
            return None

        step = int(groups.get("step") or 1)
        if step <= 0:
            logger.warning("@for step must be positive, got %d", step)
            return None

        limit_text = test.group("limit").strip()
        if _INT_RE.match(limit_text):
            limit = int(limit_text)
        else:
            value = evaluate(limit_text, context)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                limit = self._env.default_loop_limit
                logger.warning(
                    "@for limit %r did not resolve to a number; using default_loop_limit=%d",
                    limit_text,
                    limit,
                )
            else:
                limit = int(value)

        stop = limit + 1 if test.group("op") == "<=" else limit
        return var, int(init.group("start")), stop, step

    def _render_include(self, node: Include, context: Mapping[str, Any], sections: Sections) -> str:
        name = self.template_name(node, context)
        try:
            template = self._env.get_template(name)
        except TemplateNotFoundError:
            logger.warning("Included template %r not found", name)
            return placeholder("Template", name)

        data = evaluate_object(node.data, context) if node.data else {}
        scope = ChainMap(data, context)
        with render_context(template.name, max_depth=self._env.max_depth):
            return self._render_tree(template.tree, scope, {})

    def _render_component(self, node: Component, context: Mapping[str, Any], sections: Sections) -> str:
        name = to_string(evaluate(node.name, context)).strip()
        if not name and TEMPLATE_NAME_RE.fullmatch(node.name):
            name = node.name
        factory = self._env.resolve_component(name) if name else None
        if factory is None:
            logger.warning("Component %r not found", name or node.name)
            return placeholder("Component", name or node.name)

        props = evaluate_object(node.props, context) if node.props else {}
        slots = {"default": node.content}
        for slot in node.slots:
            slots[slot.name] = slot.raw

        try:
            return self._env.mount_component(factory, name, props, slots)
        except RenderDepthError:
            raise
        except Exception:
            logger.exception("Error rendering component %r", name)
            return f'<!-- Error rendering component "{name}" -->'

    def _render_directivecall(self, node: DirectiveCall, context: Mapping[str, Any], sections: Sections) -> str:
        handler = self._env.directives.get(node.name)
        if handler is None:
            return node.raw
        try:
            return to_string(handler(node.args, context))
        except RenderDepthError:
            raise
        except Exception:
            logger.exception("Error in directive @%s(%s)", node.name, node.args)
            return f"<!-- Error in directive @{node.name} -->"


def collect_sections(nodes: Iterable[Node], sections: Sections) -> None:
    """Capture ``@section`` bodies at any depth; existing names are kept."""
    for top in nodes:
        for node in walk(top):
            if isinstance(node, Section) and node.name not in sections:
                sections[node.name] = node.body


def as_sequence(value: Any) -> Sequence[Any]:
    """Items of an iterable collection; strings, mappings and scalars are empty."""
    if value is None or isinstance(value, (str, bytes, Mapping)):
        return ()
    if isinstance(value, Sequence):
        return value
    if isinstance(value, Iterable):
        return list(value)
    return ()
