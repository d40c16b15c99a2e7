"""Template: a named, parsed template bound to an Environment."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bladehtml.environment.core import Environment
    from bladehtml.nodes import Template as TemplateNode


class Template:
    """Parsed template ready to render.

    Obtained from ``Environment.get_template()`` or
    ``Environment.from_string()``; the tree is immutable and shared between
    renders.

    Example:
        >>> template = env.from_string("Hello, {{ name }}!")
        >>> template.render(name="World")
        'Hello, World!'

    Thread-Safety:
        Rendering keeps all state in locals and the render ContextVar, so a
        Template can be rendered concurrently from several threads.
    """

    __slots__ = ("_env", "name", "source", "tree")

    def __init__(self, env: Environment, tree: TemplateNode, name: str | None, source: str):
        self._env = env
        self.tree = tree
        self.name = name
        self.source = source

    @property
    def environment(self) -> Environment:
        return self._env

    @property
    def extends(self) -> str | None:
        """Raw argument of the template's ``@extends``, if any."""
        return self.tree.extends.template if self.tree.extends else None

    def render(self, *args: Any, **kwargs: Any) -> str:
        """Render with the environment's shared data plus the given context.

        Accepts the same arguments as ``dict()``; keyword arguments win over
        a positional mapping, and both win over ``Environment.data``.
        """
        context = dict(self._env.data)
        context.update(*args, **kwargs)
        return self._env.renderer.render(self, context)

    def render_isolated(self, scope: Mapping[str, Any]) -> str:
        """Render against ``scope`` alone, without the environment's shared data."""
        return self._env.renderer.render(self, scope)

    def __repr__(self) -> str:
        return f"<Template {self.name or '(inline)'}>"
