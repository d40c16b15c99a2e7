"""Component base class.

A component owns a private props mapping and a private slot mapping; its
render logic sees nothing of the calling template's data. Two sibling
``@component`` invocations create two instances, so slot contents never
leak between them.

Components are written either in Python, by overriding ``render()``::

    class Badge(Component):
        def render(self) -> str:
            label = html_escape(self.props.get("label", ""))
            return f'<span class="badge">{label}{self.slot()}</span>'

or as markup, by setting ``template``, which is rendered in the
component's own scope (see ``scope()``)::

    class Alert(Component):
        template = '<div class="alert alert-{{ type || "info" }}">{{ content }}</div>'

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from bladehtml.environment.exceptions import TemplateRuntimeError
from bladehtml.utils.html import Markup

if TYPE_CHECKING:
    from bladehtml.environment.core import Environment


class Component:
    """Base class for components.

    Attributes:
        props: Properties passed by the caller (a private copy)
        env: Environment rendering this instance; set by ``bind()`` before
            ``render()`` is called
        template: Optional markup rendered by the default ``render()``
    """

    template: ClassVar[str | None] = None

    def __init__(self, props: Mapping[str, Any] | None = None):
        self.props: dict[str, Any] = dict(props or {})
        self.env: Environment | None = None
        self._slots: dict[str, str] = {}

    def bind(self, env: Environment) -> Component:
        self.env = env
        return self

    def set_slot(self, name: str, content: str) -> None:
        """Fill slot ``name`` with raw (unrendered) template text."""
        self._slots[name] = content

    def slot(self, name: str = "default", default: str = "") -> str:
        """Raw text of slot ``name``, or ``default`` when it is missing or blank."""
        content = self._slots.get(name)
        if content is None or not content.strip():
            return default
        return content

    @property
    def slots(self) -> dict[str, str]:
        return dict(self._slots)

    def scope(self) -> dict[str, Any]:
        """Variables visible to this component's markup.

        The props, plus:
            content / slot: the default slot rendered in this scope, as
                Markup, or None when it is empty
            slots: every non-empty slot rendered the same way, by name
        """
        rendered = {
            name: self._render_slot(text)
            for name, text in self._slots.items()
            if text.strip()
        }
        scope = dict(self.props)
        content = rendered.get("default")
        if content is not None or "content" not in scope:
            scope["content"] = content
        scope["slot"] = content
        scope["slots"] = rendered
        return scope

    def render_source(self, source: str) -> str:
        """Render a template fragment in this component's scope."""
        env = self._require_env()
        return env.from_string(source, name=f"component:{type(self).__name__}").render_isolated(self.scope())

    def render(self) -> str:
        if self.template is None:
            raise NotImplementedError(f"{type(self).__name__} must override render() or set template")
        return self.render_source(self.template)

    def _render_slot(self, text: str) -> Markup:
        if self.env is None:
            return Markup(text)
        return Markup(self.env.from_string(text).render_isolated(self.props))

    def _require_env(self) -> Environment:
        if self.env is None:
            raise TemplateRuntimeError(
                f"Component {type(self).__name__} is not bound to an environment",
                suggestion="Render components through Environment.render_component() or @component",
            )
        return self.env

    def __repr__(self) -> str:
        return f"<{type(self).__name__} props={sorted(self.props)}>"
