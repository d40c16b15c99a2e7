"""Components resolved under a name other than the one they were registered with.

``ComponentAdapter`` replaces ad-hoc subclassing: when ``@component('alert')``
finds only ``components.alert`` registered, the environment registers an
adapter under ``alert`` that forwards construction to the target.
``TemplateComponent`` turns a registered template into a component.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from bladehtml.components.base import Component


@dataclass(frozen=True, slots=True)
class ComponentAdapter:
    """Forwarding factory for a component registered under another name.

    Attributes:
        target: Name the component was originally registered under
        factory: The target's factory
    """

    target: str
    factory: Callable[[Mapping[str, Any]], Any]

    def __call__(self, props: Mapping[str, Any] | None = None) -> Any:
        return self.factory(dict(props or {}))


class TemplateComponent(Component):
    """Component whose markup is a registered template.

    The template renders against ``scope()``: the props plus the slots
    rendered in that same scope.
    """

    def __init__(self, template_name: str, props: Mapping[str, Any] | None = None):
        super().__init__(props)
        self.template_name = template_name

    @classmethod
    def factory(cls, template_name: str) -> TemplateComponentFactory:
        return TemplateComponentFactory(template_name)

    def render(self) -> str:
        env = self._require_env()
        return env.get_template(self.template_name).render_isolated(self.scope())

    def __repr__(self) -> str:
        return f"<TemplateComponent {self.template_name} props={sorted(self.props)}>"


@dataclass(frozen=True, slots=True)
class TemplateComponentFactory:
    """Registry entry producing ``TemplateComponent`` instances for one template."""

    template_name: str

    def __call__(self, props: Mapping[str, Any] | None = None) -> TemplateComponent:
        return TemplateComponent(self.template_name, props)
