"""Environment: the engine instance owning registries, configuration and render entry points.

Everything a render needs lives on one explicit object; there is no global
engine state. Two environments never share templates, components,
directives or aliases.

Example:
    >>> env = Environment()
    >>> env.register_template("layout", "<b>@yield('c', 'Def')</b>")
    >>> env.render("@extends('layout')@section('c')Hi@endsection")
    '<b>Hi</b>'

Thread-Safety:
    Registries are copy-on-write dicts, so concurrent renders are safe while
    no other thread registers. Parsed trees are immutable and cached by
    source text. Per-render state lives in locals and a ContextVar.

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import KW_ONLY, dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from bladehtml.analysis.dependencies import DependencyAnalyzer, DependencyGraph
from bladehtml.components.adapters import ComponentAdapter, TemplateComponent
from bladehtml.components.base import Component
from bladehtml.directives.builtin import BUILTIN_DIRECTIVES
from bladehtml.environment.exceptions import (
    AliasNotFoundError,
    ComponentNotFoundError,
    TemplateError,
    TemplateNotFoundError,
)
from bladehtml.environment.loaders import FileSystemLoader, Loader
from bladehtml.environment.registry import (
    ComponentRegistry,
    DirectiveHandler,
    DirectiveRegistry,
    TemplateRegistry,
)
from bladehtml.expressions import to_string
from bladehtml.lexer import TEMPLATE_NAME_RE
from bladehtml.nodes import Template as TemplateNode
from bladehtml.parser import parse
from bladehtml.render_context import render_context
from bladehtml.template.core import Template
from bladehtml.template.renderer import Renderer

logger = logging.getLogger(__name__)

ALIAS_DELIMITER = "::"


@lru_cache(maxsize=512)
def _parse_cached(source: str, name: str | None, strict: bool) -> TemplateNode:
    return parse(source, name, strict=strict)


def is_template_name(reference: str) -> bool:
    """True when ``reference`` names a template rather than being inline source.

    Names are dot-namespaced identifiers (``pages.home``, ``mail/welcome``),
    optionally prefixed with ``namespace::``.
    """
    return bool(TEMPLATE_NAME_RE.fullmatch(reference))


@dataclass
class Environment:
    """Template engine configuration and registries.

    Attributes:
        loader: Source of templates not registered directly
        autoescape: HTML-escape ``{{ }}`` output
        strict: Raise TemplateSyntaxError on malformed directive structure
            instead of emitting it as text
        max_depth: Bound on nested include/extends/component/yield renders
        default_namespace: Namespace probed for unregistered component names
        default_loop_limit: ``@for`` limit used when the bound cannot be resolved
        component_loader: ``callback(name) -> bool`` invoked for unknown
            components; it should register the component and return True
        data: Shared data visible to every top-level render

    """

    loader: Loader | None = None
    _: KW_ONLY
    autoescape: bool = True
    strict: bool = False
    max_depth: int = 50
    default_namespace: str = "components"
    default_loop_limit: int = 5
    component_loader: Callable[[str], bool] | None = None
    data: Mapping[str, Any] | None = None

    _templates: dict[str, str] = field(default_factory=dict, init=False, repr=False)
    _components: dict[str, Callable[..., Any]] = field(default_factory=dict, init=False, repr=False)
    _directives: dict[str, DirectiveHandler] = field(default_factory=dict, init=False, repr=False)
    _aliases: dict[str, Loader] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")
        self.data = dict(self.data or {})
        self._directives = dict(BUILTIN_DIRECTIVES)
        self._template_registry = TemplateRegistry(self, "_templates")
        self._component_registry = ComponentRegistry(self, "_components")
        self._directive_registry = DirectiveRegistry(self, "_directives")
        self._renderer = Renderer(self)

    # =========================================================================
    # Registries
    # =========================================================================

    @property
    def templates(self) -> TemplateRegistry:
        return self._template_registry

    @property
    def components(self) -> ComponentRegistry:
        return self._component_registry

    @property
    def directives(self) -> DirectiveRegistry:
        return self._directive_registry

    @property
    def aliases(self) -> dict[str, Loader]:
        return dict(self._aliases)

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    def register_template(self, name: str, source: str) -> None:
        """Register (or replace) template ``name``."""
        if not name:
            raise ValueError("Template name must not be empty")
        self.templates[name] = source

    def remove_template(self, name: str) -> bool:
        return self.templates.remove(name)

    def register_component(self, name: str, factory: Callable[..., Any]) -> None:
        """Register a component class or ``factory(props)`` under ``name``."""
        self.components[name] = factory

    def register_directive(self, name: str, handler: DirectiveHandler) -> None:
        """Register ``@name(args)`` → ``handler(args, context)``."""
        self.directives[name] = handler

    def register_alias(self, namespace: str, target: str | Path | Loader) -> None:
        """Make ``namespace::name`` references resolvable.

        ``target`` is a template directory or any loader; ``namespace::x``
        loads ``x`` from it. Templates registered under the full
        ``namespace::x`` name take precedence.
        """
        loader = FileSystemLoader(target) if isinstance(target, (str, Path)) else target
        aliases = self._aliases.copy()
        aliases[namespace] = loader
        self._aliases = aliases

    def set_data(self, data: Mapping[str, Any]) -> None:
        """Replace the shared data visible to every top-level render."""
        self.data = dict(data)

    # =========================================================================
    # Templates
    # =========================================================================

    def get_source(self, name: str) -> str:
        """Source text for ``name``: registry first, then alias or loader.

        Loaded sources are registered so each name is loaded once.

        Raises:
            AliasNotFoundError: ``namespace::`` prefix is not registered
            TemplateNotFoundError: No source provides ``name``
        """
        source = self._templates.get(name)
        if source is not None:
            return source

        if ALIAS_DELIMITER in name:
            namespace, key = name.split(ALIAS_DELIMITER, 1)
            loader = self._aliases.get(namespace)
            if loader is None:
                raise AliasNotFoundError(namespace, name)
        else:
            loader, key = self.loader, name

        if loader is None:
            raise TemplateNotFoundError(f"Template '{name}' not found", name=name)

        try:
            source, filename = loader.get_source(key)
        except TemplateNotFoundError as exc:
            if key == name:
                raise
            raise TemplateNotFoundError(f"Template '{name}' not found: {exc}", name=name) from exc

        logger.debug("Loaded template %r from %s", name, filename or type(loader).__name__)
        self.templates[name] = source
        return source

    def get_template(self, name: str) -> Template:
        """Load and parse template ``name``.

        Raises:
            AliasNotFoundError: ``namespace::`` prefix is not registered
            TemplateNotFoundError: No source provides ``name``
            TemplateSyntaxError: Malformed structure with ``strict=True``
        """
        source = self.get_source(name)
        return Template(self, _parse_cached(source, name, self.strict), name, source)

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Parse inline template source."""
        return Template(self, _parse_cached(source, name, self.strict), name, source)

    def list_templates(self) -> list[str]:
        names = set(self._templates)
        if self.loader is not None:
            names.update(self.loader.list_templates())
        return sorted(names)

    def render(self, template: str, context: Mapping[str, Any] | None = None, **kwargs: Any) -> str:
        """Render a template name or inline template source.

        ``template`` is looked up as a name when it looks like one
        (``pages.home``, ``admin::users``); anything else is rendered as
        inline source.

        Example:
            >>> env.render("Hello, {{ name }}!", {"name": "World"})
            'Hello, World!'

        Raises:
            TemplateNotFoundError: Unknown template or parent layout
            AliasNotFoundError: ``namespace::`` prefix is not registered
            RenderDepthError: Nested rendering exceeded ``max_depth``
        """
        if is_template_name(template):
            compiled = self.get_template(template)
        else:
            compiled = self.from_string(template)
        return compiled.render(context or {}, **kwargs)

    # =========================================================================
    # Components
    # =========================================================================

    def resolve_component(self, name: str) -> Callable[..., Any] | None:
        """Find (or create) the registry entry for component ``name``.

        Tries, in order: the component registry; ``component_loader(name)``
        then the registry again; the default-namespace spelling in the
        component registry (registered here as a ComponentAdapter); a
        template under either spelling (registered as a TemplateComponent).
        """
        factory = self._components.get(name)
        if factory is not None:
            return factory

        if self.component_loader is not None:
            try:
                loaded = self.component_loader(name)
            except Exception:
                logger.exception("component_loader failed for %r", name)
                loaded = False
            if loaded:
                factory = self._components.get(name)
                if factory is not None:
                    return factory

        alternate = self._alternate_component_name(name)
        target = self._components.get(alternate)
        if target is not None:
            adapter = ComponentAdapter(alternate, target)
            self.components[name] = adapter
            return adapter

        for template_name in (alternate, name):
            try:
                self.get_source(template_name)
            except TemplateError:
                continue
            factory = TemplateComponent.factory(template_name)
            self.components[name] = factory
            logger.debug("Component %r resolved to template %r", name, template_name)
            return factory

        return None

    def _alternate_component_name(self, name: str) -> str:
        prefix = f"{self.default_namespace}."
        if name.startswith(prefix):
            return name[len(prefix):]
        return prefix + name

    def mount_component(
        self,
        factory: Callable[..., Any],
        name: str,
        props: Mapping[str, Any],
        slots: Mapping[str, str],
    ) -> str:
        """Instantiate a component, fill its slots and render it."""
        with render_context(f"component:{name}", max_depth=self.max_depth):
            instance = factory(dict(props))
            if isinstance(instance, Component):
                instance.bind(self)
            for slot_name, text in slots.items():
                instance.set_slot(slot_name, text)
            return to_string(instance.render())

    def render_component(
        self,
        name: str,
        props: Mapping[str, Any] | None = None,
        slots: Mapping[str, str] | None = None,
    ) -> str:
        """Render a component outside of any template.

        Raises:
            ComponentNotFoundError: ``name`` does not resolve to a component
        """
        factory = self.resolve_component(name)
        if factory is None:
            raise ComponentNotFoundError(name)
        return self.mount_component(factory, name, props or {}, slots or {})

    # =========================================================================
    # Analysis
    # =========================================================================

    def _analyzer(self) -> DependencyAnalyzer:
        return DependencyAnalyzer(self.get_source, default_namespace=self.default_namespace)

    def analyze_dependencies(self, name: str) -> frozenset[str]:
        """Component names reachable from template ``name``."""
        return self._analyzer().analyze(name)

    def analyze_graph(self, name: str) -> DependencyGraph:
        return self._analyzer().analyze_graph(name)
