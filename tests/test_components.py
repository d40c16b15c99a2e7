"""Tests for the component runtime.

Components render in their own scope: props and slots only, never the
caller's data. Slots are raw template text rendered by the component.
"""

from __future__ import annotations

import pytest

from bladehtml import (
    Component,
    ComponentAdapter,
    ComponentNotFoundError,
    Environment,
    RenderDepthError,
    TemplateComponent,
    TemplateRuntimeError,
)
from bladehtml.utils.html import html_escape


class Alert(Component):
    template = '<div class="alert-{{ type || \'info\' }}">{{ content || \'Nothing\' }}</div>'


class Badge(Component):
    def render(self) -> str:
        label = html_escape(self.props.get("label", ""))
        return f"<span>{label}{self.slot()}</span>"


class Card(Component):
    template = "<h1>{{ slots.title || 'Untitled' }}</h1><p>{{ content }}</p>"


@pytest.fixture
def env() -> Environment:
    env = Environment()
    env.register_component("alert", Alert)
    env.register_component("badge", Badge)
    env.register_component("card", Card)
    return env


class TestInvocation:
    def test_props_and_default_slot(self, env: Environment) -> None:
        result = env.render("@component('alert', { type: 'warning' })Saved@endcomponent")
        assert result == '<div class="alert-warning">Saved</div>'

    def test_fallback_when_slot_empty(self, env: Environment) -> None:
        assert env.render("@component('alert')   @endcomponent") == '<div class="alert-info">Nothing</div>'

    def test_props_from_context(self, env: Environment) -> None:
        result = env.render("@component('alert', { type: level })Hi@endcomponent", {"level": "error"})
        assert result == '<div class="alert-error">Hi</div>'

    def test_failing_prop_value_keeps_page(self, env: Environment) -> None:
        class Settings:
            @property
            def level(self) -> str:
                raise ValueError("settings not loaded")

        result = env.render("A@component('alert', { type: s.level })y@endcomponent B", {"s": Settings()})
        assert result == 'A<div class="alert-info">y</div> B'

    def test_props_spread_from_mapping(self, env: Environment) -> None:
        result = env.render("@component('alert', opts)Hi@endcomponent", {"opts": {"type": "ok"}})
        assert result == '<div class="alert-ok">Hi</div>'

    def test_component_does_not_see_caller_data(self, env: Environment) -> None:
        # ``type`` exists in the caller but was not passed as a prop
        assert env.render("@component('alert')x@endcomponent", {"type": "leak"}) == (
            '<div class="alert-info">x</div>'
        )

    def test_slot_renders_in_component_scope(self, env: Environment) -> None:
        result = env.render(
            "@component('alert', { type: 'a', who: 'prop' })Hello {{ who }}@endcomponent",
            {"who": "caller"},
        )
        assert result == '<div class="alert-a">Hello prop</div>'

    def test_slot_markup_is_not_double_escaped(self, env: Environment) -> None:
        assert env.render("@component('alert')<b>bold</b>@endcomponent") == (
            '<div class="alert-info"><b>bold</b></div>'
        )

    def test_python_component(self, env: Environment) -> None:
        assert env.render("@component('badge', { label: '<new>' })!@endcomponent") == (
            "<span>&lt;new&gt;!</span>"
        )

    def test_named_slots(self, env: Environment) -> None:
        source = "@component('card')@slot('title')Hello@endslot Body @endcomponent"
        assert env.render(source) == "<h1>Hello</h1><p> Body </p>"

    def test_missing_named_slot_falls_back(self, env: Environment) -> None:
        assert env.render("@component('card')Body@endcomponent") == "<h1>Untitled</h1><p>Body</p>"

    def test_dynamic_component_name(self, env: Environment) -> None:
        assert env.render("@component(kind)x@endcomponent", {"kind": "badge"}) == "<span>x</span>"

    def test_nested_components(self, env: Environment) -> None:
        source = "@component('alert')@component('badge', { label: 'n' })@endcomponent@endcomponent"
        assert env.render(source) == '<div class="alert-info"><span>n</span></div>'

    def test_component_inside_loop(self, env: Environment) -> None:
        source = "@foreach(levels as l)@component('alert', { type: l })@endcomponent@endforeach"
        assert env.render(source, {"levels": ["a", "b"]}) == (
            '<div class="alert-a">Nothing</div><div class="alert-b">Nothing</div>'
        )


class TestIsolation:
    def test_sibling_slots_do_not_leak(self, env: Environment) -> None:
        source = (
            "@component('card')@slot('title')First@endslot One@endcomponent"
            "@component('card') Two@endcomponent"
        )
        assert env.render(source) == "<h1>First</h1><p> One</p><h1>Untitled</h1><p> Two</p>"

    def test_each_invocation_gets_a_new_instance(self, env: Environment) -> None:
        instances: list[Component] = []

        class Tracked(Component):
            def render(self) -> str:
                instances.append(self)
                return self.slot()

        env.register_component("tracked", Tracked)
        assert env.render("@component('tracked')a@endcomponent@component('tracked')b@endcomponent") == "ab"
        assert len(instances) == 2
        assert instances[0] is not instances[1]
        assert instances[1].slots == {"default": "b"}

    def test_props_are_private_copies(self, env: Environment) -> None:
        captured: dict[str, Component] = {}

        class Mutating(Component):
            def render(self) -> str:
                self.props["type"] = "changed"
                captured["c"] = self
                return ""

        env.register_component("mutating", Mutating)
        opts = {"type": "original"}
        env.render("@component('mutating', opts)@endcomponent", {"opts": opts})
        assert opts == {"type": "original"}


class TestResolution:
    def test_unknown_component_placeholder(self, env: Environment) -> None:
        assert env.render("a@component('nope')x@endcomponent b") == (
            'a<!-- Component "nope" not found --> b'
        )

    def test_failing_component_placeholder(self, env: Environment) -> None:
        class Broken(Component):
            def render(self) -> str:
                raise ValueError("broken")

        env.register_component("broken", Broken)
        assert env.render("@component('broken')@endcomponent") == '<!-- Error rendering component "broken" -->'

    def test_component_without_render_or_template(self, env: Environment) -> None:
        env.register_component("empty", Component)
        assert env.render("@component('empty')@endcomponent") == '<!-- Error rendering component "empty" -->'

    def test_default_namespace_probe(self, env: Environment) -> None:
        env.register_component("components.button", Badge)
        assert env.render("@component('button', { label: 'b' })@endcomponent") == "<span>b</span>"
        adapter = env.components["button"]
        assert isinstance(adapter, ComponentAdapter)
        assert adapter.target == "components.button"

    def test_namespaced_name_finds_bare_registration(self, env: Environment) -> None:
        assert env.render("@component('components.badge')x@endcomponent") == "<span>x</span>"
        assert env.components["components.badge"].target == "badge"

    def test_component_loader_callback(self, env: Environment) -> None:
        requested: list[str] = []

        def load(name: str) -> bool:
            requested.append(name)
            if name == "lazy":
                env.register_component("lazy", Badge)
                return True
            return False

        env.component_loader = load
        assert env.render("@component('lazy')!@endcomponent") == "<span>!</span>"
        assert requested == ["lazy"]
        # Registered now, so the loader is not consulted again
        env.render("@component('lazy')!@endcomponent")
        assert requested == ["lazy"]

    def test_component_loader_failure_is_logged_not_raised(self, env: Environment) -> None:
        def load(name: str) -> bool:
            raise OSError("disk")

        env.component_loader = load
        assert env.render("@component('ghost')@endcomponent") == '<!-- Component "ghost" not found -->'

    def test_template_backed_component(self, env: Environment) -> None:
        env.register_template("components.panel", "<section>{{ heading }}|{{ content }}</section>")
        result = env.render("@component('panel', { heading: 'H' })Body@endcomponent")
        assert result == "<section>H|Body</section>"
        assert isinstance(env.components["panel"](), TemplateComponent)

    def test_template_component_with_named_slot(self, env: Environment) -> None:
        env.register_template("components.box", "[{{ slots.footer }}]{{ content }}")
        source = "@component('box')@slot('footer')F {{ n }}@endslot main@endcomponent"
        assert env.render(source) == "[F ] main"

    def test_recursive_component_is_bounded(self) -> None:
        env = Environment(max_depth=8)
        env.register_template("components.loop", "@component('loop')@endcomponent")
        with pytest.raises(RenderDepthError):
            env.render("@component('loop')@endcomponent")


class TestRenderComponentApi:
    def test_render_component(self, env: Environment) -> None:
        assert env.render_component("alert", {"type": "x"}, {"default": "Body"}) == (
            '<div class="alert-x">Body</div>'
        )

    def test_render_component_unknown_raises(self, env: Environment) -> None:
        with pytest.raises(ComponentNotFoundError) as exc_info:
            env.render_component("missing")
        assert exc_info.value.name == "missing"

    def test_factory_function(self, env: Environment) -> None:
        env.register_component("hello", lambda props: Badge({"label": props.get("who", "?")}))
        assert env.render_component("hello", {"who": "Ada"}) == "<span>Ada</span>"

    def test_unbound_component_raises_runtime_error(self) -> None:
        with pytest.raises(TemplateRuntimeError):
            Alert({"type": "x"}).render()

    def test_slot_default(self) -> None:
        badge = Badge()
        badge.set_slot("default", "   ")
        assert badge.slot(default="fallback") == "fallback"
        assert badge.slot("other", "none") == "none"

    def test_register_non_callable_raises(self, env: Environment) -> None:
        with pytest.raises(TypeError):
            env.register_component("bad", "not callable")  # type: ignore[arg-type]
