"""Rendering tests: interpolation, control flow, includes and custom directives."""

from __future__ import annotations

import logging

import pytest

from bladehtml import Environment, Markup, RenderDepthError, TemplateNotFoundError

from .conftest import assert_contains, assert_template_equal


class UnloadedProfile:
    @property
    def name(self) -> str:
        raise ValueError("profile not loaded")


class Unprintable:
    def __str__(self) -> str:
        raise RuntimeError("no text form")


class TestInterpolation:
    """``{{ }}`` and ``{!! !!}`` output."""

    def test_hello_world(self, env: Environment) -> None:
        env.register_template("t", "Hello, {{ name }}!")
        assert env.render("t", {"name": "World"}) == "Hello, World!"

    def test_missing_variable_renders_empty(self, env: Environment) -> None:
        env.register_template("t", "Hello, {{ name }}!")
        assert env.render("t", {}) == "Hello, !"

    def test_escapes_html_once(self, env: Environment) -> None:
        result = env.render("{{ v }}", {"v": "<a href=\"x\">'&'</a>"})
        assert result == "&lt;a href=&quot;x&quot;&gt;&#039;&amp;&#039;&lt;/a&gt;"

    def test_already_escaped_text_is_escaped_again_exactly_once(self, env: Environment) -> None:
        assert env.render("{{ v }}", {"v": "&amp;"}) == "&amp;amp;"

    def test_markup_is_not_escaped(self, env: Environment) -> None:
        assert env.render("{{ v }}", {"v": Markup("<b>ok</b>")}) == "<b>ok</b>"

    def test_raw_echo(self, env: Environment) -> None:
        assert env.render("{!! v !!}", {"v": "<b>ok</b>"}) == "<b>ok</b>"

    def test_autoescape_disabled(self, env_raw: Environment) -> None:
        assert env_raw.render("{{ v }}", {"v": "<b>"}) == "<b>"

    def test_bad_expression_renders_empty(self, env: Environment) -> None:
        assert env.render("[{{ user.delete() }}]", {"user": {}}) == "[]"

    def test_booleans_and_numbers(self, env: Environment) -> None:
        assert env.render("{{ a }} {{ b }} {{ c }}", {"a": True, "b": 2.0, "c": 1.5}) == "true 2 1.5"

    def test_comment_and_escapes(self, env: Environment) -> None:
        assert env.render("{{-- note --}}@@if @{{ raw }}", {}) == "@if {{ raw }}"

    def test_plain_text_unchanged(self, env: Environment) -> None:
        source = "<p>Contact: team@example.com, 50% off</p>"
        assert env.render(source) == source

    def test_shared_data(self, env: Environment) -> None:
        env.set_data({"site": "Docs", "name": "shared"})
        assert env.render("{{ site }}/{{ name }}", {"name": "local"}) == "Docs/local"

    def test_from_string_render_kwargs(self, env: Environment) -> None:
        template = env.from_string("{{ a }}-{{ b }}")
        assert template.render({"a": 1}, b=2) == "1-2"

    @pytest.mark.parametrize("value", [Unprintable(), 10**5000], ids=["raising-str", "huge-int"])
    def test_unprintable_value_renders_empty(self, env: Environment, value: object) -> None:
        assert env.render("[{{ v }}|{!! v !!}]", {"v": value}) == "[|]"

    def test_email_inside_block_is_text(self, env: Environment) -> None:
        source = "@if(show)mail me@else.com@elsehidden@endif"
        assert env.render(source, {"show": True}) == "mail me@else.com"
        assert env.render(source, {"show": False}) == "hidden"


class TestConditionals:
    def test_if_else(self, env: Environment) -> None:
        source = "@if(show)Visible@elseHidden@endif"
        assert env.render(source, {"show": True}) == "Visible"
        assert env.render(source, {"show": False}) == "Hidden"

    def test_if_without_else(self, env: Environment) -> None:
        assert env.render("@if(false)nothing@endif") == ""

    def test_elseif_chain(self, env: Environment) -> None:
        source = "@if(n > 10)big@elseif(n > 5)medium@elseif(n > 0)small@elsezero@endif"
        assert env.render(source, {"n": 20}) == "big"
        assert env.render(source, {"n": 7}) == "medium"
        assert env.render(source, {"n": 1}) == "small"
        assert env.render(source, {"n": 0}) == "zero"

    def test_nested(self, env: Environment) -> None:
        source = "@if(a)A@if(b)B@elseb@endif@elsenone@endif"
        assert env.render(source, {"a": True, "b": False}) == "Ab"
        assert env.render(source, {"a": False, "b": True}) == "none"

    def test_condition_on_missing_path(self, env: Environment) -> None:
        assert env.render("@if(user.admin)admin@elseguest@endif", {}) == "guest"


class TestForeach:
    def test_items(self, env: Environment) -> None:
        source = "<ul>@foreach(items as i)<li>{{ i }}</li>@endforeach</ul>"
        assert env.render(source, {"items": ["A", "B"]}) == "<ul><li>A</li><li>B</li></ul>"

    def test_empty_sequence(self, env: Environment) -> None:
        source = "<ul>@foreach(items as i)<li>{{ i }}</li>@endforeach</ul>"
        assert env.render(source, {"items": []}) == "<ul></ul>"

    @pytest.mark.parametrize("value", [None, 5, "text", {"a": 1}])
    def test_non_sequence_renders_empty(self, env: Environment, value: object) -> None:
        assert env.render("[@foreach(items as i)x@endforeach]", {"items": value}) == "[]"

    def test_loop_variable_shadows_and_restores(self, env: Environment) -> None:
        source = "{{ i }}@foreach(items as i){{ i }}@endforeach{{ i }}"
        assert env.render(source, {"i": "o", "items": [1, 2]}) == "o12o"

    def test_outer_context_visible(self, env: Environment) -> None:
        source = "@foreach(users as u){{ u.name }}:{{ site }};@endforeach"
        result = env.render(source, {"users": [{"name": "a"}, {"name": "b"}], "site": "x"})
        assert result == "a:x;b:x;"

    def test_loop_metadata(self, env: Environment) -> None:
        source = "@foreach(items as i){{ loop.index }}/{{ loop.length }}@if(!loop.last),@endif@endforeach"
        assert env.render(source, {"items": ["a", "b", "c"]}) == "1/3,2/3,3/3"

    def test_nested_loops(self, env: Environment) -> None:
        source = "@foreach(rows as row)[@foreach(row as cell){{ cell }}@endforeach]@endforeach"
        assert env.render(source, {"rows": [[1, 2], [3]]}) == "[12][3]"

    def test_nested_loop_parent(self, env: Environment) -> None:
        source = (
            "@foreach(rows as row)@foreach(row as cell)"
            "{{ loop.parent.iteration }}.{{ loop.iteration }}/{{ loop.depth }} "
            "@endforeach@endforeach"
        )
        assert env.render(source, {"rows": [["a", "b"], ["c"]]}) == "1.1/2 1.2/2 2.1/2 "

    def test_generator_is_accepted(self, env: Environment) -> None:
        assert env.render("@foreach(items as i){{ i }}@endforeach", {"items": (n for n in range(3))}) == "012"


class TestForLoop:
    def test_counting_loop(self, env: Environment) -> None:
        assert env.render("@for(i = 0; i < 3; i++){{ i }}@endfor") == "012"

    def test_inclusive_bound_and_step(self, env: Environment) -> None:
        assert env.render("@for(i = 0; i <= 6; i = i + 2){{ i }} @endfor") == "0 2 4 6 "

    def test_limit_from_array_length(self, env: Environment) -> None:
        source = "@for(i = 0; i < items.length; i++){{ items[i] }}@endfor"
        assert env.render(source, {"items": ["a", "b"]}) == "ab"

    def test_declaration_keyword_and_indexing(self, env: Environment) -> None:
        source = "@for(let i = 0; i < users.length; i++){{ i + 1 }}:{{ users[i].name }} @endfor"
        assert env.render(source, {"users": [{"name": "Ada"}, {"name": "Bob"}]}) == "1:Ada 2:Bob "

    def test_parity_in_body(self, env: Environment) -> None:
        source = "@for(i = 0; i < 4; i += 1){{ i % 2 == 0 ? 'e' : 'o' }}@endfor"
        assert env.render(source) == "eoeo"

    def test_unresolved_limit_uses_default(self, env: Environment, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="bladehtml.template.renderer"):
            result = env.render("@for(i = 0; i < missing; i++){{ i }}@endfor")
        assert result == "01234"
        assert "default_loop_limit" in caplog.text

    def test_configured_default_limit(self) -> None:
        env = Environment(default_loop_limit=2)
        assert env.render("@for(i = 0; i < missing; i++){{ i }}@endfor") == "01"

    def test_unsupported_clauses_render_empty(self, env: Environment) -> None:
        assert env.render("[@for(i = 10; i > 0; i--){{ i }}@endfor]") == "[]"

    def test_mismatched_variables_render_empty(self, env: Environment) -> None:
        assert env.render("[@for(i = 0; j < 3; i++)x@endfor]") == "[]"


class TestInclude:
    def test_include_with_outer_data(self, env: Environment) -> None:
        env.register_template("partials.greet", "Hi {{ name }}")
        assert env.render("<p>@include('partials.greet')</p>", {"name": "Ada"}) == "<p>Hi Ada</p>"

    def test_include_with_data_literal(self, env: Environment) -> None:
        env.register_template("partials.greet", "Hi {{ name }} ({{ role }})")
        result = env.render("@include('partials.greet', { role: 'admin' })", {"name": "Ada"})
        assert result == "Hi Ada (admin)"

    def test_include_data_overrides_outer(self, env: Environment) -> None:
        env.register_template("partials.greet", "{{ name }}")
        assert env.render("@include('partials.greet', { name: 'Bob' })", {"name": "Ada"}) == "Bob"

    def test_include_unquoted_name(self, env: Environment) -> None:
        env.register_template("partials.nav", "nav")
        assert env.render("@include(partials.nav)") == "nav"

    def test_dynamic_include(self, env: Environment) -> None:
        env.register_template("partials.a", "A")
        assert env.render("@include(which)", {"which": "partials.a"}) == "A"

    def test_missing_include_placeholder(self, env: Environment) -> None:
        result = env.render("a@include('partials.nope')b")
        assert result == 'a<!-- Template "partials.nope" not found -->b'

    def test_failing_data_value_keeps_page(self, env: Environment) -> None:
        env.register_template("partials.who", "[{{ who }}]")
        result = env.render("A@include('partials.who', { who: user.name })B", {"user": UnloadedProfile()})
        assert result == "A[]B"

    def test_include_inside_loop(self, env: Environment) -> None:
        env.register_template("row", "<li>{{ item }}</li>")
        source = "@foreach(items as item)@include('row')@endforeach"
        assert env.render(source, {"items": [1, 2]}) == "<li>1</li><li>2</li>"

    def test_include_cycle_raises_depth_error(self, env: Environment) -> None:
        env.register_template("a", "@include('b')")
        env.register_template("b", "@include('a')")
        with pytest.raises(RenderDepthError) as exc_info:
            env.render("a")
        assert "Maximum render depth" in str(exc_info.value)


class TestCustomDirectives:
    def test_registered_directive(self, env: Environment) -> None:
        env.register_directive("upper", lambda args, ctx: str(ctx[args.strip()]).upper())
        assert env.render("@upper(name)!", {"name": "ada"}) == "ADA!"

    def test_at_prefix_is_stripped_on_registration(self, env: Environment) -> None:
        env.register_directive("@hello", lambda args, ctx: "hi")
        assert env.render("@hello()") == "hi"

    def test_failing_directive_placeholder(self, env: Environment) -> None:
        def boom(args: str, ctx: object) -> str:
            raise RuntimeError("boom")

        env.register_directive("boom", boom)
        assert env.render("a@boom(1)b") == "a<!-- Error in directive @boom -->b"

    def test_unregistered_directive_is_left_verbatim(self, env: Environment) -> None:
        assert env.render("@media(min-width: 10px) {}") == "@media(min-width: 10px) {}"

    def test_directive_inside_loop_sees_loop_variable(self, env: Environment) -> None:
        env.register_directive("twice", lambda args, ctx: str(ctx[args] * 2))
        assert env.render("@foreach(ns as n)@twice(n)@endforeach", {"ns": [1, 2]}) == "24"


class TestStrayStructure:
    def test_stray_closer_renders_as_text(self, env: Environment) -> None:
        assert env.render("a @endif b") == "a @endif b"

    def test_unclosed_block_renders_as_text(self, env: Environment) -> None:
        assert_template_equal(env.render("@if(x) body {{ x }}", {"x": 1}), "@if(x) body 1")


class TestTemplateLookup:
    def test_unknown_template_raises_with_name(self, env: Environment) -> None:
        with pytest.raises(TemplateNotFoundError) as exc_info:
            env.render("pages.missing")
        assert "pages.missing" in str(exc_info.value)
        assert exc_info.value.name == "pages.missing"

    def test_loader_template(self, env_with_loader: Environment) -> None:
        assert env_with_loader.render("partials.item", {"label": "x"}) == "<p>x</p>"

    def test_deterministic(self, env_with_loader: Environment) -> None:
        first = env_with_loader.render("pages.child")
        assert env_with_loader.render("pages.child") == first
        assert_contains(first, "<body>Hello World</body>")
