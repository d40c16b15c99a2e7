"""Tests for Environment configuration, registries, loaders and aliases."""

from __future__ import annotations

from pathlib import Path

import pytest

from bladehtml import (
    AliasNotFoundError,
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    FunctionLoader,
    PrefixLoader,
    TemplateNotFoundError,
)
from bladehtml.environment import is_template_name
from bladehtml.environment.loaders import name_to_paths, path_to_name


class TestTemplateRegistry:
    def test_register_and_lookup(self, env: Environment) -> None:
        env.register_template("pages.home", "Home")
        assert env.templates["pages.home"] == "Home"
        assert "pages.home" in env.templates

    def test_reregistration_replaces(self, env: Environment) -> None:
        env.register_template("t", "one")
        env.register_template("t", "two")
        assert env.render("t") == "two"
        assert len(env.templates) == 1

    def test_remove(self, env: Environment) -> None:
        env.register_template("t", "x")
        assert env.remove_template("t") is True
        assert env.remove_template("t") is False
        with pytest.raises(TemplateNotFoundError):
            env.render("t")

    def test_empty_name_rejected(self, env: Environment) -> None:
        with pytest.raises(ValueError):
            env.register_template("", "x")

    def test_non_string_source_rejected(self, env: Environment) -> None:
        with pytest.raises(TypeError):
            env.templates["t"] = 42  # type: ignore[assignment]

    def test_copy_on_write(self, env: Environment) -> None:
        env.register_template("a", "A")
        snapshot = env.templates.copy()
        env.templates.update({"b": "B"})
        assert snapshot == {"a": "A"}
        assert sorted(env.templates.keys()) == ["a", "b"]

    def test_environments_do_not_share_state(self) -> None:
        first, second = Environment(), Environment()
        first.register_template("t", "x")
        first.register_directive("d", lambda args, ctx: "")
        assert "t" not in second.templates
        assert "d" not in second.directives


class TestConfiguration:
    def test_defaults(self, env: Environment) -> None:
        assert env.autoescape is True
        assert env.strict is False
        assert env.max_depth == 50
        assert env.default_namespace == "components"
        assert env.default_loop_limit == 5

    def test_invalid_max_depth(self) -> None:
        with pytest.raises(ValueError):
            Environment(max_depth=0)

    def test_custom_namespace(self) -> None:
        from bladehtml import Component

        class Box(Component):
            template = "[{{ content }}]"

        env = Environment(default_namespace="ui")
        env.register_component("ui.box", Box)
        assert env.render("@component('box')x@endcomponent") == "[x]"

    def test_initial_data(self) -> None:
        env = Environment(data={"site": "S"})
        assert env.render("{{ site }}") == "S"

    def test_list_templates(self, env_with_loader: Environment) -> None:
        env_with_loader.register_template("extra", "")
        names = env_with_loader.list_templates()
        assert "extra" in names
        assert "layouts.base" in names


class TestInlineDetection:
    @pytest.mark.parametrize("reference", ["t", "pages.home", "admin::users.index", "mail/welcome", "a-b"])
    def test_names(self, reference: str) -> None:
        assert is_template_name(reference)

    @pytest.mark.parametrize("reference", ["Hello {{ name }}", "<b>x</b>", "@if(a)x@endif", "two words", ""])
    def test_inline_source(self, reference: str) -> None:
        assert not is_template_name(reference)


class TestLoaders:
    def test_loaded_source_is_registered(self) -> None:
        calls: list[str] = []

        def lookup(name: str) -> str | None:
            calls.append(name)
            return "Loaded" if name == "page" else None

        env = Environment(loader=FunctionLoader(lookup))
        assert env.render("page") == "Loaded"
        assert env.render("page") == "Loaded"
        assert calls == ["page"]
        assert env.templates["page"] == "Loaded"

    def test_registered_template_wins_over_loader(self) -> None:
        env = Environment(loader=DictLoader({"t": "loader"}))
        env.register_template("t", "registry")
        assert env.render("t") == "registry"

    def test_dict_loader_suggestion(self) -> None:
        loader = DictLoader({"pages.home": ""})
        with pytest.raises(TemplateNotFoundError) as exc_info:
            loader.get_source("pages.hom")
        assert "Did you mean 'pages.home'" in str(exc_info.value)

    def test_choice_loader(self) -> None:
        loader = ChoiceLoader([DictLoader({"a": "first"}), DictLoader({"a": "second", "b": "B"})])
        assert loader.get_source("a") == ("first", None)
        assert loader.get_source("b") == ("B", None)
        assert loader.list_templates() == ["a", "b"]
        with pytest.raises(TemplateNotFoundError):
            loader.get_source("c")

    def test_prefix_loader(self) -> None:
        loader = PrefixLoader({"mail": DictLoader({"welcome": "Hi"})})
        assert loader.get_source("mail::welcome") == ("Hi", None)
        assert loader.list_templates() == ["mail::welcome"]
        with pytest.raises(TemplateNotFoundError):
            loader.get_source("web::welcome")
        with pytest.raises(TemplateNotFoundError):
            loader.get_source("welcome")

    def test_function_loader_tuple(self) -> None:
        loader = FunctionLoader(lambda name: ("src", f"/virtual/{name}"))
        assert loader.get_source("x") == ("src", "/virtual/x")
        assert loader.list_templates() == []

    def test_name_to_paths(self) -> None:
        assert name_to_paths("layouts.app") == [
            "layouts/app.blade.html",
            "layouts/app.html",
            "layouts.app",
        ]
        assert name_to_paths("pages/home.html") == ["pages/home.html"]

    def test_path_to_name(self) -> None:
        assert path_to_name("layouts/app.blade.html") == "layouts.app"
        assert path_to_name("notes.txt") is None


class TestFileSystemLoader:
    @pytest.fixture
    def template_dir(self, tmp_path: Path) -> Path:
        (tmp_path / "layouts").mkdir()
        (tmp_path / "layouts" / "app.blade.html").write_text("<main>@yield('content')</main>")
        (tmp_path / "pages").mkdir()
        (tmp_path / "pages" / "home.html").write_text(
            "@extends('layouts.app')@section('content')Home@endsection"
        )
        return tmp_path

    def test_dot_names_resolve_to_files(self, template_dir: Path) -> None:
        env = Environment(loader=FileSystemLoader(template_dir))
        assert env.render("pages.home") == "<main>Home</main>"

    def test_filename_is_reported(self, template_dir: Path) -> None:
        source, filename = FileSystemLoader(template_dir).get_source("layouts.app")
        assert filename.endswith("app.blade.html")
        assert "@yield" in source

    def test_list_templates(self, template_dir: Path) -> None:
        assert FileSystemLoader(template_dir).list_templates() == ["layouts.app", "pages.home"]

    def test_search_path_order(self, template_dir: Path, tmp_path_factory: pytest.TempPathFactory) -> None:
        theme = tmp_path_factory.mktemp("theme")
        (theme / "layouts").mkdir()
        (theme / "layouts" / "app.html").write_text("<div>@yield('content')</div>")
        env = Environment(loader=FileSystemLoader([theme, template_dir]))
        assert env.render("pages.home") == "<div>Home</div>"

    def test_parent_traversal_rejected(self, template_dir: Path) -> None:
        with pytest.raises(TemplateNotFoundError):
            FileSystemLoader(template_dir / "pages").get_source("../layouts/app.blade.html")

    def test_missing(self, template_dir: Path) -> None:
        with pytest.raises(TemplateNotFoundError):
            FileSystemLoader(template_dir).get_source("pages.none")


class TestAliases:
    def test_alias_to_directory(self, tmp_path: Path) -> None:
        (tmp_path / "users.blade.html").write_text("Users: {{ count }}")
        env = Environment()
        env.register_alias("admin", tmp_path)
        assert env.render("admin::users", {"count": 3}) == "Users: 3"
        assert "admin" in env.aliases

    def test_alias_to_loader(self, env: Environment) -> None:
        env.register_alias("mail", DictLoader({"welcome": "Hi {{ name }}"}))
        assert env.render("mail::welcome", {"name": "Ada"}) == "Hi Ada"

    def test_registered_full_name_takes_precedence(self, env: Environment) -> None:
        env.register_alias("mail", DictLoader({"welcome": "loader"}))
        env.register_template("mail::welcome", "registry")
        assert env.render("mail::welcome") == "registry"

    def test_unregistered_alias_is_fatal(self, env: Environment) -> None:
        with pytest.raises(AliasNotFoundError) as exc_info:
            env.render("shop::cart")
        assert exc_info.value.namespace == "shop"
        assert "shop" in str(exc_info.value)

    def test_missing_template_in_alias(self, env: Environment) -> None:
        env.register_alias("mail", DictLoader({}))
        with pytest.raises(TemplateNotFoundError) as exc_info:
            env.render("mail::nope")
        assert "mail::nope" in str(exc_info.value)

    def test_alias_in_include_and_extends(self, env: Environment) -> None:
        env.register_alias(
            "theme",
            DictLoader({"layout": "<b>@yield('c')</b>", "nav": "<nav/>"}),
        )
        env.register_template("page", "@extends('theme::layout')@section('c')@include('theme::nav')@endsection")
        assert env.render("page") == "<b><nav/></b>"

    def test_unregistered_alias_in_include_is_fatal(self, env: Environment) -> None:
        with pytest.raises(AliasNotFoundError):
            env.render("@include('ghost::nav')")
