"""Pytest configuration and fixtures for bladehtml tests."""

import pytest

from bladehtml import DictLoader, Environment


@pytest.fixture
def env():
    """Create a basic bladehtml Environment."""
    return Environment()


@pytest.fixture
def env_strict():
    """Create an Environment that raises on malformed directive structure."""
    return Environment(strict=True)


@pytest.fixture
def env_raw():
    """Create an Environment with autoescape disabled."""
    return Environment(autoescape=False)


@pytest.fixture
def env_with_loader():
    """Create a bladehtml Environment with DictLoader and test templates."""
    loader = DictLoader(
        {
            "layouts.base": (
                "<html>"
                "<head>@yield('head')</head>"
                "<body>@yield('body', 'Empty')</body>"
                "</html>"
            ),
            "pages.child": "@extends('layouts.base')@section('body')Hello World@endsection",
            "partials.item": "<p>{{ label }}</p>",
            "components.card": '<div class="card">{{ title }}: {{ content }}</div>',
        }
    )
    return Environment(loader=loader)


def _collapse(markup: str) -> str:
    # Layout indentation is noise; runs of whitespace compare as one space.
    return " ".join(markup.split())


def assert_template_equal(template_result: str, expected: str) -> None:
    """Compare rendered markup to ``expected`` ignoring whitespace layout."""
    actual, wanted = _collapse(template_result), _collapse(expected)
    assert actual == wanted, f"rendered {actual!r}, expected {wanted!r}"


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Every fragment in ``expected_parts`` appears in the rendered markup."""
    missing = [part for part in expected_parts if part not in template_result]
    assert not missing, f"missing {missing!r} in rendered output {template_result!r}"
