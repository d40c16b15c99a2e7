"""Dependency analysis -- find the components a page needs before rendering.

The analyzer walks literal ``@extends``, ``@include`` and ``@component``
references breadth-first. A host application can use the result to load
(or import) every component up front. Component names are reported under
both spellings: ``alert`` and ``components.alert``.

Run:
    python app.py
"""

from bladehtml import DictLoader, Environment

loader = DictLoader(
    {
        "layouts.app": (
            "<header>@include('partials.header')</header>"
            "<main>@yield('content')</main>"
        ),
        "partials.header": "@component('components.logo')@endcomponent@include('partials.header')",
        "pages.dashboard": (
            "@extends('layouts.app')"
            "@section('content')"
            "@if(alerts)@component('alert')@endcomponent@endif"
            "@include(sidebar)"
            "@include('partials.missing')"
            "@endsection"
        ),
        "components.alert": "<div>{{ content }}@component('icon')@endcomponent</div>",
    }
)

env = Environment(loader=loader)

components = env.analyze_dependencies("pages.dashboard")
graph = env.analyze_graph("pages.dashboard")


def main() -> None:
    print("Components:", ", ".join(sorted(components)))
    print("Templates: ", ", ".join(sorted(graph.templates)))
    print("Missing:   ", ", ".join(sorted(graph.missing)))
    for source, reference, kind in sorted(graph.edges):
        print(f"  {source} --{kind}--> {reference}")


if __name__ == "__main__":
    main()
