"""Reusable components -- props, slots and named slots.

Components render in their own scope: they see the props passed to them
and their slots, never the caller's data. A component is a Python class
(override ``render()`` or set ``template``) or a registered template
under the ``components.`` namespace.

Run:
    python app.py
"""

from bladehtml import Component, DictLoader, Environment
from bladehtml.utils.html import html_escape


class Alert(Component):
    """Markup component: the default slot arrives as ``content``."""

    template = (
        '<div class="alert alert-{{ type || \'info\' }}">'
        "{{ content || 'Nothing to report' }}"
        "</div>"
    )


class Badge(Component):
    """Python component: builds its output directly."""

    def render(self) -> str:
        label = html_escape(self.props.get("label", ""))
        return f'<span class="badge">{label}</span>'


loader = DictLoader(
    {
        # Template-backed component, found as ``card`` through the default namespace
        "components.card": (
            '<article class="card">'
            "<h2>{{ slots.title || 'Untitled' }}</h2>"
            "{{ content }}"
            "</article>"
        ),
        "pages.dashboard": (
            "@component('alert', { type: 'warning' })Disk almost full@endcomponent"
            "@component('alert')@endcomponent"
            "@foreach(projects as project)"
            "@component('card', { name: project.name, open: project.issues })"
            "@slot('title'){{ name }}@endslot"
            "@component('badge', { label: open + ' open' })@endcomponent"
            "@endcomponent"
            "@endforeach"
            "@component('chart')@endcomponent"
        ),
    }
)

env = Environment(loader=loader)
env.register_component("alert", Alert)
env.register_component("badge", Badge)

output = env.render(
    "pages.dashboard",
    {
        "projects": [
            {"name": "Website", "issues": 3},
            {"name": "API", "issues": 0},
        ],
    },
)

# Outside of templates: render a component directly
badge_output = env.render_component("badge", {"label": "v1.0"})


def main() -> None:
    print(output)
    print(badge_output)


if __name__ == "__main__":
    main()
