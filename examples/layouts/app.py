"""Layouts -- extends, sections, yields and includes from disk.

Loads dot-namespaced templates with FileSystemLoader: ``pages.home``
resolves to ``templates/pages/home.blade.html``. Both pages extend
``layouts.app``, which includes the navigation partial.

Run:
    python app.py
"""

from pathlib import Path

from bladehtml import Environment, FileSystemLoader

templates_dir = Path(__file__).parent / "templates"
env = Environment(loader=FileSystemLoader(templates_dir))

# Shared by every render
env.set_data(
    {
        "site_name": "My Site",
        "nav_items": [
            {"url": "/", "label": "Home"},
            {"url": "/about", "label": "About"},
        ],
    }
)

home_output = env.render(
    "pages.home",
    {"active": "/", "message": "Layouts are resolved before blocks & interpolation."},
)

about_output = env.render(
    "pages.about",
    {"active": "/about", "team": ["Ada", "Grace"], "year": 2024},
)

empty_team_output = env.render("pages.about", {"active": "/about", "team": [], "year": 2024})


def main() -> None:
    print("=== Home Page ===")
    print(home_output)
    print()
    print("=== About Page ===")
    print(about_output)


if __name__ == "__main__":
    main()
