"""Hello World -- the simplest bladehtml example.

Register a template by name and render it with a data mapping. Inline
source works too: anything that does not look like a template name is
rendered directly.

Run:
    python app.py
"""

from bladehtml import Environment

env = Environment()

# Register by name
env.register_template("greeting", "Hello, {{ name }}!")

# Render with context
output = env.render("greeting", {"name": "World"})

# Missing values render as empty text
empty_output = env.render("greeting", {})

# Inline source with a fallback
inline_output = env.render("Hi {{ user.name || 'Guest' }}")


def main() -> None:
    print(output)
    print(empty_output)
    print(inline_output)
    print()

    # Multiple renders with different context
    for name in ["Blade", "Python"]:
        print(env.render("greeting", {"name": name}))


if __name__ == "__main__":
    main()
