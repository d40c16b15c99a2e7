"""Per-render state held in a ContextVar.

Tracks recursion depth across includes, components, layouts and yields so a
reference cycle raises ``RenderDepthError`` instead of exhausting the stack.
Because the state lives in a ContextVar, a render started from inside
component code continues the current chain (and shares its bound), while
renders on other threads are independent.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field


@dataclass
class RenderContext:
    """Per-render state isolated from user data.

    Attributes:
        template_name: Template (or component) currently rendering
        depth: Nesting depth of the current render chain
        max_depth: Depth at which ``check_depth`` raises
        template_stack: Names leading to the current render, for error traces
    """

    template_name: str | None = None
    depth: int = 0
    max_depth: int = 50
    template_stack: list[str] = field(default_factory=list)

    def check_depth(self, template_name: str) -> None:
        """Raise if entering ``template_name`` would exceed ``max_depth``.

        Raises:
            RenderDepthError: depth >= max_depth
        """
        if self.depth >= self.max_depth:
            from bladehtml.environment.exceptions import RenderDepthError

            raise RenderDepthError(
                f"Maximum render depth exceeded ({self.max_depth}) when rendering '{template_name}'",
                template_name=self.template_name,
                suggestion="Check for circular references: A includes B includes A",
                template_stack=self.template_stack[-10:],
            )

    def child_context(self, template_name: str | None = None) -> RenderContext:
        """Create a child context one level deeper."""
        stack = self.template_stack.copy()
        if self.template_name:
            stack.append(self.template_name)
        return RenderContext(
            template_name=template_name or self.template_name,
            depth=self.depth + 1,
            max_depth=self.max_depth,
            template_stack=stack,
        )


_render_context: ContextVar[RenderContext | None] = ContextVar(
    "bladehtml_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Get the current render context (None outside of a render)."""
    return _render_context.get()


@contextmanager
def render_context(template_name: str | None = None, *, max_depth: int = 50) -> Iterator[RenderContext]:
    """Enter one level of rendering.

    Outside of a render this starts a new chain at depth 0. Inside one it
    checks the bound and pushes a child context.

    Example:
        with render_context("pages.home", max_depth=env.max_depth):
            html = renderer.render_template(tree, data)

    Raises:
        RenderDepthError: The enclosing chain is already at its bound
    """
    parent = _render_context.get()
    if parent is None:
        ctx = RenderContext(template_name=template_name, max_depth=max_depth)
    else:
        parent.check_depth(template_name or "<inline>")
        ctx = parent.child_context(template_name)
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)
