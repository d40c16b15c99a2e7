"""HTML escaping for bladehtml output.

Single-pass escaping via ``str.translate()`` and a ``Markup`` string type for
text that is already safe. Escaping is applied exactly once: ``Markup``
values pass through ``html_escape`` untouched.

Escape Table:
    ``&`` → ``&amp;``, ``<`` → ``&lt;``, ``>`` → ``&gt;``,
    ``"`` → ``&quot;``, ``'`` → ``&#039;``

Example:
    >>> html_escape("<b>Tom & 'Jerry'</b>")
    '&lt;b&gt;Tom &amp; &#039;Jerry&#039;&lt;/b&gt;'
    >>> html_escape(Markup("<b>safe</b>"))
    Markup('<b>safe</b>')

"""

from __future__ import annotations

from typing import Any

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#039;",
    }
)

# Fast rejection: most output chunks contain none of these
_ESCAPE_CHARS = frozenset("&<>\"'")


class Markup(str):
    """String subclass marking content as safe HTML.

    Markup values are emitted as-is by ``{{ }}`` interpolation. Operations
    that combine Markup with plain strings escape the plain side, so the
    result stays safe.

    Example:
            >>> Markup("<b>") + "<i>"
            Markup('<b>&lt;i&gt;')

    """

    __slots__ = ()

    def __new__(cls, value: Any = "") -> Markup:
        if hasattr(value, "__html__"):
            value = value.__html__()
        return super().__new__(cls, value)

    def __html__(self) -> Markup:
        return self

    def __add__(self, other: object) -> Markup:
        if isinstance(other, str):
            return Markup(str.__add__(self, html_escape(other)))
        return NotImplemented

    def __radd__(self, other: object) -> Markup:
        if isinstance(other, str):
            return Markup(str.__add__(html_escape(other), self))
        return NotImplemented

    def join(self, iterable: Any) -> Markup:
        return Markup(str.join(self, (html_escape(s) for s in iterable)))

    def __repr__(self) -> str:
        return f"Markup({str.__repr__(self)})"


def html_escape(value: Any) -> str:
    """Escape a value for HTML output.

    ``Markup`` (and anything implementing ``__html__``) is returned unchanged.
    Everything else is converted with ``str()`` and escaped in one pass.
    """
    if isinstance(value, Markup):
        return value
    if hasattr(value, "__html__"):
        return Markup(value.__html__())
    text = value if isinstance(value, str) else str(value)
    if _ESCAPE_CHARS.isdisjoint(text):
        return text
    return text.translate(_ESCAPE_TABLE)
