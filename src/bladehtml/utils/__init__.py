"""Leaf utilities shared across bladehtml."""

from bladehtml.utils.html import Markup, html_escape

__all__ = ["Markup", "html_escape"]
