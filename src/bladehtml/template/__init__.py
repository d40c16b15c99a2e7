"""Template objects and the directive processor that renders them."""

from bladehtml.template.core import Template
from bladehtml.template.loop_context import LoopContext
from bladehtml.template.renderer import Renderer

__all__ = ["LoopContext", "Renderer", "Template"]
