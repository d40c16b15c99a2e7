"""Component runtime: isolated props/slot scope rendered through the environment."""

from bladehtml.components.adapters import ComponentAdapter, TemplateComponent, TemplateComponentFactory
from bladehtml.components.base import Component

__all__ = ["Component", "ComponentAdapter", "TemplateComponent", "TemplateComponentFactory"]
