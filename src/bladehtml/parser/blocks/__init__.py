"""Block parsing mixins for the template parser."""

from bladehtml.parser.blocks.components import ComponentBlockParsingMixin
from bladehtml.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from bladehtml.parser.blocks.core import BlockFrame, BlockStackMixin
from bladehtml.parser.blocks.template_structure import TemplateStructureBlockParsingMixin

__all__ = [
    "BlockFrame",
    "BlockStackMixin",
    "ComponentBlockParsingMixin",
    "ControlFlowBlockParsingMixin",
    "TemplateStructureBlockParsingMixin",
]
