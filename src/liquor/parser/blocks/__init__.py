"""Block tag parsing mixins for the Liquor parser."""

from liquor.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from liquor.parser.blocks.core import BlockStackMixin
from liquor.parser.blocks.template_structure import TemplateStructureBlockParsingMixin
from liquor.parser.blocks.variables import VariableBlockParsingMixin

__all__ = [
    "BlockStackMixin",
    "ControlFlowBlockParsingMixin",
    "TemplateStructureBlockParsingMixin",
    "VariableBlockParsingMixin",
]
