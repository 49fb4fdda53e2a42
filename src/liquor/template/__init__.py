"""Liquor Template package: parsed templates ready for rendering."""

from liquor.template.core import Template
from liquor.template.helpers import BLANK, EMPTY, UNDEFINED
from liquor.template.loop_context import LoopContext

__all__ = [
    "BLANK",
    "EMPTY",
    "UNDEFINED",
    "LoopContext",
    "Template",
]
