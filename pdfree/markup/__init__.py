"""Markup layout and capture."""

from .capture import MarkupCapture, TextFlowCapture, parse_blocks
from .text import MONO_EXTENSIONS, is_monospace_source, text_to_markup

__all__ = [
    "MONO_EXTENSIONS",
    "MarkupCapture",
    "TextFlowCapture",
    "is_monospace_source",
    "parse_blocks",
    "text_to_markup",
]
