"""Portable Text input models and the structured output tree."""

from pt_structure.ir.report import FormatReport
from pt_structure.ir.schema import (
    CustomBlock,
    ListItemBlock,
    MarkDef,
    PTBlock,
    Span,
    StructuredBlock,
    TextBlock,
    dump_nodes,
    parse_blocks,
    public_fields,
)

__all__ = [
    "CustomBlock",
    "FormatReport",
    "ListItemBlock",
    "MarkDef",
    "PTBlock",
    "Span",
    "StructuredBlock",
    "TextBlock",
    "dump_nodes",
    "parse_blocks",
    "public_fields",
]
