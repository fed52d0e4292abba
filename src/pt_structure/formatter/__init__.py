"""Portable Text formatter: list nesting, mark nesting and block dispatch."""

from pt_structure.formatter.blocks import filter_blank_blocks, group_list_items, is_blank_block
from pt_structure.formatter.formatter import PortableTextFormatter, format_blocks
from pt_structure.formatter.lists import build_list, nest_list_items
from pt_structure.formatter.marks import KNOWN_DECORATORS, mark_run_length, nest_spans, sort_marks

__all__ = [
    "KNOWN_DECORATORS",
    "PortableTextFormatter",
    "build_list",
    "filter_blank_blocks",
    "format_blocks",
    "group_list_items",
    "is_blank_block",
    "mark_run_length",
    "nest_list_items",
    "nest_spans",
    "sort_marks",
]
