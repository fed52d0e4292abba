"""Nesting of flat, leveled list items into list trees."""

from __future__ import annotations

from typing import Sequence

from pt_structure.formatter.marks import nest_spans
from pt_structure.ir.schema import ListItemBlock, StructuredBlock


def list_type(kind: str) -> str:
    """Node type for a list of the given kind, e.g. ``bullet_list``."""
    return f"{kind}_list"


def build_list(list_blocks: Sequence[ListItemBlock]) -> StructuredBlock:
    """Build one list node from a run of list items; its kind is the first item's."""
    return StructuredBlock(
        type=list_type(list_blocks[0].list_item),
        content=nest_list_items(list_blocks),
    )


def nest_list_items(list_blocks: Sequence[ListItemBlock]) -> list[StructuredBlock]:
    """Convert a flat run of list items into nested ``list_item`` nodes."""
    return _nest_range(list_blocks, 0, len(list_blocks))


def _nest_range(list_blocks: Sequence[ListItemBlock], start: int, stop: int) -> list[StructuredBlock]:
    """Build the items of ``list_blocks[start:stop]``.

    Each item absorbs the run of following blocks that sit deeper than it;
    that run becomes a sub-list held by an extra ``list_item`` appended to
    the item's content, the way HTML nests ``<ol>`` inside an ``<li>``.
    Levels are taken as given: a run may start deeper than 1 and may skip
    levels.
    """
    items: list[StructuredBlock] = []
    index = start

    while index < stop:
        block = list_blocks[index]
        index += 1

        deeper_start = index
        while index < stop and list_blocks[index].depth > block.depth:
            index += 1

        content = nest_spans(block.children, block.mark_defs)
        if index > deeper_start:
            nested_list = StructuredBlock(
                type=list_type(list_blocks[deeper_start].list_item),
                content=_nest_range(list_blocks, deeper_start, index),
            )
            content.append(StructuredBlock(type="list_item", content=[nested_list]))

        items.append(StructuredBlock(type="list_item", content=content))

    return items
