"""Block classification, blank filtering and list grouping."""

from __future__ import annotations

import logging
from typing import Sequence, Union

from pt_structure.ir.schema import ListItemBlock, PTBlock, TextBlock

logger = logging.getLogger(__name__)

# A grouped item is either a lone block or a run of same-kind list items.
GroupedBlock = Union[PTBlock, list[ListItemBlock]]


def is_blank_block(block: PTBlock) -> bool:
    """True for a text block (list items included) whose only span is whitespace."""
    return (
        isinstance(block, TextBlock)
        and len(block.children) == 1
        and block.children[0].text.strip() == ""
    )


def filter_blank_blocks(blocks: Sequence[PTBlock], allow_empty_blocks: bool = False) -> list[PTBlock]:
    """Drop blank text blocks unless ``allow_empty_blocks`` is set."""
    if allow_empty_blocks:
        return list(blocks)

    kept = [block for block in blocks if not is_blank_block(block)]
    if len(kept) != len(blocks):
        logger.debug("Dropped %d blank block(s)", len(blocks) - len(kept))
    return kept


def group_list_items(blocks: Sequence[PTBlock]) -> list[GroupedBlock]:
    """Collapse runs of consecutive list items sharing a list kind.

    Kind, not level, is the grouping key: a bullet item followed by a
    number item starts a new group even when the second is nested deeper.
    Non-list blocks always stand alone.
    """
    grouped: list[GroupedBlock] = []
    index = 0

    while index < len(blocks):
        block = blocks[index]
        index += 1

        if not isinstance(block, ListItemBlock):
            grouped.append(block)
            continue

        run = [block]
        while index < len(blocks):
            following = blocks[index]
            if not isinstance(following, ListItemBlock) or following.list_item != block.list_item:
                break
            run.append(following)
            index += 1

        grouped.append(run)

    return grouped
