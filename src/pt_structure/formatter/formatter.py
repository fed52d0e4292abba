"""Portable Text → structured tree formatter.

Turns the flat block array into a tree that can be rendered by simple
recursive traversal: consecutive list items become one nested list node,
span marks become nested wrapper nodes, and custom blocks pass their
public fields through as props.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from pt_structure.config import FormatterConfig
from pt_structure.exceptions import ParseError
from pt_structure.formatter.blocks import filter_blank_blocks, group_list_items
from pt_structure.formatter.lists import build_list
from pt_structure.formatter.marks import nest_spans
from pt_structure.ir.schema import CustomBlock, StructuredBlock, TextBlock, parse_blocks

logger = logging.getLogger(__name__)


class PortableTextFormatter:
    """Formats Portable Text blocks into StructuredBlock trees.

    Holds nothing but its configuration, so one instance can be shared.
    """

    def __init__(self, config: Optional[FormatterConfig] = None):
        self.config = config or FormatterConfig()

    def format(self, blocks: Iterable[Any]) -> list[StructuredBlock]:
        """Format a document.

        Args:
            blocks: PTBlock models, or raw Portable Text dicts.

        Returns:
            One node per top-level item; a run of list items yields a single list node.

        Raises:
            ParseError: If a raw block does not match the Portable Text schema.
        """
        try:
            parsed = parse_blocks(blocks)
        except ValidationError as exc:
            raise ParseError(f"Invalid Portable Text block: {exc}") from exc

        filtered = filter_blank_blocks(parsed, self.config.allow_empty_blocks)
        grouped = group_list_items(filtered)
        logger.debug("Formatting %d block(s) as %d item(s)", len(filtered), len(grouped))

        structured: list[StructuredBlock] = []
        for item in grouped:
            if isinstance(item, list):
                structured.append(build_list(item))
            elif isinstance(item, TextBlock):
                structured.append(_format_text_block(item))
            else:
                structured.append(_format_custom_block(item))

        return structured


def _format_text_block(block: TextBlock) -> StructuredBlock:
    return StructuredBlock(
        type="paragraph" if block.style == "normal" else block.style,
        content=nest_spans(block.children, block.mark_defs),
    )


def _format_custom_block(block: CustomBlock) -> StructuredBlock:
    return StructuredBlock(type=block.type, props=block.props)


def format_blocks(blocks: Iterable[Any], config: Optional[FormatterConfig] = None) -> list[StructuredBlock]:
    """Format a document with a one-off formatter."""
    return PortableTextFormatter(config).format(blocks)
