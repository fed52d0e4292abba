"""Format report — statistics from a formatting run."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pt_structure.ir.schema import PTBlock, StructuredBlock


@dataclass
class FormatReport:
    """Summary of a Portable Text to structured tree conversion."""

    # Source info
    source_file: str = ""
    input_block_count: int = 0
    dropped_blank_blocks: int = 0

    # Timing
    load_time_seconds: float = 0.0
    format_time_seconds: float = 0.0

    # Output shape
    output_node_count: int = 0
    nodes_by_type: dict[str, int] = field(default_factory=dict)
    list_item_count: int = 0
    max_list_depth: int = 0
    max_mark_depth: int = 0

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self._to_dict(), indent=indent)

    def _to_dict(self) -> dict:
        return {
            "source_file": self.source_file,
            "timing": {
                "load_seconds": round(self.load_time_seconds, 3),
                "format_seconds": round(self.format_time_seconds, 3),
            },
            "blocks": {
                "input": self.input_block_count,
                "dropped_blank": self.dropped_blank_blocks,
                "output": self.output_node_count,
            },
            "nodes_by_type": dict(sorted(self.nodes_by_type.items())),
            "list_items": self.list_item_count,
            "max_list_depth": self.max_list_depth,
            "max_mark_depth": self.max_mark_depth,
        }

    @classmethod
    def from_result(
        cls,
        blocks: list[PTBlock],
        nodes: list[StructuredBlock],
        allow_empty_blocks: bool = False,
    ) -> FormatReport:
        """Build a report from the formatter's input and output."""
        from pt_structure.formatter.blocks import is_blank_block

        dropped = 0 if allow_empty_blocks else sum(1 for block in blocks if is_blank_block(block))
        report = cls(
            input_block_count=len(blocks),
            dropped_blank_blocks=dropped,
            output_node_count=len(nodes),
            nodes_by_type=dict(Counter(node.type for node in nodes)),
        )
        for node in nodes:
            if _is_list(node):
                _walk_list(node, report, depth=1)
            else:
                _walk_spans(node.children, report)
        return report


def _walk_list(node: StructuredBlock, report: FormatReport, depth: int) -> None:
    """Recursively walk a list node, following synthetic items into nested lists."""
    report.max_list_depth = max(report.max_list_depth, depth)
    for item in node.children:
        report.list_item_count += 1
        _walk_spans(item.children, report, list_depth=depth)


def _walk_spans(spans: list[StructuredBlock], report: FormatReport, list_depth: int = 0) -> None:
    for span in spans:
        if span.type == "list_item" and all(_is_list(nested) for nested in span.children):
            for nested in span.children:
                _walk_list(nested, report, list_depth + 1)
        else:
            report.max_mark_depth = max(report.max_mark_depth, _mark_depth(span))


def _mark_depth(node: StructuredBlock) -> int:
    """Number of mark wrappers between ``node`` and its text leaf."""
    depth = 0
    while node.type != "text" and len(node.children) == 1:
        node = node.children[0]
        depth += 1
    return depth


def _is_list(node: StructuredBlock) -> bool:
    """True for a list node: ``<kind>_list`` holding only ``list_item`` nodes.

    A text block whose style happens to end in ``_list`` holds spans, not items.
    """
    children = node.children
    return (
        node.type.endswith("_list")
        and bool(children)
        and all(child.type == "list_item" for child in children)
    )
