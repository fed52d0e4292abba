"""Mark ordering and span nesting.

Spans in Portable Text carry a flat set of marks. To render them as nested
elements the marks of every span are put in a canonical outer-to-inner
order: a mark that keeps going over the following spans goes outside, so
sibling wrappers for the same mark line up. Ties fall back to a fixed
decorator priority and then to the mark id itself, which makes the order
independent of how the marks were listed on the span.
"""

from __future__ import annotations

import logging
from typing import Sequence

from pt_structure.ir.schema import MarkDef, Span, StructuredBlock

logger = logging.getLogger(__name__)

KNOWN_DECORATORS = ("strong", "b", "em", "i", "underline", "u", "strike-through", "s", "code")


def mark_run_length(mark: str, span_index: int, spans: Sequence[Span]) -> int:
    """Count the span at ``span_index`` plus the unbroken run of following spans carrying ``mark``."""
    run_length = 1
    for sibling in spans[span_index + 1:]:
        if mark not in sibling.marks:
            break
        run_length += 1
    return run_length


def _decorator_rank(mark: str) -> int:
    try:
        return KNOWN_DECORATORS.index(mark)
    except ValueError:
        return len(KNOWN_DECORATORS)


def sort_marks(span_index: int, spans: Sequence[Span]) -> list[str]:
    """Return the distinct marks of one span, outermost first.

    Ordered by forward run length (longest first), then by position in
    KNOWN_DECORATORS (listed before unlisted), then by mark id.
    """
    marks = list(dict.fromkeys(spans[span_index].marks))
    run_lengths = {mark: mark_run_length(mark, span_index, spans) for mark in marks}
    return sorted(marks, key=lambda mark: (-run_lengths[mark], _decorator_rank(mark), mark))


def _wrap(mark: str, inner: StructuredBlock, definitions: dict[str, MarkDef]) -> StructuredBlock:
    definition = definitions.get(mark)
    if definition is None:
        return StructuredBlock(type=mark, content=[inner])
    return StructuredBlock(type=definition.kind, content=[inner], props=definition.props)


def nest_spans(spans: Sequence[Span], mark_defs: Sequence[MarkDef]) -> list[StructuredBlock]:
    """Build the nested node sequence for one block's spans."""
    definitions: dict[str, MarkDef] = {}
    for definition in mark_defs:
        if definition.key is not None:
            definitions.setdefault(definition.key, definition)

    nested: list[StructuredBlock] = []
    for span_index, span in enumerate(spans):
        if span.type != "span":
            logger.debug("Inline %r object (key %s) rendered as its text only", span.type, span.key)
        node = StructuredBlock(type="text", content=span.text)
        for mark in reversed(sort_marks(span_index, spans)):
            node = _wrap(mark, node, definitions)
        nested.append(node)

    return nested
