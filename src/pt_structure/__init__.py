"""Convert Portable Text into a nested, render-ready tree."""

from pt_structure.formatter import PortableTextFormatter, format_blocks
from pt_structure.ir import StructuredBlock

__all__ = ["PortableTextFormatter", "StructuredBlock", "format_blocks"]
