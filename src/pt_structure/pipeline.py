"""Pipeline orchestrator: load JSON → format → save JSON.

Reads a Portable Text document from disk, runs the formatter and writes
the structured tree, optionally alongside a format report.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pt_structure.config import Config
from pt_structure.exceptions import OutputError, ParseError
from pt_structure.formatter import PortableTextFormatter
from pt_structure.ir.report import FormatReport
from pt_structure.ir.schema import PTBlock, StructuredBlock, dump_nodes, parse_blocks

logger = logging.getLogger(__name__)


class Pipeline:
    """Orchestrates Portable Text JSON → structured tree JSON."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config.default()
        self.last_report: FormatReport | None = None

    def convert(
        self,
        input_path: Path,
        output_path: Path | None = None,
        field: str | None = None,
        save_report: bool = False,
        report_path: Path | None = None,
    ) -> str:
        """Full pipeline: load, format and serialize.

        Args:
            input_path: Portable Text JSON file.
            output_path: Where to write the tree JSON. Nothing is written when None.
            field: Document key holding the block array. Defaults to config.output.field.
            save_report: Whether to save a format report JSON.
            report_path: Custom path for report JSON. Defaults to {output_stem}.report.json.

        Returns:
            The tree as a JSON string.
        """
        input_path = Path(input_path)

        t0 = time.monotonic()
        blocks = self.load(input_path, field)
        t1 = time.monotonic()
        nodes = self.format(blocks)
        t2 = time.monotonic()

        report = FormatReport.from_result(blocks, nodes, self.config.formatter.allow_empty_blocks)
        report.source_file = input_path.name
        report.load_time_seconds = t1 - t0
        report.format_time_seconds = t2 - t1
        self.last_report = report

        json_str = self.to_json(nodes)
        if output_path is not None:
            self._write(Path(output_path), json_str)

        if save_report:
            if report_path is None:
                base = Path(output_path) if output_path is not None else input_path
                report_path = base.with_suffix(".report.json")
            self._write(Path(report_path), report.to_json())

        return json_str

    def load(self, input_path: Path, field: str | None = None) -> list[PTBlock]:
        """Read and validate a Portable Text document.

        The file holds either a block array or an object whose ``field``
        key holds it (e.g. a CMS document with a ``body`` field).
        """
        input_path = Path(input_path)
        field = field or self.config.output.field
        logger.info("Loading %s", input_path)

        try:
            data: Any = json.loads(input_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise ParseError(f"Input file not found: {input_path}")
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON in {input_path}: {exc}") from exc

        if field is not None:
            if not isinstance(data, dict) or field not in data:
                raise ParseError(f"Field {field!r} not found in {input_path}")
            data = data[field]

        if not isinstance(data, list):
            raise ParseError(f"Expected a block array in {input_path}, got {type(data).__name__}")

        try:
            return parse_blocks(data)
        except ValidationError as exc:
            raise ParseError(f"Invalid Portable Text in {input_path}: {exc}") from exc

    def format(self, blocks: list[PTBlock]) -> list[StructuredBlock]:
        """Run the formatter with the configured options."""
        formatter = PortableTextFormatter(self.config.formatter)
        return formatter.format(blocks)

    def to_json(self, nodes: list[StructuredBlock]) -> str:
        """Serialize a tree with the configured indent."""
        return dump_nodes(nodes, indent=self.config.output.indent)

    @staticmethod
    def _write(path: Path, text: str) -> None:
        logger.info("Saving %s", path)
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise OutputError(f"Failed to write {path}: {exc}") from exc
