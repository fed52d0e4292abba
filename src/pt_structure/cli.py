"""Click CLI for pt-structure.

Commands:
    convert   — Portable Text JSON → structured tree JSON
    stats     — Print a format report for a Portable Text document
"""

from __future__ import annotations

import dataclasses
import logging
import sys
from pathlib import Path

import click

from pt_structure.config import Config
from pt_structure.exceptions import PtStructureError
from pt_structure.pipeline import Pipeline


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to a YAML configuration file.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """Convert Portable Text into a nested, render-ready tree."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = Config.load(config_path)
    except PtStructureError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)
    if verbose:
        config.verbose = True

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["pipeline"] = Pipeline(config)


@main.command()
@click.argument("input_json", type=click.Path(exists=True, path_type=Path))
@click.argument("output_json", type=click.Path(path_type=Path), required=False)
@click.option("--field", default=None, help="Document key holding the block array.")
@click.option("--allow-empty-blocks", is_flag=True, help="Keep blocks whose only span is blank.")
@click.option("--report", is_flag=True, help="Save format report JSON alongside output.")
@click.option(
    "--report-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Custom path for the report JSON file.",
)
@click.pass_context
def convert(
    ctx: click.Context,
    input_json: Path,
    output_json: Path | None,
    field: str | None,
    allow_empty_blocks: bool,
    report: bool,
    report_path: Path | None,
) -> None:
    """Convert a Portable Text document; prints to stdout without OUTPUT_JSON."""
    pipeline: Pipeline = ctx.obj["pipeline"]

    if allow_empty_blocks:
        pipeline.config.formatter = dataclasses.replace(pipeline.config.formatter, allow_empty_blocks=True)

    try:
        json_str = pipeline.convert(
            input_json,
            output_json,
            field=field,
            save_report=report,
            report_path=report_path,
        )
    except PtStructureError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    if output_json is None:
        click.echo(json_str)
        return

    click.echo(f"Generated: {output_json}")
    if report and pipeline.last_report:
        rpt = pipeline.last_report
        click.echo(
            f"Report: {rpt.input_block_count} blocks in, "
            f"{rpt.dropped_blank_blocks} blank dropped, "
            f"{rpt.output_node_count} nodes out"
        )


@main.command()
@click.argument("input_json", type=click.Path(exists=True, path_type=Path))
@click.option("--field", default=None, help="Document key holding the block array.")
@click.pass_context
def stats(ctx: click.Context, input_json: Path, field: str | None) -> None:
    """Print a format report for a Portable Text document."""
    pipeline: Pipeline = ctx.obj["pipeline"]

    try:
        pipeline.convert(input_json, field=field)
    except PtStructureError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    click.echo(pipeline.last_report.to_json())
