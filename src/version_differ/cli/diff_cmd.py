"""CLI diff command: compare two source trees and report correspondences."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from version_differ.cli.report import (
    DisplayNamer,
    render_markdown,
    render_report,
    result_to_dict,
)
from version_differ.exceptions import DifferError

console = Console()


def configure_logging(verbose: bool) -> None:
    """Send library logging to stderr; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def diff_cmd(
    before: Annotated[
        Path | None, typer.Argument(help="Root of the original tree; defaults to the config file.")
    ] = None,
    after: Annotated[
        Path | None, typer.Argument(help="Root of the new tree; defaults to the config file.")
    ] = None,
    config_file: Annotated[
        Path | None, typer.Option("--config", help="JSON config file.")
    ] = None,
    include: Annotated[
        list[str] | None,
        typer.Option(help="Regex a relative path must fully match (repeatable)."),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option(help="Regex that rejects a relative path if found (repeatable)."),
    ] = None,
    threshold: Annotated[
        float | None, typer.Option(help="Minimum similarity for unchanged/moved.")
    ] = None,
    dialect: Annotated[
        str | None, typer.Option(help="Content dialect: plain, java or python.")
    ] = None,
    workers: Annotated[int | None, typer.Option(help="Classification threads.")] = None,
    fqn_pattern: Annotated[
        str | None,
        typer.Option(help="Regex whose first group gives a dotted display name."),
    ] = None,
    full: Annotated[bool, typer.Option("--full", help="List every file.")] = False,
    md: Annotated[bool, typer.Option("--md", help="Output as markdown.")] = False,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
    no_log: Annotated[bool, typer.Option("--no-log", help="Skip the JSONL event log.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging.")] = False,
) -> None:
    """Match every file of BEFORE to its counterpart in AFTER."""
    from version_differ.config import build_config, load_config_file
    from version_differ.logging.logger import EventLogger
    from version_differ.matching.differ import run

    configure_logging(verbose)

    try:
        file_config = load_config_file(config_file) if config_file is not None else None
        config = build_config(
            file_config,
            before_root=before,
            after_root=after,
            include=include,
            exclude=exclude,
            similarity_threshold=threshold,
            dialect=dialect,
            workers=workers,
        )
        namer = DisplayNamer.from_pattern(fqn_pattern)

        event_logger = None
        if not no_log:
            config.ensure_dirs()
            event_logger = EventLogger(config.log_dir)

        result = run(config, event_logger=event_logger)
    except DifferError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e

    if output_json:
        typer.echo(json.dumps(result_to_dict(result, config.similarity_threshold), indent=2))
    elif md:
        typer.echo(render_markdown(result, namer=namer, threshold=config.similarity_threshold))
    else:
        render_report(result, namer=namer, threshold=config.similarity_threshold, full=full)
