"""CLI score command: similarity of two individual files."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from version_differ.exceptions import DifferError
from version_differ.matching.comparer import NormalizedComparerFactory
from version_differ.matching.normalizer import normalizer_for

console = Console()


def score_cmd(
    file_a: Annotated[Path, typer.Argument(help="First file.")],
    file_b: Annotated[Path, typer.Argument(help="Second file.")],
    dialect: Annotated[str, typer.Option(help="Content dialect: plain, java or python.")] = "plain",
) -> None:
    """Print the normalized letter-pair similarity of two files."""
    try:
        factory = NormalizedComparerFactory(normalizer_for(dialect))
        similarity = factory.new_comparer(file_a).similarity(file_b)
    except DifferError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e

    typer.echo(f"{similarity:.4f}")
