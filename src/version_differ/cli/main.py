"""Root Typer app for version-differ CLI."""

from __future__ import annotations

import typer

app = typer.Typer(
    name="version-differ",
    help="version-differ: match files across two versions of a source tree.",
    no_args_is_help=True,
)


def _register_commands() -> None:
    """Register all CLI commands."""
    from version_differ.cli.diff_cmd import diff_cmd
    from version_differ.cli.score_cmd import score_cmd

    app.command(name="diff")(diff_cmd)
    app.command(name="score")(score_cmd)


_register_commands()
