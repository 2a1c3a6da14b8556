"""Rendering of diff results: Rich console output, markdown and JSON."""

from __future__ import annotations

import re
from dataclasses import dataclass

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from version_differ.exceptions import ConfigurationError
from version_differ.matching.resolver import rename_suggestions
from version_differ.matching.types import DiffResult, Found

console = Console()

UNRESOLVED = "?"


# -----------------------------------------------------------------------
# Display names
# -----------------------------------------------------------------------


@dataclass(frozen=True)
class DisplayNamer:
    """Turn relative paths into display names.

    With a pattern, a path that fully matches is shown as its first group
    with path separators turned into dots (``src/main/java/a/b/C.java`` ->
    ``a.b.C``). Anything else is shown as the path itself.
    """

    pattern: re.Pattern[str] | None = None

    @classmethod
    def from_pattern(cls, pattern: str | None) -> DisplayNamer:
        if pattern is None:
            return cls()
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            msg = f"Invalid display name pattern {pattern!r}: {e}"
            raise ConfigurationError(msg) from e
        if compiled.groups < 1:
            msg = f"Display name pattern {pattern!r} needs a capturing group"
            raise ConfigurationError(msg)
        return cls(compiled)

    def __call__(self, path: str) -> str:
        if self.pattern is None:
            return path
        match = self.pattern.fullmatch(path)
        if match is None or match.group(1) is None:
            return path
        return match.group(1).replace("/", ".").strip(".")


def _score(value: float) -> str:
    return f"{value:.3f}"


# -----------------------------------------------------------------------
# Serialization
# -----------------------------------------------------------------------


def result_to_dict(result: DiffResult, threshold: float) -> dict:
    """Sorted, JSON-ready view of a result including best-guess renames."""
    ordered = result.sorted()
    guesses = {
        s.record.orig_path: s.guess.path if isinstance(s.guess, Found) else None
        for s in rename_suggestions(ordered, threshold)
    }
    return {
        "counts": ordered.counts,
        "unchanged": [{"path": r.path, "similarity": r.similarity} for r in ordered.unchanged],
        "moved": [
            {"orig_path": r.orig_path, "new_path": r.new_path, "similarity": r.similarity}
            for r in ordered.moved
        ],
        "ambiguous": [
            {
                "orig_path": r.orig_path,
                "reason": str(r.reason),
                "candidates": dict(r.candidates),
                "best_guess": guesses[r.orig_path],
            }
            for r in ordered.ambiguous
        ],
        "new_files": list(ordered.new_files),
    }


# -----------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------


def render_summary(result: DiffResult) -> None:
    counts = result.counts
    console.print(
        f"Unchanged files: [green]{counts['unchanged']}[/green]\n"
        f"Moved files    : [cyan]{counts['moved']}[/cyan]\n"
        f"Ambiguous files: [yellow]{counts['ambiguous']}[/yellow]\n"
        f"New files      : [magenta]{counts['new']}[/magenta]"
    )


def render_full(result: DiffResult, namer: DisplayNamer) -> None:
    """Every record of every category, one table each."""
    ordered = result.sorted()

    if ordered.unchanged:
        table = Table(title="Unchanged")
        table.add_column("Name")
        table.add_column("Path", style="dim")
        table.add_column("Similarity", justify="right")
        for r in ordered.unchanged:
            table.add_row(namer(r.path), r.path, _score(r.similarity))
        console.print(table)

    if ordered.ambiguous:
        table = Table(title="Ambiguous", show_lines=True)
        table.add_column("Original")
        table.add_column("Reason", style="yellow")
        table.add_column("Candidates")
        for r in ordered.ambiguous:
            candidates = "\n".join(
                f"{namer(path)}  {_score(score)}" for path, score in r.candidates.items()
            )
            table.add_row(namer(r.orig_path), str(r.reason), candidates or "[dim]none[/dim]")
        console.print(table)

    if ordered.new_files:
        table = Table(title="New")
        table.add_column("Name")
        table.add_column("Path", style="dim")
        for path in ordered.new_files:
            table.add_row(namer(path), path)
        console.print(table)


def render_renames(result: DiffResult, namer: DisplayNamer, threshold: float) -> None:
    """Moved files and best-guess targets for ambiguous ones."""
    ordered = result.sorted()

    if ordered.moved:
        table = Table(title="Moved files")
        table.add_column("Original")
        table.add_column("New")
        table.add_column("Similarity", justify="right")
        for r in ordered.moved:
            table.add_row(namer(r.orig_path), namer(r.new_path), _score(r.similarity))
        console.print(table)

    suggestions = rename_suggestions(ordered, threshold)
    if suggestions:
        table = Table(title="Ambiguous moved files")
        table.add_column("Original")
        table.add_column("Probable match")
        for s in suggestions:
            if isinstance(s.guess, Found):
                target = Text(namer(str(s.guess.path)), style="green")
            else:
                target = Text(UNRESOLVED, style="red")
            table.add_row(namer(s.record.orig_path), target)
        console.print(table)


def render_report(
    result: DiffResult,
    *,
    namer: DisplayNamer,
    threshold: float,
    full: bool = False,
) -> None:
    """Render a result using Rich panels and tables."""
    console.print(Panel(Text("Version diff", style="bold cyan"), border_style="cyan"))
    render_summary(result)
    if full:
        render_full(result, namer)
    render_renames(result, namer, threshold)


def render_markdown(result: DiffResult, *, namer: DisplayNamer, threshold: float) -> str:
    """Render a result as a markdown string."""
    ordered = result.sorted()
    counts = ordered.counts
    lines: list[str] = ["# Version diff", ""]

    lines.append("## Summary")
    lines.append(f"- Unchanged: {counts['unchanged']}")
    lines.append(f"- Moved: {counts['moved']}")
    lines.append(f"- Ambiguous: {counts['ambiguous']}")
    lines.append(f"- New: {counts['new']}")
    lines.append("")

    if ordered.moved:
        lines.append("## Moved")
        lines.append("| Original | New | Similarity |")
        lines.append("|---|---|---|")
        for r in ordered.moved:
            lines.append(
                f"| {namer(r.orig_path)} | {namer(r.new_path)} | {_score(r.similarity)} |"
            )
        lines.append("")

    suggestions = rename_suggestions(ordered, threshold)
    if suggestions:
        lines.append("## Ambiguous")
        lines.append("| Original | Reason | Probable match |")
        lines.append("|---|---|---|")
        for s in suggestions:
            guess = namer(str(s.guess.path)) if isinstance(s.guess, Found) else UNRESOLVED
            lines.append(f"| {namer(s.record.orig_path)} | {s.record.reason} | {guess} |")
        lines.append("")

    if ordered.new_files:
        lines.append("## New")
        lines.extend(f"- {namer(path)}" for path in ordered.new_files)
        lines.append("")

    return "\n".join(lines)
