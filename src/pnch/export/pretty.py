"""Human-readable renderings of a list of punches.

``render_list`` produces plain text grouped by date; ``build_table``
produces a ``rich.table.Table`` for the console.
"""
from __future__ import annotations

from collections.abc import Sequence

from rich.markup import escape
from rich.table import Table

from pnch.clock import format_minutes
from pnch.punches import Punch


def total_minutes(punches: Sequence[Punch]) -> int:
    """Sum the durations of the closed punches."""
    return sum(d for d in (p.duration() for p in punches) if d is not None)


def render_list(punches: Sequence[Punch]) -> str:
    """Render the total, then each punch under a heading for its date."""
    if not punches:
        return "No pnchs found."
    lines = [f"The total duration of pnchs was {format_minutes(total_minutes(punches))}"]
    current = None
    for punch in punches:
        if punch.date != current:
            current = punch.date
            lines.append("")
            lines.append(str(current))
        lines.append(f"  {punch}")
    return "\n".join(lines)


def build_table(punches: Sequence[Punch], title: str | None = None) -> Table:
    """Build a rich table with one row per punch and the total as caption."""
    table = Table(title=title, caption=f"Total: {format_minutes(total_minutes(punches))}")
    table.add_column("Id", justify="right", style="bold")
    table.add_column("Date", min_width=10)
    table.add_column("In")
    table.add_column("Out")
    table.add_column("Duration", justify="right")
    table.add_column("Tag", style="cyan")
    table.add_column("Description")

    for punch in punches:
        duration = punch.duration()
        table.add_row(
            str(punch.id),
            str(punch.date),
            str(punch.time_in),
            str(punch.time_out) if punch.time_out is not None else "[yellow]open[/yellow]",
            format_minutes(duration) if duration is not None else "",
            escape(punch.tag.text) if punch.tag is not None else "",
            escape(punch.description) if punch.description else "[dim]no description[/dim]",
        )
    return table
