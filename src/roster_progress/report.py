"""
report.py – Console reporting for the roster
============================================
Every roster operation prints a human-readable report in addition to
returning structured data.  RosterReporter owns the rich Console so tests
can capture output with ``Console(file=io.StringIO())``.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from roster_progress.models import (
    Phase,
    PhaseSummary,
    ProgressUpdateResult,
    StudentProgress,
)

# ─── Colour map for phases ───────────────────────────────────────────────────
PHASE_STYLE = {
    Phase.PRE_TRACK:  "bold magenta",
    Phase.STUDY:      "bold cyan",
    Phase.INTERNSHIP: "bold yellow",
    Phase.COMPLETED:  "bold green",
}

COMMANDS = [
    ("show",                       "Show progress for every student"),
    ("set-progress NAME PCT",      "Set progress by rewriting the start date"),
    ("set-start NAME YYYY-MM-DD",  "Overwrite the start date"),
    ("set-phase NAME PHASE [PCT]", "Place a student PCT% into a phase"),
    ("upcoming [DAYS]",            "Students changing phase soon"),
    ("phase PHASE",                "Students currently in PHASE"),
    ("range LO HI",                "Students between LO% and HI%"),
    ("summary",                    "Head-count per phase"),
    ("export [FILE] / import FILE", "Roster as JSON"),
    ("reset",                      "Drop the stored roster"),
]


def _bar(percentage: float, width: int = 16) -> str:
    filled = round(percentage / 100 * width)
    return "█" * filled + "░" * (width - filled)


class RosterReporter:
    """Renders roster results with rich."""

    def __init__(self, console: Optional[Console] = None, date_format: str = "%d-%m-%Y") -> None:
        self.console = console or Console()
        self.date_format = date_format

    def _date(self, d: date) -> str:
        return d.strftime(self.date_format)

    def _phase(self, phase: Phase) -> str:
        style = PHASE_STYLE.get(phase, "white")
        return f"[{style}]{phase.value}[/{style}]"

    # ── Mutations ────────────────────────────────────────────────────────────

    def progress_updated(self, result: ProgressUpdateResult) -> None:
        summary = Table(box=box.ROUNDED, show_header=False, padding=(0, 1))
        summary.add_column("Key",   style="bold cyan", no_wrap=True)
        summary.add_column("Value", style="white")
        summary.add_row("Student", result.student)
        if result.target_percentage is not None:
            summary.add_row("Requested", f"{result.target_percentage:g}%")
        summary.add_row("Actual",         f"{result.actual_percentage}%")
        summary.add_row("Old start date", self._date(result.old_start_date))
        summary.add_row("New start date", f"[bold]{self._date(result.new_start_date)}[/bold]")
        summary.add_row("Current phase",  self._phase(result.current_phase))
        summary.add_row("Total duration", f"{result.total_months:g} months")
        summary.add_row("Elapsed",        f"{round(result.months_elapsed)} months")
        self.console.print(Panel(
            summary,
            title="[bold green]✅ Progress updated[/bold green]",
            border_style="green",
            expand=False,
        ))

    def bulk_finished(self, succeeded: int, attempted: int) -> None:
        style = "green" if succeeded == attempted else "yellow"
        self.console.print(
            f"[{style}]Bulk update: {succeeded}/{attempted} students updated[/{style}]"
        )

    def roster_loaded(self, count: int) -> None:
        self.console.print(f"[green]✅ Loaded {count} students from storage[/green]")

    def roster_imported(self, count: int) -> None:
        self.console.print(f"[green]✅ Imported {count} students[/green]")

    def storage_reset(self) -> None:
        self.console.print(
            "[yellow]🔄 Stored roster removed — restart to begin from the original data[/yellow]"
        )

    # ── Queries ──────────────────────────────────────────────────────────────

    def roster_table(self, rows: Iterable[StudentProgress], title: str = "All students") -> None:
        table = Table(
            box=box.SIMPLE_HEAD,
            show_header=True,
            header_style="bold white on dark_violet",
            padding=(0, 1),
            title=f"[bold]{title}[/bold]",
        )
        table.add_column("Student",      style="white", min_width=12)
        table.add_column("Progress",     justify="right")
        table.add_column("",             min_width=16)
        table.add_column("Phase",        min_width=12)
        table.add_column("Start",        justify="center")
        table.add_column("Forecast end", justify="center")
        table.add_column("Next phase in", justify="right")

        count = 0
        for row in rows:
            view = row.view
            if view.phase == Phase.COMPLETED:
                next_in = "[dim]—[/dim]"
            else:
                next_in = f"{view.days_until_next_phase} d"
            table.add_row(
                row.name,
                f"{view.rounded_percentage:>3}%",
                _bar(view.percentage),
                self._phase(view.phase),
                self._date(row.record.start_date),
                self._date(view.forecast_end_date),
                next_in,
            )
            count += 1

        if count == 0:
            self.console.print(f"[dim]{title}: no students match[/dim]")
            return
        self.console.print(table)

    def transitions(self, rows: list[StudentProgress], within_days: int) -> None:
        if not rows:
            self.console.print(
                f"[dim]No phase transitions in the next {within_days} days[/dim]"
            )
            return
        table = Table(box=box.SIMPLE_HEAD, header_style="bold cyan",
                      title=f"[bold]Phase transitions within {within_days} days[/bold]")
        table.add_column("Student")
        table.add_column("Current phase")
        table.add_column("Changes on", justify="center")
        table.add_column("In", justify="right")
        for row in rows:
            table.add_row(
                row.name,
                self._phase(row.view.phase),
                self._date(row.view.next_phase_date),
                f"{row.view.days_until_next_phase} d",
            )
        self.console.print(table)

    def phase_summary(self, summary: PhaseSummary) -> None:
        table = Table(box=box.ROUNDED, show_header=False, padding=(0, 1))
        table.add_column("Phase")
        table.add_column("Students", justify="right")
        for phase in Phase:
            table.add_row(self._phase(phase), str(summary.counts.get(phase, 0)))
        table.add_row("[bold]Total[/bold]", f"[bold]{summary.total_students}[/bold]")
        table.add_row("Mean progress", f"{summary.mean_percentage:.0f}%")
        self.console.print(Panel(
            table,
            title="[bold]Phase summary[/bold]",
            border_style="blue",
            expand=False,
        ))

    # ── Help ─────────────────────────────────────────────────────────────────

    def commands(self) -> None:
        table = Table(box=box.SIMPLE, show_header=False, padding=(0, 1))
        table.add_column("Command", style="bold cyan", no_wrap=True)
        table.add_column("Description", style="white")
        for cmd, desc in COMMANDS:
            table.add_row(cmd, desc)
        self.console.print(Panel(table, title="[bold]💡 Commands[/bold]", border_style="magenta"))
