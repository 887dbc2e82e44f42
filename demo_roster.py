"""
demo_roster.py – Walk through the roster progress tracker

Run:
    python demo_roster.py

Uses an in-memory store, so nothing is written to disk.  Phase durations
come from .env (defaults 3 / 18 / 6 months).
"""

from __future__ import annotations

import sys
from pathlib import Path

# ── make src/ importable without installing the package ──────────────────────
sys.path.insert(0, str(Path(__file__).parent / "src"))

from rich.console import Console

from roster_progress.config import get_settings
from roster_progress.report import RosterReporter
from roster_progress.roster import Roster, RosterManager
from roster_progress.seed_data import default_roster
from roster_progress.storage import InMemoryStore

console = Console()


def main() -> None:
    settings = get_settings()
    manager = RosterManager(
        roster=Roster(default_roster()),
        durations=settings.durations,
        store=InMemoryStore(),
        storage_key=settings.storage.storage_key,
        on_change=lambda: console.print("[dim]🔄 view refreshed[/dim]"),
        reporter=RosterReporter(console, settings.app.date_format),
    )

    console.rule("[bold magenta]Example: set Sam to 75%[/bold magenta]")
    manager.set_progress_by_percentage("Sam", 75)

    console.rule("[bold magenta]All students[/bold magenta]")
    manager.list_all()

    console.rule("[bold magenta]Upcoming phase changes[/bold magenta]")
    manager.find_upcoming_transitions(settings.app.upcoming_days)

    manager.phase_summary()
    manager.reporter.commands()


if __name__ == "__main__":
    main()
