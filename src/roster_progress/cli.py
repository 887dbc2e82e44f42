"""
Command-line entry point for the roster progress tracker.

    roster-progress show
    roster-progress set-progress Sam 75
    roster-progress set-phase Sam internship 50
    roster-progress upcoming 30

On start-up the stored roster is loaded; when nothing is stored yet the
built-in cohort from seed_data is used.  ``main()`` returns the process
exit code (0 on success, 1 when the operation reported failure) so tests
can call it directly.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from roster_progress.config import Settings, get_settings
from roster_progress.report import RosterReporter
from roster_progress.roster import Roster, RosterManager
from roster_progress.seed_data import default_roster
from roster_progress.storage import build_store

logger = logging.getLogger(__name__)


def configure_logging(level: str, console: Optional[Console] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


def build_manager(settings: Settings, console: Optional[Console] = None) -> RosterManager:
    """Wire roster, store and reporter from *settings* and load any stored roster."""
    manager = RosterManager(
        roster=Roster(default_roster()),
        durations=settings.durations,
        store=build_store(settings.storage),
        storage_key=settings.storage.storage_key,
        reporter=RosterReporter(console=console, date_format=settings.app.date_format),
    )
    manager.load()
    return manager


def _percentage(raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{raw!r} is not a number")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="roster-progress",
        description="Track and override student progress through the programme phases.",
    )
    sub = ap.add_subparsers(dest="command")

    sub.add_parser("show", help="Show progress for every student")
    sub.add_parser("summary", help="Head-count per phase")
    sub.add_parser("commands", help="List the available commands")
    sub.add_parser("reset", help="Remove the stored roster")
    sub.add_parser("status", help="Show configuration status")

    p = sub.add_parser("student", help="Show one student")
    p.add_argument("name")

    p = sub.add_parser("set-progress", help="Set progress by rewriting the start date")
    p.add_argument("name")
    p.add_argument("percentage", type=_percentage)

    p = sub.add_parser("set-start", help="Overwrite the start date")
    p.add_argument("name")
    p.add_argument("start_date", help="YYYY-MM-DD")

    p = sub.add_parser("set-phase", help="Place a student a percentage into a phase")
    p.add_argument("name")
    p.add_argument("phase")
    p.add_argument("within", nargs="?", type=_percentage, default=0.0)

    p = sub.add_parser("upcoming", help="Students changing phase soon")
    p.add_argument("days", nargs="?", type=int, default=settings.app.upcoming_days)

    p = sub.add_parser("phase", help="Students currently in a phase")
    p.add_argument("phase")

    p = sub.add_parser("range", help="Students within a percentage range")
    p.add_argument("low", type=_percentage)
    p.add_argument("high", type=_percentage)

    p = sub.add_parser("export", help="Write the roster as JSON")
    p.add_argument("file", nargs="?", default=None)

    p = sub.add_parser("import", help="Replace the roster from a JSON file")
    p.add_argument("file")

    return ap


def main(
    argv: Optional[list[str]] = None,
    *,
    settings: Optional[Settings] = None,
    console: Optional[Console] = None,
) -> int:
    settings = settings or get_settings()
    console = console or Console()
    args = build_parser(settings).parse_args(argv)
    configure_logging(settings.app.log_level, console)

    if args.command == "status":
        for component, badge in settings.status_summary().items():
            console.print(f"[bold]{component}[/bold]: {badge}")
        return 0

    manager = build_manager(settings, console)
    cmd = args.command or "commands"

    if cmd == "commands":
        manager.reporter.commands()
        return 0
    if cmd == "show":
        manager.list_all()
        ok = settings.durations is not None and settings.durations.is_configured
    elif cmd == "summary":
        ok = manager.phase_summary() is not None
    elif cmd == "student":
        ok = manager.get_progress(args.name) is not None
    elif cmd == "set-progress":
        ok = manager.set_progress_by_percentage(args.name, args.percentage) is not None
    elif cmd == "set-start":
        ok = manager.set_start_date(args.name, args.start_date) is not None
    elif cmd == "set-phase":
        ok = manager.set_phase(args.name, args.phase, args.within) is not None
    elif cmd == "upcoming":
        ok = manager.find_upcoming_transitions(args.days) is not None
    elif cmd == "phase":
        ok = manager.filter_by_phase(args.phase) is not None
    elif cmd == "range":
        ok = manager.filter_by_percentage_range(args.low, args.high) is not None
    elif cmd == "reset":
        ok = manager.reset()
    elif cmd == "export":
        text = manager.export_json()
        if args.file:
            try:
                Path(args.file).write_text(text + "\n", encoding="utf-8")
            except OSError as exc:
                logger.error("❌ Could not write %s: %s", args.file, exc)
                return 1
            console.print(f"[green]✅ Exported {len(manager.roster)} students to {args.file}[/green]")
        else:
            console.print_json(text)
        ok = True
    elif cmd == "import":
        try:
            text = Path(args.file).read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("❌ Could not read %s: %s", args.file, exc)
            return 1
        ok = manager.import_json(text)
    else:
        logger.error("❌ Unknown command %r", cmd)
        ok = False

    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
