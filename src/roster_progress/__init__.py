"""
roster_progress — Student roster progress tracker
=================================================
Tracks students through a three-phase programme (optional Pre-Track,
Study, Internship) from a stored start date, and lets an operator override
progress by rewriting that start date.

Module map
----------
  calendar_math.py   Month arithmetic with clamped day-of-month.
  models.py          Phase enum, PhaseDurations, StudentRecord (pydantic),
                     derived ProgressView / result dataclasses.
  progress.py        Progress calculator (pure functions).
  validation.py      Input checks returning ValidationResult.
  storage.py         Key-value persistence port: in-memory + SQLite.
  roster.py          Roster store + RosterManager (CRUD, queries, persistence).
  report.py          rich console reports.
  config.py          Settings loaded from .env.
  seed_data.py       Built-in initial cohort.
  cli.py             ``roster-progress`` command.

Flow
----
  config.get_settings() → storage.build_store() → RosterManager.load()
  → RosterManager.set_* / queries → progress.compute_progress()
  → store.set() + on_change() + RosterReporter
"""
__version__ = "0.1.0"
