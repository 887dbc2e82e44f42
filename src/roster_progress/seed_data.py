"""
seed_data.py
────────────
Initial roster used when nothing has been stored yet.  Start dates are
fixed so the cohort spreads across every phase of a 3 / 18 / 6 month
programme in late 2026.
"""

from __future__ import annotations

from roster_progress.models import StudentRecord


_SEED_STUDENTS: list[dict] = [
    # name        start date          pre-track
    {"name": "Sam",    "start_date": "2025-03-03", "has_pre_track": True},
    {"name": "Noor",   "start_date": "2026-09-01", "has_pre_track": True},
    {"name": "Lotte",  "start_date": "2025-09-01", "has_pre_track": False},
    {"name": "Daan",   "start_date": "2024-11-04", "has_pre_track": False},
    {"name": "Yara",   "start_date": "2024-06-03", "has_pre_track": True},
    {"name": "Milan",  "start_date": "2023-09-04", "has_pre_track": False},
    {"name": "Fatima", "start_date": "2026-02-02", "has_pre_track": True},
]


def default_roster() -> list[StudentRecord]:
    """Fresh StudentRecord objects for the built-in cohort."""
    return [StudentRecord.model_validate(s) for s in _SEED_STUDENTS]
