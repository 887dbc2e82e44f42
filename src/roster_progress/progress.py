"""
progress.py – Progress calculator
=================================
Pure functions that turn a StudentRecord plus the programme's
PhaseDurations into a ProgressView.

  compute_progress(record, durations, today)   → ProgressView
  phase_at(elapsed, has_pre_track, durations)  → Phase
  percentage_for_phase(phase, within_pct, …)   → float | None
  start_date_for(today, months, phase, …)      → date

Nothing here touches storage or prints; the roster manager owns side effects.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from roster_progress.calendar_math import add_months, months_between, start_for_elapsed
from roster_progress.models import Phase, PhaseDurations, ProgressView, StudentRecord


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def phase_at(elapsed_months: float, has_pre_track: bool, durations: PhaseDurations) -> Phase:
    """Phase containing *elapsed_months* (>= 0); zero-width phases never match."""
    for phase, start, end in durations.boundaries(has_pre_track):
        if start <= elapsed_months < end:
            return phase
    return Phase.COMPLETED


def next_boundary(elapsed_months: float, has_pre_track: bool, durations: PhaseDurations) -> float:
    """Month offset at which the phase after the current one begins."""
    for _, start, end in durations.boundaries(has_pre_track):
        if elapsed_months < end and end > start:
            return end
    return durations.total_months(has_pre_track)


def compute_progress(
    record: StudentRecord,
    durations: PhaseDurations,
    today: Optional[date] = None,
) -> ProgressView:
    today = today or date.today()
    total = durations.total_months(record.has_pre_track)

    elapsed = _clamp(months_between(record.start_date, today), 0.0, total)
    percentage = _clamp(100.0 * elapsed / total, 0.0, 100.0)
    phase = phase_at(elapsed, record.has_pre_track, durations)

    forecast_end = add_months(record.start_date, total)
    if phase == Phase.COMPLETED:
        next_date = forecast_end
    else:
        next_date = add_months(
            record.start_date,
            next_boundary(elapsed, record.has_pre_track, durations),
        )

    return ProgressView(
        percentage=percentage,
        phase=phase,
        total_months=total,
        elapsed_months=elapsed,
        forecast_end_date=forecast_end,
        next_phase_date=next_date,
        days_until_next_phase=(next_date - today).days,
    )


def percentage_for_phase(
    phase: Phase,
    within_pct: float,
    has_pre_track: bool,
    durations: PhaseDurations,
) -> Optional[float]:
    """
    Absolute programme percentage for a point *within_pct* percent into *phase*.

    Returns None when the phase has no length for this student (Pre-Track
    without a pre-track).  Completed always maps to 100.
    """
    total = durations.total_months(has_pre_track)
    if phase == Phase.COMPLETED:
        return 100.0

    for candidate, start, end in durations.boundaries(has_pre_track):
        if candidate != phase:
            continue
        if end <= start:
            return None
        offset = start + (within_pct / 100.0) * (end - start)
        return _clamp(100.0 * offset / total, 0.0, 100.0)
    return None


# A phase boundary sits at most a couple of days away from the nearest start.
_MAX_NUDGE_DAYS = 31


def start_date_for(
    today: date,
    months_elapsed: float,
    phase: Phase,
    has_pre_track: bool,
    durations: PhaseDurations,
) -> date:
    """
    Start date that puts *today* about *months_elapsed* into the programme.

    Dates are whole days, so a target on or just below a phase boundary can
    round across it.  The nearest date is moved a day at a time until
    compute_progress would report *phase*.
    """
    total = durations.total_months(has_pre_track)
    start = start_for_elapsed(today, months_elapsed)
    for _ in range(_MAX_NUDGE_DAYS):
        elapsed = _clamp(months_between(start, today), 0.0, total)
        current = phase_at(elapsed, has_pre_track, durations)
        if current == phase:
            break
        # An earlier start means more elapsed time.
        start += timedelta(days=-1 if current.rank < phase.rank else 1)
    return start
