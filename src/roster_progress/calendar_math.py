"""
calendar_math.py — Calendar month arithmetic
=============================================
Programme durations are expressed in months, so every date in the roster is
derived by adding (or subtracting) a possibly fractional number of months.

Rules
-----
  add_months(d, n)      whole months move the month field; the day is
                        clamped to the last day of the target month
                        (Jan 31 + 1 → Feb 28/29, never Mar 2/3).
                        The fractional part is converted to days using the
                        length of the calendar month it falls in.
  months_between(a, b)  whole months from *a* that do not pass *b*, plus the
                        remainder as a fraction of the following month
                        interval.  Negative when b < a.
  start_for_elapsed(b, n)
                        the start date whose months_between to *b* is
                        nearest to *n*; the inverse used when progress is
                        overridden.

Granularity is one day.
"""

from __future__ import annotations

import calendar
import math
from datetime import date, timedelta


def _shift_months(d: date, months: int) -> date:
    """Move *d* by a whole number of months, clamping the day."""
    index = d.year * 12 + (d.month - 1) + months
    year, month0 = divmod(index, 12)
    month = month0 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def add_months(d: date, months: float) -> date:
    """Return *d* shifted by *months* (may be negative or fractional)."""
    whole = math.floor(months)
    frac = months - whole
    anchor = _shift_months(d, whole)
    if frac == 0:
        return anchor
    span = (_shift_months(d, whole + 1) - anchor).days
    return anchor + timedelta(days=round(frac * span))


def months_between(start: date, end: date) -> float:
    """Fractional number of calendar months from *start* to *end*."""
    if end < start:
        return -months_between(end, start)

    whole = (end.year - start.year) * 12 + (end.month - start.month)
    anchor = _shift_months(start, whole)
    if anchor > end:
        whole -= 1
        anchor = _shift_months(start, whole)

    span = (_shift_months(start, whole + 1) - anchor).days
    return whole + (end - anchor).days / span


def start_for_elapsed(end: date, months: float) -> date:
    """
    Start date from which ``months_between(start, end)`` is closest to *months*.

    ``add_months(end, -months)`` measures the fraction against a different
    month interval than months_between does, so the first guess can be a
    day or two off; walk one day at a time while the error shrinks.
    """
    start = add_months(end, -months)

    def error(d: date) -> float:
        return abs(months_between(d, end) - months)

    for step in (timedelta(days=-1), timedelta(days=1)):
        while error(start + step) < error(start):
            start += step
    return start
