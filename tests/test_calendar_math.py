"""
Tests for calendar month arithmetic (calendar_math.py).
Pins the day-of-month clamping and fractional-month rules.
"""
from datetime import date, timedelta

import pytest

from roster_progress.calendar_math import add_months, months_between, start_for_elapsed


class TestAddMonthsWhole:
    def test_plain_shift(self):
        assert add_months(date(2026, 10, 19), 12) == date(2027, 10, 19)

    def test_negative_shift_across_year(self):
        assert add_months(date(2026, 2, 15), -3) == date(2025, 11, 15)

    def test_jan_31_plus_one_clamps_to_feb_28(self):
        assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)

    def test_jan_31_plus_one_leap_year(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_mar_31_minus_one_clamps(self):
        assert add_months(date(2026, 3, 31), -1) == date(2026, 2, 28)

    def test_zero_is_identity(self):
        assert add_months(date(2026, 10, 19), 0) == date(2026, 10, 19)


class TestAddMonthsFractional:
    def test_half_month_in_thirty_day_month(self):
        # April interval is 30 days long → 15 days
        assert add_months(date(2026, 4, 1), 0.5) == date(2026, 4, 16)

    def test_subtracting_fractional_months(self):
        # -20.25 → 21 months back (2025-01-19) then 0.75 × 31 days forward
        assert add_months(date(2026, 10, 19), -20.25) == date(2025, 2, 11)

    def test_float_whole_number_matches_int(self):
        assert add_months(date(2026, 5, 31), 3.0) == add_months(date(2026, 5, 31), 3)


class TestMonthsBetween:
    def test_same_day_is_zero(self):
        assert months_between(date(2026, 10, 19), date(2026, 10, 19)) == 0

    def test_whole_months(self):
        assert months_between(date(2025, 1, 19), date(2026, 10, 19)) == pytest.approx(21.0)

    def test_clamped_anchor_counts_as_full_month(self):
        assert months_between(date(2026, 1, 31), date(2026, 2, 28)) == pytest.approx(1.0)

    def test_fraction_of_month(self):
        assert months_between(date(2026, 4, 1), date(2026, 4, 16)) == pytest.approx(0.5)

    def test_negative_when_end_before_start(self):
        assert months_between(date(2026, 5, 1), date(2026, 4, 1)) == pytest.approx(-1.0)

    def test_monotonic_day_by_day(self):
        start = date(2025, 1, 31)
        previous = -1.0
        for offset in range(0, 800):
            value = months_between(start, start + timedelta(days=offset))
            assert value >= previous, f"regressed at day {offset}"
            previous = value

    @pytest.mark.parametrize("months", [0.25, 1, 3.5, 12.75, 20.25, 27])
    @pytest.mark.parametrize("start", [date(2024, 1, 31), date(2025, 6, 15), date(2026, 10, 19)])
    def test_inverse_of_add_months_within_a_day(self, start, months):
        shifted = add_months(start, months)
        # One day of rounding is at most 1/28 of a month
        assert months_between(start, shifted) == pytest.approx(months, abs=1 / 28)


MONTH_END_DAYS = [
    date(2023, 1, 31), date(2023, 2, 28), date(2024, 2, 29),
    date(2024, 3, 31), date(2024, 4, 30), date(2025, 12, 31),
]


class TestStartForElapsed:
    @pytest.mark.parametrize("months", [0.5, 1.5, 2.97, 12, 20.25, 26.73])
    @pytest.mark.parametrize("end", MONTH_END_DAYS + [date(2023, 1, 16)])
    def test_months_between_is_nearest(self, end, months):
        start = start_for_elapsed(end, months)
        best = abs(months_between(start, end) - months)
        for neighbour in (start - timedelta(days=1), start + timedelta(days=1)):
            assert abs(months_between(neighbour, end) - months) >= best

    def test_whole_months_match_add_months(self):
        end = date(2026, 10, 19)
        assert start_for_elapsed(end, 24) == add_months(end, -24)

    def test_zero_is_end(self):
        assert start_for_elapsed(date(2024, 2, 29), 0) == date(2024, 2, 29)
