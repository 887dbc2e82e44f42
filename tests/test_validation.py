"""
Tests for input checks (validation.py).
Run: python -m pytest tests/ -v
"""
from datetime import date, datetime

import pytest

from roster_progress.models import Phase
from roster_progress.validation import (
    ViolationLevel,
    check_name,
    check_percentage,
    check_phase,
    check_range,
    check_roster_payload,
    check_start_date,
)


class TestCheckName:
    def test_valid_name_is_stripped(self):
        result = check_name("  Sam ")
        assert result.passed
        assert result.value == "Sam"

    @pytest.mark.parametrize("raw", ["", "   ", None, 42])
    def test_invalid_names_block(self, raw):
        result = check_name(raw)
        assert result.blocked
        assert result.violations[0].field == "name"


class TestCheckPercentage:
    @pytest.mark.parametrize("raw", [0, 0.0, 37.5, 100])
    def test_in_range_passes(self, raw):
        result = check_percentage(raw)
        assert result.passed
        assert result.value == float(raw)

    @pytest.mark.parametrize("raw", [-0.1, 100.01, 150, float("nan"), float("inf")])
    def test_out_of_range_blocks(self, raw):
        assert check_percentage(raw).blocked

    @pytest.mark.parametrize("raw", ["50", None, True, [50]])
    def test_non_numbers_block(self, raw):
        assert check_percentage(raw).blocked

    def test_field_name_in_message(self):
        result = check_percentage(200, "progress_within_phase")
        assert "progress_within_phase" in result.violations[0].message


class TestCheckPhase:
    def test_known_phase(self):
        assert check_phase("internship").value is Phase.INTERNSHIP

    def test_unknown_phase_lists_valid_names(self):
        result = check_phase("Holiday")
        assert result.blocked
        assert "Pre-Track" in result.violations[0].message


class TestCheckStartDate:
    def test_date_passes_through(self):
        assert check_start_date(date(2025, 2, 11)).value == date(2025, 2, 11)

    def test_datetime_reduced_to_date(self):
        assert check_start_date(datetime(2025, 2, 11, 9, 30)).value == date(2025, 2, 11)

    def test_iso_string(self):
        assert check_start_date("2025-02-11").value == date(2025, 2, 11)

    def test_iso_timestamp_string(self):
        assert check_start_date("2025-02-11T00:00:00").value == date(2025, 2, 11)

    @pytest.mark.parametrize("raw", ["11-02-2025", "2025-02-30", "", None, 20250211])
    def test_invalid_dates_block(self, raw):
        assert check_start_date(raw).blocked


class TestCheckRange:
    def test_valid_range(self):
        assert check_range(20, 80).value == (20.0, 80.0)

    def test_equal_bounds_allowed(self):
        assert check_range(50, 50).passed

    def test_inverted_range_blocks(self):
        assert check_range(80, 20).blocked

    def test_out_of_range_bound_blocks(self):
        assert check_range(-5, 50).blocked


class TestCheckRosterPayload:
    def test_valid_payload(self):
        result = check_roster_payload([
            {"name": "Sam", "start_date": "2025-03-03", "has_pre_track": True},
            {"naam": "Noor", "startdatum": "2026-09-01", "heeftVoortraject": False},
        ])
        assert result.passed
        assert [r.name for r in result.value] == ["Sam", "Noor"]

    @pytest.mark.parametrize("payload", [{}, "roster", None, 3])
    def test_non_array_blocks(self, payload):
        result = check_roster_payload(payload)
        assert result.blocked
        assert "JSON array" in result.summary()

    def test_duplicate_names_ignoring_case_block(self):
        result = check_roster_payload([
            {"name": "Sam", "start_date": "2025-03-03"},
            {"name": "SAM", "start_date": "2025-04-03"},
        ])
        assert result.blocked
        assert result.value is None

    def test_invalid_entry_blocks(self):
        result = check_roster_payload([{"name": "Sam", "start_date": "not a date"}])
        assert result.blocked
        assert "Entry 0" in result.violations[0].message

    def test_non_object_entry_blocks(self):
        assert check_roster_payload(["Sam"]).blocked

    def test_empty_array_warns_but_passes(self):
        result = check_roster_payload([])
        assert result.passed
        assert result.value == []
        assert result.warnings[0].level == ViolationLevel.WARN

    def test_summary_when_clean(self):
        assert check_name("Sam").summary() == "✅ All checks passed."
