"""
Smoke tests for config / settings loading.
Run: python -m pytest tests/ -v
"""
import sys
import os
from pathlib import Path

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from roster_progress.config import get_settings
from roster_progress.models import PhaseDurations

_VARS = (
    "ROSTER_PRE_MONTHS", "ROSTER_STUDY_MONTHS", "ROSTER_INTERN_MONTHS",
    "ROSTER_STORAGE_BACKEND", "ROSTER_DB_PATH", "ROSTER_STORAGE_KEY",
    "ROSTER_DATE_FORMAT", "ROSTER_LOG_LEVEL", "ROSTER_UPCOMING_DAYS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in _VARS:
        monkeypatch.delenv(var, raising=False)


class TestDurations:
    def test_defaults(self):
        assert get_settings().durations == PhaseDurations(3, 18, 6)

    def test_override_from_env(self, monkeypatch):
        monkeypatch.setenv("ROSTER_PRE_MONTHS", "0")
        monkeypatch.setenv("ROSTER_STUDY_MONTHS", "12.5")
        s = get_settings()
        assert s.durations.pre_months == 0
        assert s.durations.study_months == 12.5

    def test_non_numeric_leaves_durations_missing(self, monkeypatch):
        monkeypatch.setenv("ROSTER_INTERN_MONTHS", "six")
        assert get_settings().durations is None


class TestStorageSettings:
    def test_defaults(self):
        s = get_settings()
        assert s.storage.backend == "sqlite"
        assert s.storage.storage_key == "STUDENT_ROSTER"
        assert s.storage.db_path.name == "roster_data.db"
        assert s.storage.is_persistent

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setenv("ROSTER_STORAGE_BACKEND", "Memory")
        s = get_settings()
        assert s.storage.backend == "memory"
        assert not s.storage.is_persistent

    def test_unknown_backend_falls_back(self, monkeypatch):
        monkeypatch.setenv("ROSTER_STORAGE_BACKEND", "redis")
        assert get_settings().storage.backend == "sqlite"

    def test_db_path_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ROSTER_DB_PATH", str(tmp_path / "x.db"))
        assert get_settings().storage.db_path == Path(tmp_path / "x.db")


class TestAppSettings:
    def test_defaults(self):
        app = get_settings().app
        assert app.date_format == "%d-%m-%Y"
        assert app.log_level == "WARNING"
        assert app.upcoming_days == 30

    def test_log_level_upper_cased(self, monkeypatch):
        monkeypatch.setenv("ROSTER_LOG_LEVEL", "debug")
        assert get_settings().app.log_level == "DEBUG"


class TestStatusSummary:
    def test_keys(self):
        summary = get_settings().status_summary()
        assert set(summary) == {"Phase durations", "Storage", "Storage key"}

    def test_configured_durations_green(self):
        assert get_settings().status_summary()["Phase durations"].startswith("🟢")

    def test_missing_durations_red(self, monkeypatch):
        monkeypatch.setenv("ROSTER_PRE_MONTHS", "n/a")
        assert get_settings().status_summary()["Phase durations"].startswith("🔴")
