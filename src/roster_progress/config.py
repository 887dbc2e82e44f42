"""
config.py — Central settings for the roster progress tracker
============================================================
All configuration is loaded from environment variables / .env file.
Copy .env.example → .env to override the defaults.

The phase durations are the programme constants every progress figure
depends on; when they cannot be parsed, ``Settings.durations`` is None and
the roster manager refuses mutating operations.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from roster_progress.models import PhaseDurations

# Load .env into os.environ (no-op if already set, safe to call multiple times)
load_dotenv(override=False)

logger = logging.getLogger(__name__)

# Database file lives next to the workspace root
_DB_DIR = Path(__file__).resolve().parent.parent.parent
_DEFAULT_DB_PATH = _DB_DIR / "roster_data.db"

STORAGE_BACKENDS = ("sqlite", "memory")


# ─── Storage ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StorageConfig:
    backend:     str    # "sqlite" | "memory"
    db_path:     Path
    storage_key: str

    @property
    def is_persistent(self) -> bool:
        return self.backend == "sqlite"


# ─── App-level settings ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class AppConfig:
    date_format:   str
    log_level:     str
    upcoming_days: int


# ─── Master settings object ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Settings:
    durations: Optional[PhaseDurations]
    storage:   StorageConfig
    app:       AppConfig

    def status_summary(self) -> dict[str, str]:
        """Return a dict of component → status badge for the CLI."""
        def badge(ok: bool, detail: str) -> str:
            return f"🟢 {detail}" if ok else f"🔴 {detail}"

        d = self.durations
        if d is None:
            phases = badge(False, "Phase durations missing or not numeric")
        else:
            phases = badge(
                d.is_configured,
                f"{d.pre_months:g} / {d.study_months:g} / {d.intern_months:g} months",
            )
        if self.storage.is_persistent:
            store = badge(True, f"SQLite at {self.storage.db_path}")
        else:
            store = badge(True, "In-memory (not persisted)")
        return {
            "Phase durations": phases,
            "Storage":         store,
            "Storage key":     self.storage.storage_key,
        }


def _parse_months(key: str, default: float) -> Optional[float]:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.error("%s=%r is not a number", key, raw)
        return None


def get_settings() -> Settings:
    """Load all configuration from environment variables."""
    _str  = lambda k, d="": os.getenv(k, d).strip()
    _int  = lambda k, d=0: int(os.getenv(k, str(d)) or d)

    months = (
        _parse_months("ROSTER_PRE_MONTHS", 3),
        _parse_months("ROSTER_STUDY_MONTHS", 18),
        _parse_months("ROSTER_INTERN_MONTHS", 6),
    )
    durations = None if None in months else PhaseDurations(*months)

    backend = _str("ROSTER_STORAGE_BACKEND", "sqlite").lower()
    if backend not in STORAGE_BACKENDS:
        logger.warning("Unknown ROSTER_STORAGE_BACKEND %r, falling back to sqlite", backend)
        backend = "sqlite"

    return Settings(
        durations=durations,
        storage=StorageConfig(
            backend     = backend,
            db_path     = Path(_str("ROSTER_DB_PATH") or _DEFAULT_DB_PATH),
            storage_key = _str("ROSTER_STORAGE_KEY", "STUDENT_ROSTER"),
        ),
        app=AppConfig(
            date_format   = _str("ROSTER_DATE_FORMAT", "%d-%m-%Y"),
            log_level     = _str("ROSTER_LOG_LEVEL", "WARNING").upper(),
            upcoming_days = _int("ROSTER_UPCOMING_DAYS", 30),
        ),
    )
