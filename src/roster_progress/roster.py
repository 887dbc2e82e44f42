"""
roster.py – Roster store and manager
====================================

  Roster
    The explicit, process-wide collection of StudentRecords.  Names are
    unique under case-insensitive comparison and every lookup ignores case.

  RosterManager
    CRUD, queries and persistence glue over a Roster.  All derived figures
    come from progress.compute_progress.  After each successful mutation the
    roster is written to the key-value store, the optional ``on_change``
    callback is notified and a report is printed.

Error contract
--------------
Public methods never raise.  Failure is reported through a log message and
a sentinel return value (None / False), and leaves the roster untouched.
Storage failures during a mutation are logged as warnings only; the
in-memory roster stays authoritative.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import date
from typing import Callable, Iterable, Iterator, Optional, Union

from roster_progress.models import (
    Phase,
    PhaseDurations,
    PhaseSummary,
    ProgressUpdateResult,
    StudentProgress,
    StudentRecord,
)
from roster_progress.progress import (
    compute_progress,
    percentage_for_phase,
    phase_at,
    start_date_for,
)
from roster_progress.report import RosterReporter
from roster_progress.storage import InMemoryStore, KeyValueStore, StorageError
from roster_progress.validation import (
    ValidationResult,
    ViolationLevel,
    check_name,
    check_percentage,
    check_phase,
    check_range,
    check_roster_payload,
    check_start_date,
)

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "STUDENT_ROSTER"


# ─── Roster store ────────────────────────────────────────────────────────────

class Roster:
    """Ordered collection of StudentRecords with case-insensitive names."""

    def __init__(self, records: Iterable[StudentRecord] = ()) -> None:
        self._records: list[StudentRecord] = []
        self.replace(records)

    def __iter__(self) -> Iterator[StudentRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def find(self, name: str) -> Optional[StudentRecord]:
        return next((r for r in self._records if r.matches(name)), None)

    def names(self) -> list[str]:
        return [r.name for r in self._records]

    def replace(self, records: Iterable[StudentRecord]) -> None:
        """Swap the full contents; duplicates (ignoring case) are rejected."""
        fresh = list(records)
        lowered = [r.name.lower() for r in fresh]
        if len(set(lowered)) != len(lowered):
            raise ValueError("Roster names must be unique (case-insensitive)")
        self._records[:] = fresh

    def to_payload(self) -> list[dict]:
        return [r.model_dump(mode="json") for r in self._records]


# ─── Manager ─────────────────────────────────────────────────────────────────

UpdatesArg = Union[Mapping[str, float], Iterable[tuple[str, float]]]


class RosterManager:
    """
    Reads and mutates a Roster using the configured PhaseDurations.

    ``clock`` supplies "today" so progress can be pinned in tests.
    """

    def __init__(
        self,
        roster: Roster,
        durations: Optional[PhaseDurations],
        store: Optional[KeyValueStore] = None,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        on_change: Optional[Callable[[], None]] = None,
        reporter: Optional[RosterReporter] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.roster = roster
        self.durations = durations
        self.store = store if store is not None else InMemoryStore()
        self.storage_key = storage_key
        self.on_change = on_change
        self.reporter = reporter or RosterReporter()
        self.clock = clock

    # ── Internal helpers ─────────────────────────────────────────────────────

    def _rejected(self, result: ValidationResult) -> bool:
        for v in result.warnings:
            logger.warning("%s", v.message)
        if result.blocked:
            for v in result.violations:
                if v.level == ViolationLevel.BLOCK:
                    logger.error("❌ %s", v.message)
            return True
        return False

    def _environment_ok(self) -> bool:
        if self.roster is None:
            logger.error("❌ No roster available")
            return False
        if self.durations is None or not self.durations.is_configured:
            logger.error(
                "❌ Phase durations (pre / study / intern months) are missing or invalid: %r",
                self.durations,
            )
            return False
        return True

    def _lookup(self, name: str) -> Optional[StudentRecord]:
        record = self.roster.find(name)
        if record is None:
            logger.error("❌ Student %r not found on the roster", name)
            logger.info("📋 Available students: %s", ", ".join(self.roster.names()))
        return record

    def _persist(self) -> bool:
        try:
            self.store.set(self.storage_key, self.roster.to_payload())
        except StorageError as exc:
            logger.warning("⚠️ Could not save roster: %s", exc)
            return False
        logger.info("💾 Roster saved under %r", self.storage_key)
        return True

    def _notify(self) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change()
        except Exception as exc:
            logger.warning("⚠️ Refresh callback failed: %s", exc)
        else:
            logger.debug("🔄 Refresh callback invoked")

    def _after_mutation(self) -> None:
        self._persist()
        self._notify()

    def _snapshot(self) -> list[StudentProgress]:
        today = self.clock()
        return [
            StudentProgress(record=r, view=compute_progress(r, self.durations, today))
            for r in self.roster
        ]

    def _apply_start_date(
        self,
        record: StudentRecord,
        new_start: date,
        target_percentage: Optional[float],
    ) -> ProgressUpdateResult:
        old_start = record.start_date
        record.start_date = new_start
        self._after_mutation()

        view = compute_progress(record, self.durations, self.clock())
        result = ProgressUpdateResult(
            student=record.name,
            old_start_date=old_start,
            new_start_date=new_start,
            target_percentage=target_percentage,
            actual_percentage=view.rounded_percentage,
            current_phase=view.phase,
            total_months=view.total_months,
            months_elapsed=view.elapsed_months,
        )
        logger.info(
            "Start date of %s moved %s → %s (%d%%, %s)",
            record.name, old_start, new_start, result.actual_percentage, view.phase.value,
        )
        self.reporter.progress_updated(result)
        return result

    def _place(
        self,
        record: StudentRecord,
        percentage: float,
        phase: Optional[Phase] = None,
    ) -> ProgressUpdateResult:
        """Move *record*'s start date so today sits at *percentage*, inside *phase*."""
        has_pre = record.has_pre_track
        months_elapsed = percentage / 100.0 * self.durations.total_months(has_pre)
        if phase is None:
            phase = phase_at(months_elapsed, has_pre, self.durations)
        new_start = start_date_for(self.clock(), months_elapsed, phase, has_pre, self.durations)
        return self._apply_start_date(record, new_start, percentage)

    # ── Mutations ────────────────────────────────────────────────────────────

    def set_progress_by_percentage(
        self, name: str, target_percentage: float
    ) -> Optional[ProgressUpdateResult]:
        """Rewrite *name*'s start date so that today shows *target_percentage*."""
        checked_name = check_name(name)
        checked_pct = check_percentage(target_percentage)
        if self._rejected(checked_name) or self._rejected(checked_pct):
            return None
        if not self._environment_ok():
            return None
        record = self._lookup(checked_name.value)
        if record is None:
            return None

        return self._place(record, checked_pct.value)

    def set_start_date(self, name: str, start_date) -> Optional[ProgressUpdateResult]:
        """Overwrite *name*'s start date (date or ISO string)."""
        checked_name = check_name(name)
        checked_date = check_start_date(start_date)
        if self._rejected(checked_name) or self._rejected(checked_date):
            return None
        if not self._environment_ok():
            return None
        record = self._lookup(checked_name.value)
        if record is None:
            return None
        return self._apply_start_date(record, checked_date.value, None)

    def set_phase(
        self, name: str, phase, progress_within_phase: float = 0
    ) -> Optional[ProgressUpdateResult]:
        """Place *name* ``progress_within_phase`` percent of the way into *phase*."""
        checked_name = check_name(name)
        checked_phase = check_phase(phase)
        checked_pct = check_percentage(progress_within_phase, "progress_within_phase")
        for check in (checked_name, checked_phase, checked_pct):
            if self._rejected(check):
                return None
        if not self._environment_ok():
            return None
        record = self._lookup(checked_name.value)
        if record is None:
            return None

        target = percentage_for_phase(
            checked_phase.value, checked_pct.value, record.has_pre_track, self.durations
        )
        if target is None:
            logger.error(
                "❌ %s has no %s phase", record.name, checked_phase.value.value
            )
            return None
        return self._place(record, target, checked_phase.value)

    def set_bulk(self, updates: UpdatesArg) -> list[ProgressUpdateResult]:
        """Apply set_progress_by_percentage per pair; failures are skipped."""
        pairs = list(updates.items()) if isinstance(updates, Mapping) else list(updates)
        results: list[ProgressUpdateResult] = []
        for pair in pairs:
            try:
                name, pct = pair
            except (TypeError, ValueError):
                logger.error("❌ Bulk entry %r is not a (name, percentage) pair", pair)
                continue
            result = self.set_progress_by_percentage(name, pct)
            if result is not None:
                results.append(result)
        self.reporter.bulk_finished(len(results), len(pairs))
        return results

    # ── Queries ──────────────────────────────────────────────────────────────

    def get_progress(self, name: str) -> Optional[StudentProgress]:
        if self._rejected(check_name(name)) or not self._environment_ok():
            return None
        record = self._lookup(name.strip())
        if record is None:
            return None
        row = StudentProgress(record, compute_progress(record, self.durations, self.clock()))
        self.reporter.roster_table([row], title=record.name)
        return row

    def list_all(self) -> list[StudentProgress]:
        """Every student, highest percentage first."""
        if not self._environment_ok():
            return []
        rows = sorted(self._snapshot(), key=lambda r: r.view.percentage, reverse=True)
        self.reporter.roster_table(rows)
        return rows

    def filter_by_phase(self, phase) -> Optional[list[StudentProgress]]:
        checked = check_phase(phase)
        if self._rejected(checked) or not self._environment_ok():
            return None
        rows = [r for r in self._snapshot() if r.view.phase == checked.value]
        self.reporter.roster_table(rows, title=f"Phase: {checked.value.value}")
        return rows

    def filter_by_percentage_range(
        self, min_percentage: float, max_percentage: float
    ) -> Optional[list[StudentProgress]]:
        """Students whose percentage lies in [min, max] inclusive."""
        checked = check_range(min_percentage, max_percentage)
        if self._rejected(checked) or not self._environment_ok():
            return None
        lo, hi = checked.value
        rows = [r for r in self._snapshot() if lo <= r.view.percentage <= hi]
        self.reporter.roster_table(rows, title=f"Progress {lo:g}% – {hi:g}%")
        return rows

    def find_upcoming_transitions(self, within_days: int = 30) -> Optional[list[StudentProgress]]:
        """Students whose next phase starts within (0, within_days] days, soonest first."""
        if isinstance(within_days, bool) or not isinstance(within_days, int) or within_days < 0:
            logger.error("❌ within_days must be a non-negative integer, got %r", within_days)
            return None
        if not self._environment_ok():
            return None
        rows = [
            r for r in self._snapshot()
            if 0 < r.view.days_until_next_phase <= within_days
        ]
        rows.sort(key=lambda r: r.view.days_until_next_phase)
        self.reporter.transitions(rows, within_days)
        return rows

    def phase_summary(self) -> Optional[PhaseSummary]:
        if not self._environment_ok():
            return None
        rows = self._snapshot()
        counts = {phase: 0 for phase in Phase}
        for row in rows:
            counts[row.view.phase] += 1
        mean = sum(r.view.percentage for r in rows) / len(rows) if rows else 0.0
        summary = PhaseSummary(counts=counts, mean_percentage=mean, total_students=len(rows))
        self.reporter.phase_summary(summary)
        return summary

    # ── Persistence ──────────────────────────────────────────────────────────

    def save(self) -> bool:
        return self._persist()

    def load(self) -> bool:
        """Replace the roster with the stored copy when one is present and valid."""
        try:
            payload = self.store.get(self.storage_key)
        except StorageError as exc:
            logger.error("❌ Could not read stored roster: %s", exc)
            return False
        if payload is None:
            logger.info("ℹ️ No stored roster found under %r", self.storage_key)
            return False

        checked = check_roster_payload(payload)
        if self._rejected(checked):
            logger.info("ℹ️ Stored roster ignored; keeping the current roster")
            return False
        self.roster.replace(checked.value)
        self.reporter.roster_loaded(len(self.roster))
        return True

    def reset(self) -> bool:
        """Delete the stored roster; the in-memory roster is left as is."""
        try:
            self.store.delete(self.storage_key)
        except StorageError as exc:
            logger.error("❌ Could not reset stored roster: %s", exc)
            return False
        self.reporter.storage_reset()
        return True

    def import_json(self, text: str) -> bool:
        """Replace the whole roster from a JSON array; nothing changes on failure."""
        if not isinstance(text, (str, bytes, bytearray)):
            logger.error("❌ Import expects JSON text, got %s", type(text).__name__)
            return False
        try:
            payload = json.loads(text)
        except ValueError as exc:
            logger.error("❌ Import is not valid JSON: %s", exc)
            return False

        checked = check_roster_payload(payload)
        if self._rejected(checked):
            return False
        self.roster.replace(checked.value)
        self._after_mutation()
        self.reporter.roster_imported(len(self.roster))
        return True

    def export_json(self) -> str:
        return json.dumps(self.roster.to_payload(), ensure_ascii=False, indent=2)
