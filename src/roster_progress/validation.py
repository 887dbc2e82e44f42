"""
validation.py – Input guardrails for roster operations
=======================================================
Every mutating or filtering operation on the roster runs its inputs through
these checks before touching any state.  A check never raises; it returns a
ValidationResult the caller inspects.

Levels
------
BLOCK   – operation aborts, nothing is mutated.
WARN    – operation proceeds; the message is logged.

Checks
------
  check_name(name)                    non-empty string
  check_percentage(value, field)      real number in [0, 100] (bool rejected)
  check_phase(raw)                    recognised Phase name / value
  check_start_date(raw)               date or ISO ``YYYY-MM-DD`` string
  check_range(lo, hi)                 two percentages with lo ≤ hi
  check_roster_payload(payload)       JSON array of unique, valid StudentRecords
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError

from roster_progress.models import Phase, StudentRecord


# ─── Enums & data models ─────────────────────────────────────────────────────

class ViolationLevel(str, Enum):
    BLOCK = "BLOCK"
    WARN  = "WARN"


@dataclass
class Violation:
    level:   ViolationLevel
    message: str
    field:   str = ""   # which input triggered the violation


@dataclass
class ValidationResult:
    violations: list[Violation] = field(default_factory=list)
    value:      Any = None     # normalised input when the check passes

    @property
    def blocked(self) -> bool:
        return any(v.level == ViolationLevel.BLOCK for v in self.violations)

    @property
    def passed(self) -> bool:
        return not self.blocked

    @property
    def warnings(self) -> list[Violation]:
        return [v for v in self.violations if v.level == ViolationLevel.WARN]

    def summary(self) -> str:
        if not self.violations:
            return "✅ All checks passed."
        return "\n".join(
            f"{'🚫' if v.level == ViolationLevel.BLOCK else '⚠️'} {v.message}"
            for v in self.violations
        )

    def block(self, message: str, field_name: str = "") -> "ValidationResult":
        self.violations.append(Violation(ViolationLevel.BLOCK, message, field_name))
        return self

    def warn(self, message: str, field_name: str = "") -> "ValidationResult":
        self.violations.append(Violation(ViolationLevel.WARN, message, field_name))
        return self


# ─── Checks ──────────────────────────────────────────────────────────────────

def check_name(name: Any) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(name, str) or not name.strip():
        return result.block("Invalid student name", "name")
    result.value = name.strip()
    return result


def check_percentage(value: Any, field_name: str = "percentage") -> ValidationResult:
    result = ValidationResult()
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return result.block(f"{field_name} must be a number between 0 and 100", field_name)
    if value != value or not 0 <= value <= 100:   # NaN fails the first test
        return result.block(f"{field_name} must be between 0 and 100, got {value}", field_name)
    result.value = float(value)
    return result


def check_phase(raw: Any) -> ValidationResult:
    result = ValidationResult()
    phase = Phase.parse(raw)
    if phase is None:
        valid = ", ".join(p.value for p in Phase)
        return result.block(f"Unknown phase {raw!r}; expected one of: {valid}", "phase")
    result.value = phase
    return result


def check_start_date(raw: Any) -> ValidationResult:
    result = ValidationResult()
    if isinstance(raw, datetime):
        result.value = raw.date()
        return result
    if isinstance(raw, date):
        result.value = raw
        return result
    if isinstance(raw, str):
        try:
            result.value = date.fromisoformat(raw.strip().split("T", 1)[0])
            return result
        except ValueError:
            pass
    return result.block(f"Invalid start date {raw!r}; expected YYYY-MM-DD", "start_date")


def check_range(lo: Any, hi: Any) -> ValidationResult:
    result = ValidationResult()
    low = check_percentage(lo, "min_percentage")
    high = check_percentage(hi, "max_percentage")
    result.violations.extend(low.violations + high.violations)
    if result.blocked:
        return result
    if low.value > high.value:
        return result.block(
            f"min_percentage {low.value:g} is greater than max_percentage {high.value:g}",
            "min_percentage",
        )
    result.value = (low.value, high.value)
    return result


def check_roster_payload(payload: Any) -> ValidationResult:
    """Validate a decoded roster; on success ``value`` is a list of StudentRecord."""
    result = ValidationResult()
    if not isinstance(payload, list):
        return result.block(
            f"Roster data must be a JSON array, got {type(payload).__name__}", "roster"
        )

    records: list[StudentRecord] = []
    seen: set[str] = set()
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            result.block(f"Entry {index} is not an object", "roster")
            continue
        try:
            record = StudentRecord.model_validate(item)
        except ValidationError as exc:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()
            )
            result.block(f"Entry {index} is invalid ({errors})", "roster")
            continue
        key = record.name.lower()
        if key in seen:
            result.block(f"Duplicate student name {record.name!r}", "roster")
            continue
        seen.add(key)
        records.append(record)

    if not payload:
        result.warn("Roster data is an empty array", "roster")
    if not result.blocked:
        result.value = records
    return result
