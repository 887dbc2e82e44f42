"""
Data models for the student roster progress tracker.

Stored data is a list of StudentRecord objects; everything else in this
module (ProgressView, StudentProgress, ProgressUpdateResult) is derived on
demand and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# ─── Enumerations ────────────────────────────────────────────────────────────

class Phase(str, Enum):
    """Programme phases, declared in programme order."""
    PRE_TRACK  = "Pre-Track"   # optional preparatory phase
    STUDY      = "Study"
    INTERNSHIP = "Internship"
    COMPLETED  = "Completed"   # terminal state

    @property
    def rank(self) -> int:
        return list(Phase).index(self)

    @classmethod
    def parse(cls, raw) -> Optional["Phase"]:
        """Tolerant lookup by member name or value; None when nothing matches."""
        if isinstance(raw, Phase):
            return raw
        if raw is None:
            return None
        key = str(raw).strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        if not key:
            return None
        for member in cls:
            if key in (
                member.name.lower().replace("_", ""),
                member.value.lower().replace("-", ""),
            ):
                return member
        return None


# ─── Phase durations ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PhaseDurations:
    """Length of each phase in months; process-wide, fixed at startup."""
    pre_months:    float
    study_months:  float
    intern_months: float

    def total_months(self, has_pre_track: bool) -> float:
        if has_pre_track:
            return self.pre_months + self.study_months + self.intern_months
        return self.study_months + self.intern_months

    @property
    def is_configured(self) -> bool:
        """True when no duration is negative and both programme variants have length."""
        values = (self.pre_months, self.study_months, self.intern_months)
        return (
            all(v >= 0 for v in values)
            and self.total_months(True) > 0
            and self.total_months(False) > 0
        )

    def boundaries(self, has_pre_track: bool) -> list[tuple[Phase, float, float]]:
        """(phase, start_offset, end_offset) in months from the start date.

        Pre-Track collapses to zero width when the student skips it.
        """
        pre = self.pre_months if has_pre_track else 0.0
        study_end = pre + self.study_months
        return [
            (Phase.PRE_TRACK,  0.0,       pre),
            (Phase.STUDY,      pre,       study_end),
            (Phase.INTERNSHIP, study_end, study_end + self.intern_months),
        ]


# ─── Stored record ───────────────────────────────────────────────────────────

class StudentRecord(BaseModel):
    """
    One student on the roster.

    Import accepts the legacy Dutch keys and camelCase keys as well as the
    canonical snake_case names; serialisation always uses snake_case.
    """
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    name: str = Field(
        min_length=1,
        validation_alias=AliasChoices("name", "naam"),
    )
    start_date: date = Field(
        validation_alias=AliasChoices("start_date", "startDate", "startdatum"),
    )
    has_pre_track: bool = Field(
        default=False,
        validation_alias=AliasChoices("has_pre_track", "hasPreTrack", "heeftVoortraject"),
    )

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("start_date", mode="before")
    @classmethod
    def _date_only(cls, v):
        # Browser exports carry full ISO timestamps; only the date part matters.
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    def matches(self, name: str) -> bool:
        return self.name.lower() == name.strip().lower()


# ─── Derived views ───────────────────────────────────────────────────────────

@dataclass
class ProgressView:
    """Computed progress for one student at one instant."""
    percentage:            float           # 0–100, clamped
    phase:                 Phase
    total_months:          float
    elapsed_months:        float           # clamped to [0, total_months]
    forecast_end_date:     date
    next_phase_date:       date            # forecast end date once Completed
    days_until_next_phase: int             # ≤ 0 once Completed

    @property
    def rounded_percentage(self) -> int:
        return round(self.percentage)


@dataclass
class StudentProgress:
    """A record paired with its computed view, as returned by roster queries."""
    record: StudentRecord
    view:   ProgressView

    @property
    def name(self) -> str:
        return self.record.name


@dataclass
class ProgressUpdateResult:
    """Outcome of a successful progress or start-date override."""
    student:           str
    old_start_date:    date
    new_start_date:    date
    target_percentage: Optional[float]     # None for a direct start-date overwrite
    actual_percentage: int
    current_phase:     Phase
    total_months:      float
    months_elapsed:    float
    success:           bool = True


@dataclass
class PhaseSummary:
    """Head-count per phase plus the mean completion percentage."""
    counts:          dict[Phase, int]
    mean_percentage: float
    total_students:  int
