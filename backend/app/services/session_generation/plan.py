# backend/app/services/session_generation/plan.py
"""
Plan model for batch session generation.

Each candidate occurrence is classified into exactly one PlanLine variant:

    CreateLine          -> will be inserted on commit
    SkipDuplicateLine   -> an identical session already exists
    SkipConflictLine    -> tutor or a rostered student is already booked

Preview returns a SessionGenerationPlan as-is; commit consumes its
CreateLine entries.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from ...core.constants import GENERATION_SAMPLE_LIMIT
from ...core.timezone_utils import to_iso_utc
from .types import Occurrence, Roster


class SkipReason(str, Enum):
    """Why an occurrence will not be created."""

    DUPLICATE_SESSION_EXISTS = "DUPLICATE_SESSION_EXISTS"
    TUTOR_START_COLLISION = "TUTOR_START_COLLISION"
    STUDENT_START_COLLISION = "STUDENT_START_COLLISION"


CONFLICT_REASONS = frozenset({SkipReason.TUTOR_START_COLLISION, SkipReason.STUDENT_START_COLLISION})


@dataclass(frozen=True)
class CreateLine:
    """Occurrence that will become a new session row."""

    occurrence: Occurrence
    booking_data: Dict[str, Any]
    roster: Roster


@dataclass(frozen=True)
class SkipDuplicateLine:
    """Occurrence already materialized as an identical session."""

    occurrence: Occurrence
    reason: SkipReason = SkipReason.DUPLICATE_SESSION_EXISTS


@dataclass(frozen=True)
class SkipConflictLine:
    """Occurrence blocked by another booking at the same instant."""

    occurrence: Occurrence
    reason: SkipReason

    def __post_init__(self) -> None:
        if self.reason not in CONFLICT_REASONS:
            raise ValueError(f"{self.reason} is not a conflict reason")


PlanLine = Union[CreateLine, SkipDuplicateLine, SkipConflictLine]


@dataclass(frozen=True)
class PlanSample:
    """Display entry for a skipped occurrence."""

    date: str
    reason: SkipReason

    def to_dict(self) -> Dict[str, str]:
        return {"date": self.date, "reason": self.reason.value}


def _sample_lines(lines: List[PlanLine], limit: int) -> List[PlanSample]:
    return [
        PlanSample(date=to_iso_utc(line.occurrence.start_at_utc), reason=line.reason)
        for line in lines[:limit]
        if not isinstance(line, CreateLine)
    ]


@dataclass(frozen=True)
class SessionGenerationPlan:
    """Full classification of every candidate occurrence for one request."""

    lines: Tuple[PlanLine, ...]
    range_from: datetime
    range_to: datetime
    zoom_link_applied: bool
    sample_limit: int = GENERATION_SAMPLE_LIMIT

    @property
    def create_lines(self) -> List[CreateLine]:
        return [line for line in self.lines if isinstance(line, CreateLine)]

    @property
    def duplicate_lines(self) -> List[SkipDuplicateLine]:
        return [line for line in self.lines if isinstance(line, SkipDuplicateLine)]

    @property
    def conflict_lines(self) -> List[SkipConflictLine]:
        return [line for line in self.lines if isinstance(line, SkipConflictLine)]

    @property
    def would_create_count(self) -> int:
        return len(self.create_lines)

    @property
    def would_skip_duplicate_count(self) -> int:
        return len(self.duplicate_lines)

    @property
    def would_conflict_count(self) -> int:
        return len(self.conflict_lines)

    @property
    def duplicate_samples(self) -> List[PlanSample]:
        return _sample_lines(list(self.duplicate_lines), self.sample_limit)

    @property
    def conflict_samples(self) -> List[PlanSample]:
        return _sample_lines(list(self.conflict_lines), self.sample_limit)

    def summary(self) -> Dict[str, Any]:
        """Counts only, for log lines and audit metadata."""
        return {
            "would_create": self.would_create_count,
            "would_skip_duplicate": self.would_skip_duplicate_count,
            "would_conflict": self.would_conflict_count,
        }


@dataclass
class CommitResult:
    """Outcome of executing a plan's CreateLine entries."""

    created_count: int = 0
    plan_duplicate_count: int = 0
    drift_duplicate_count: int = 0
    conflict_count: int = 0
    created_sample_ids: List[str] = field(default_factory=list)
    range_from: Optional[datetime] = None
    range_to: Optional[datetime] = None

    @property
    def skipped_duplicate_count(self) -> int:
        """Plan-time duplicates plus duplicates discovered at write time."""
        return self.plan_duplicate_count + self.drift_duplicate_count
