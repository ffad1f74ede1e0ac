# backend/app/services/session_generation/types.py
"""
Value objects shared by the session generation pipeline.

Everything here is immutable and free of ORM references so the occurrence
generator and the classifier can be exercised without a database.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, FrozenSet, Optional, Tuple

from ...core.enums import SessionType


@dataclass(frozen=True)
class RecurrenceSpec:
    """
    A weekly recurrence rule for one tutor at one center.

    Exactly one of student_id/group_id is populated: student_id for
    ONE_ON_ONE, group_id for GROUP and CLASS.
    """

    center_id: str
    tutor_id: str
    session_type: SessionType
    start_date: date
    end_date: date
    weekdays: FrozenSet[int]
    start_time: time
    end_time: time
    timezone: str
    student_id: Optional[str] = None
    group_id: Optional[str] = None
    zoom_link: Optional[str] = None


@dataclass(frozen=True)
class Occurrence:
    """One concrete instance of a recurrence rule, as absolute UTC instants."""

    start_at_utc: datetime
    end_at_utc: datetime
    local_date: date


@dataclass(frozen=True)
class ExistingBooking:
    """Snapshot of an already-persisted session sharing a start instant."""

    id: str
    center_id: str
    tutor_id: str
    group_id: Optional[str]
    session_type: SessionType
    student_ids: FrozenSet[str] = field(default_factory=frozenset)


# Exact UTC start instant -> sessions already starting at that instant
ExistingBookingIndex = Dict[datetime, Tuple[ExistingBooking, ...]]


@dataclass(frozen=True)
class Roster:
    """Students enrolled in every session created from one plan."""

    student_ids: Tuple[str, ...] = ()

    @property
    def student_id_set(self) -> FrozenSet[str]:
        return frozenset(self.student_ids)

    def __len__(self) -> int:
        return len(self.student_ids)
