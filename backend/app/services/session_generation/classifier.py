# backend/app/services/session_generation/classifier.py
"""
Conflict classifier.

Decides, for a single occurrence, whether it becomes a new session or is
skipped. Checks run in a fixed order and the first match wins:

1. duplicate         -> SkipDuplicateLine
2. tutor collision   -> SkipConflictLine(TUTOR_START_COLLISION)
3. student collision -> SkipConflictLine(STUDENT_START_COLLISION)
4. otherwise         -> CreateLine

Duplicates are checked first so that re-running an already generated range
reports "nothing to do" instead of colliding with its own sessions.
"""

from typing import Any, Dict, Tuple

from ...core.enums import SessionType
from .plan import CreateLine, PlanLine, SkipConflictLine, SkipDuplicateLine, SkipReason
from .types import ExistingBooking, ExistingBookingIndex, Occurrence, RecurrenceSpec, Roster


def is_duplicate(booking: ExistingBooking, spec: RecurrenceSpec) -> bool:
    """Whether an existing booking has the same identity as the proposed one."""
    if (
        booking.center_id != spec.center_id
        or booking.tutor_id != spec.tutor_id
        or booking.session_type != spec.session_type
    ):
        return False

    if spec.session_type == SessionType.ONE_ON_ONE:
        return spec.student_id is not None and spec.student_id in booking.student_ids

    return booking.group_id is not None and booking.group_id == spec.group_id


def build_booking_data(
    occurrence: Occurrence, spec: RecurrenceSpec, zoom_link: Any = None
) -> Dict[str, Any]:
    """Column values for the session row created from an occurrence."""
    return {
        "center_id": spec.center_id,
        "tutor_id": spec.tutor_id,
        "session_type": spec.session_type.value,
        "group_id": spec.group_id if spec.session_type.uses_group else None,
        "start_at": occurrence.start_at_utc,
        "end_at": occurrence.end_at_utc,
        "timezone": spec.timezone,
        "zoom_link": zoom_link,
    }


def classify(
    occurrence: Occurrence,
    spec: RecurrenceSpec,
    roster: Roster,
    index: ExistingBookingIndex,
    zoom_link: Any = None,
) -> PlanLine:
    """
    Classify one occurrence against the bookings starting at the same instant.

    Args:
        occurrence: Proposed occurrence
        spec: Recurrence the occurrence came from
        roster: Students that would be enrolled
        index: Existing bookings keyed by UTC start
        zoom_link: Normalized meeting link carried into the booking data

    Returns:
        Exactly one PlanLine variant
    """
    bookings: Tuple[ExistingBooking, ...] = index.get(occurrence.start_at_utc, ())

    if any(is_duplicate(booking, spec) for booking in bookings):
        return SkipDuplicateLine(occurrence=occurrence)

    if any(booking.tutor_id == spec.tutor_id for booking in bookings):
        return SkipConflictLine(occurrence=occurrence, reason=SkipReason.TUTOR_START_COLLISION)

    roster_ids = roster.student_id_set
    if roster_ids and any(booking.student_ids & roster_ids for booking in bookings):
        return SkipConflictLine(occurrence=occurrence, reason=SkipReason.STUDENT_START_COLLISION)

    return CreateLine(
        occurrence=occurrence,
        booking_data=build_booking_data(occurrence, spec, zoom_link),
        roster=roster,
    )
