# backend/app/services/session_generation/occurrences.py
"""
Occurrence generator for weekly recurrence rules.

Pure code: no database, no clock. Each matching local calendar date is
combined with the requested wall-clock window and resolved to UTC using the
zone rules in force on that date.

DST handling:
- A wall time that does not exist (spring-forward gap) skips that date.
- A wall time that exists twice (fall-back overlap) uses the first instant.
"""

from datetime import date, datetime, time, timedelta, timezone
import logging
from typing import List, Tuple

import pytz

from ...core.constants import (
    MAX_GENERATION_DATE,
    MAX_WEEKDAY,
    MIN_GENERATION_DATE,
    MIN_WEEKDAY,
)
from ...core.exceptions import InvalidRecurrenceError
from ...core.timezone_utils import localize_wall_time, resolve_timezone
from .types import Occurrence, RecurrenceSpec

logger = logging.getLogger(__name__)


def validate_recurrence(spec: RecurrenceSpec) -> pytz.BaseTzInfo:
    """
    Check the structural rules of a recurrence and resolve its zone.

    Raises:
        InvalidRecurrenceError: If the rule cannot produce occurrences
    """
    try:
        tz = resolve_timezone(spec.timezone)
    except pytz.UnknownTimeZoneError:
        raise InvalidRecurrenceError("Invalid timezone", details={"field": "timezone"})

    if spec.end_time <= spec.start_time:
        raise InvalidRecurrenceError(
            "End time must be after start time", details={"field": "endTime"}
        )

    if not spec.weekdays:
        raise InvalidRecurrenceError(
            "At least one weekday is required", details={"field": "weekdays"}
        )

    invalid_days = sorted(d for d in spec.weekdays if d < MIN_WEEKDAY or d > MAX_WEEKDAY)
    if invalid_days:
        raise InvalidRecurrenceError(
            "Weekdays must be between 1 (Monday) and 7 (Sunday)",
            details={"field": "weekdays", "invalid": invalid_days},
        )

    if spec.end_date < spec.start_date:
        raise InvalidRecurrenceError(
            "End date must be on or after start date", details={"field": "endDate"}
        )

    if spec.start_date < MIN_GENERATION_DATE:
        raise InvalidRecurrenceError(
            f"Start date must be on or after {MIN_GENERATION_DATE.isoformat()}",
            details={"field": "startDate"},
        )

    if spec.end_date > MAX_GENERATION_DATE:
        raise InvalidRecurrenceError(
            f"End date must be on or before {MAX_GENERATION_DATE.isoformat()}",
            details={"field": "endDate"},
        )

    return tz


def generate_occurrences(spec: RecurrenceSpec) -> List[Occurrence]:
    """
    Expand a recurrence into ascending UTC occurrences.

    Args:
        spec: Weekly recurrence rule

    Returns:
        Occurrences ordered by local date

    Raises:
        InvalidRecurrenceError: Unknown timezone, empty or out-of-range
            weekdays, inverted time window, inverted date range or dates
            outside the supported calendar range
    """
    tz = validate_recurrence(spec)

    occurrences: List[Occurrence] = []
    current = spec.start_date
    while current <= spec.end_date:
        if current.isoweekday() in spec.weekdays:
            start_at = localize_wall_time(current, spec.start_time, tz)
            end_at = localize_wall_time(current, spec.end_time, tz)
            if start_at is None or end_at is None:
                logger.info(
                    "Skipping %s: %s-%s does not exist in %s (DST gap)",
                    current.isoformat(),
                    spec.start_time.strftime("%H:%M"),
                    spec.end_time.strftime("%H:%M"),
                    spec.timezone,
                )
            elif end_at <= start_at:
                logger.info(
                    "Skipping %s: %s-%s is not a positive window in %s",
                    current.isoformat(),
                    spec.start_time.strftime("%H:%M"),
                    spec.end_time.strftime("%H:%M"),
                    spec.timezone,
                )
            else:
                occurrences.append(
                    Occurrence(start_at_utc=start_at, end_at_utc=end_at, local_date=current)
                )
        current += timedelta(days=1)

    return occurrences


def _window_bound(local_date: date, wall_time: time, tz: pytz.BaseTzInfo) -> datetime:
    naive = datetime.combine(local_date, wall_time)  # utc-naive-ok: localized below
    # A bool is_dst never raises, even inside a gap
    return tz.localize(naive, is_dst=True).astimezone(timezone.utc)


def resolve_range(spec: RecurrenceSpec, occurrences: List[Occurrence]) -> Tuple[datetime, datetime]:
    """
    UTC range covered by a plan.

    First start to last end when anything was generated, otherwise the
    requested window (start date at start time through end date at end time).
    """
    if occurrences:
        return occurrences[0].start_at_utc, occurrences[-1].end_at_utc

    tz = resolve_timezone(spec.timezone)
    return (
        _window_bound(spec.start_date, spec.start_time, tz),
        _window_bound(spec.end_date, spec.end_time, tz),
    )
