"""
Timezone utilities for the TutorOps backend.

Rules:
- All storage: UTC
- All comparisons: UTC
- Local wall-clock times are resolved with the zone rules valid on that date
"""

from datetime import date, datetime, time, timezone
from typing import Optional

import pytz


def resolve_timezone(tz_name: str) -> pytz.BaseTzInfo:
    """
    Resolve an IANA zone name.

    Raises:
        pytz.UnknownTimeZoneError: If the name is not a known zone
    """
    return pytz.timezone(tz_name)


def localize_wall_time(local_date: date, wall_time: time, tz: pytz.BaseTzInfo) -> Optional[datetime]:
    """
    Convert a local date + wall-clock time to a UTC instant.

    Uses the offset in force on local_date, so the same wall time maps to
    different UTC instants on either side of a DST transition.

    Returns:
        UTC datetime, or None when the wall time does not exist on that date
        (spring-forward gap). Ambiguous wall times (fall-back overlap) resolve
        to the first occurrence.
    """
    naive_dt = datetime.combine(
        local_date, wall_time
    )  # utc-naive-ok: Intentionally naive for pytz.localize()

    try:
        # is_dst=None raises exception for ambiguous/nonexistent times
        local_dt = tz.localize(naive_dt, is_dst=None)
    except pytz.exceptions.AmbiguousTimeError:
        # Fall back (time exists twice) - use first occurrence
        local_dt = tz.localize(naive_dt, is_dst=True)
    except pytz.exceptions.NonExistentTimeError:
        return None

    return local_dt.astimezone(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to an aware UTC datetime.

    Naive values are assumed to already be UTC (SQLite returns naive
    timestamps for timezone-aware columns).
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso_utc(dt: datetime) -> str:
    """Render an instant as an ISO-8601 UTC string with a trailing Z."""
    return ensure_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")
