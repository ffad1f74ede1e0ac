# backend/app/repositories/booking_index_repository.py
"""
Booking index loader for session generation.

Fetches the sessions that start at exactly the instants a recurrence would
produce, and returns them as immutable snapshots keyed by UTC start. One
bounded query per call; never scans a tenant's full schedule.
"""

from collections import defaultdict
from datetime import datetime
import logging
from typing import Dict, Iterable, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.enums import SessionType
from ..core.exceptions import RepositoryException
from ..core.timezone_utils import ensure_utc
from ..models.session import ClassSession
from ..services.session_generation.types import ExistingBooking, ExistingBookingIndex
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingIndexRepository(BaseRepository[ClassSession]):
    """Read-only access to sessions by exact start instant."""

    def __init__(self, db: Session):
        super().__init__(db, ClassSession)

    def load_bookings(
        self, tenant_id: str, start_instants: Iterable[datetime]
    ) -> ExistingBookingIndex:
        """
        Load existing sessions starting at any of the given instants.

        Args:
            tenant_id: Tenant scope
            start_instants: UTC start instants of proposed occurrences

        Returns:
            Mapping of UTC start -> bookings at that instant (empty when no
            instants were supplied)
        """
        instants = sorted({ensure_utc(instant) for instant in start_instants})
        if not instants:
            return {}

        try:
            rows: List[ClassSession] = (
                self.db.query(ClassSession)
                .options(selectinload(ClassSession.students))
                .filter(
                    ClassSession.tenant_id == tenant_id,
                    ClassSession.start_at.in_(instants),
                )
                .order_by(ClassSession.start_at, ClassSession.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading booking index for tenant {tenant_id}: {str(e)}")
            raise RepositoryException("Failed to load existing sessions") from e

        grouped: Dict[datetime, List[ExistingBooking]] = defaultdict(list)
        for row in rows:
            grouped[ensure_utc(row.start_at)].append(_snapshot(row))

        logger.debug(
            "Loaded %d existing sessions across %d of %d instants",
            len(rows),
            len(grouped),
            len(instants),
        )
        return {start: tuple(bookings) for start, bookings in grouped.items()}


def _snapshot(row: ClassSession) -> ExistingBooking:
    return ExistingBooking(
        id=row.id,
        center_id=row.center_id,
        tutor_id=row.tutor_id,
        group_id=row.group_id,
        session_type=SessionType(row.session_type),
        student_ids=row.student_ids,
    )

