# backend/app/repositories/factory.py
"""
Repository Factory for the TutorOps backend.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .audit_repository import AuditRepository
    from .booking_index_repository import BookingIndexRepository
    from .session_generation_repository import SessionGenerationRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_booking_index_repository(db: Session) -> "BookingIndexRepository":
        """Create repository for loading sessions by start instant."""
        from .booking_index_repository import BookingIndexRepository

        return BookingIndexRepository(db)

    @staticmethod
    def create_session_generation_repository(db: Session) -> "SessionGenerationRepository":
        """Create repository for generation lookups and inserts."""
        from .session_generation_repository import SessionGenerationRepository

        return SessionGenerationRepository(db)

    @staticmethod
    def create_audit_repository(db: Session) -> "AuditRepository":
        """Create repository for audit trail rows."""
        from .audit_repository import AuditRepository

        return AuditRepository(db)
