# backend/app/repositories/__init__.py
"""
Repository Pattern Implementation for the TutorOps backend.

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: Foundation for all repositories with common lookups/creates
- RepositoryFactory: Factory for creating repository instances
- BookingIndexRepository: Existing sessions keyed by exact start instant
- SessionGenerationRepository: Reference checks, rosters and session inserts
- AuditRepository: Audit trail rows

Usage:
    from app.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_booking_index_repository(db)
    index = repository.load_bookings(tenant_id, start_instants)
"""

from .audit_repository import AuditRepository
from .base_repository import BaseRepository
from .booking_index_repository import BookingIndexRepository
from .factory import RepositoryFactory
from .session_generation_repository import SessionGenerationRepository

__all__ = [
    "AuditRepository",
    "BaseRepository",
    "BookingIndexRepository",
    "RepositoryFactory",
    "SessionGenerationRepository",
]
