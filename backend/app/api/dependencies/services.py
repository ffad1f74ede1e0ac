# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.audit_service import AuditService
from ...services.session_generation.service import SessionGenerationService
from .database import get_db


def get_session_generation_service(db: Session = Depends(get_db)) -> SessionGenerationService:
    """
    Get session generation service instance.

    Args:
        db: Database session

    Returns:
        SessionGenerationService instance
    """
    return SessionGenerationService(db)


def get_audit_service(db: Session = Depends(get_db)) -> AuditService:
    """Provide audit service instance for dependency injection."""
    return AuditService(db)
