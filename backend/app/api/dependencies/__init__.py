"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .database import get_db
from .services import get_audit_service, get_session_generation_service
from .tenant import TenantContext, require_tenant_admin

__all__ = [
    # Database
    "get_db",
    # Services
    "get_audit_service",
    "get_session_generation_service",
    # Tenant context
    "TenantContext",
    "require_tenant_admin",
]
