"""
Database models for the TutorOps backend.

The models are organized by functionality:
- Tenants, users and role memberships
- Centers and staff assignments
- Students and groups
- Scheduled sessions and their enrollments
- Audit trail
"""

from .audit_log import AuditLog
from .center import Center, StaffCenter
from .session import ClassSession, SessionStudent
from .student import GroupStudent, Student, StudentGroup
from .tenant import Tenant, TenantMembership, User

__all__ = [
    "AuditLog",
    "Center",
    "ClassSession",
    "GroupStudent",
    "SessionStudent",
    "StaffCenter",
    "Student",
    "StudentGroup",
    "Tenant",
    "TenantMembership",
    "User",
]
