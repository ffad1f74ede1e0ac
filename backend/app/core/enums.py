# backend/app/core/enums.py
"""
Core enums for the TutorOps backend.

Values match the persisted strings so they can be compared directly
against database columns.
"""

from enum import Enum


class RoleName(str, Enum):
    """Tenant membership roles."""

    OWNER = "Owner"
    ADMIN = "Admin"
    TUTOR = "Tutor"
    PARENT = "Parent"


# Roles allowed to run administrative operations such as session generation
ADMIN_ROLES = (RoleName.OWNER, RoleName.ADMIN)


class SessionType(str, Enum):
    """Kind of scheduled session."""

    ONE_ON_ONE = "ONE_ON_ONE"
    GROUP = "GROUP"
    CLASS = "CLASS"

    @property
    def uses_group(self) -> bool:
        return self is not SessionType.ONE_ON_ONE


class GroupType(str, Enum):
    """Kind of student group."""

    GROUP = "GROUP"
    CLASS = "CLASS"


class StudentStatus(str, Enum):
    """Student lifecycle statuses."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ARCHIVED = "ARCHIVED"


class AuditResult(str, Enum):
    """Outcome recorded on audit entries."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
