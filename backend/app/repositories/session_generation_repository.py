# backend/app/repositories/session_generation_repository.py
"""
SessionGeneration Repository for the TutorOps backend.

Handles the tenant-scoped reads used to validate a generation request
(center, tutor role, tutor/center assignment, student, group, roster) and
the session + enrollment inserts performed on commit.

All lookups filter on tenant_id; an entity from another tenant is
indistinguishable from a missing one.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import RoleName
from ..core.exceptions import RepositoryException
from ..models.center import Center, StaffCenter
from ..models.session import ClassSession, SessionStudent
from ..models.student import GroupStudent, Student, StudentGroup
from ..models.tenant import TenantMembership
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class SessionGenerationRepository(BaseRepository[ClassSession]):
    """Repository for session generation reads and writes."""

    def __init__(self, db: Session):
        """Initialize with ClassSession as the primary model."""
        super().__init__(db, ClassSession)

    # Reference lookups

    def get_center(self, tenant_id: str, center_id: str) -> Optional[Center]:
        try:
            return (
                self.db.query(Center)
                .filter(Center.tenant_id == tenant_id, Center.id == center_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting center {center_id}: {str(e)}")
            raise RepositoryException("Failed to retrieve center") from e

    def has_role(self, tenant_id: str, user_id: str, roles: Sequence[RoleName]) -> bool:
        """Whether the user holds any of the given roles in the tenant."""
        try:
            return (
                self.db.query(TenantMembership.id)
                .filter(
                    TenantMembership.tenant_id == tenant_id,
                    TenantMembership.user_id == user_id,
                    TenantMembership.role.in_([role.value for role in roles]),
                )
                .first()
                is not None
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking roles for user {user_id}: {str(e)}")
            raise RepositoryException("Failed to check membership") from e

    def has_tutor_role(self, tenant_id: str, user_id: str) -> bool:
        return self.has_role(tenant_id, user_id, (RoleName.TUTOR,))

    def is_assigned_to_center(self, tenant_id: str, user_id: str, center_id: str) -> bool:
        try:
            return (
                self.db.query(StaffCenter.id)
                .filter(
                    StaffCenter.tenant_id == tenant_id,
                    StaffCenter.user_id == user_id,
                    StaffCenter.center_id == center_id,
                )
                .first()
                is not None
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking staff assignment for {user_id}: {str(e)}")
            raise RepositoryException("Failed to check center assignment") from e

    def get_student(self, tenant_id: str, student_id: str) -> Optional[Student]:
        try:
            return (
                self.db.query(Student)
                .filter(Student.tenant_id == tenant_id, Student.id == student_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting student {student_id}: {str(e)}")
            raise RepositoryException("Failed to retrieve student") from e

    def get_group(self, tenant_id: str, group_id: str) -> Optional[StudentGroup]:
        try:
            return (
                self.db.query(StudentGroup)
                .filter(StudentGroup.tenant_id == tenant_id, StudentGroup.id == group_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting group {group_id}: {str(e)}")
            raise RepositoryException("Failed to retrieve group") from e

    def get_group_roster(self, tenant_id: str, group_id: str) -> List[str]:
        """Student ids currently enrolled in a group, in a stable order."""
        try:
            rows = (
                self.db.query(GroupStudent.student_id)
                .filter(GroupStudent.tenant_id == tenant_id, GroupStudent.group_id == group_id)
                .order_by(GroupStudent.student_id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading roster for group {group_id}: {str(e)}")
            raise RepositoryException("Failed to load group roster") from e
        return [row.student_id for row in rows]

    # Writes

    def create_session_with_roster(
        self, tenant_id: str, booking_data: Dict[str, Any], student_ids: Sequence[str]
    ) -> ClassSession:
        """
        Insert one session and its enrollments.

        Note: Does NOT commit. IntegrityError propagates untouched so the
        caller can tell a uniqueness race apart from other failures.
        """
        try:
            session = self.create(tenant_id=tenant_id, **booking_data)

            if student_ids:
                self.db.add_all(
                    [
                        SessionStudent(
                            tenant_id=tenant_id, session_id=session.id, student_id=student_id
                        )
                        for student_id in student_ids
                    ]
                )
                self.db.flush()
            return session
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating session: {str(e)}")
            raise RepositoryException("Failed to create session") from e
