# backend/app/models/student.py
"""Students and the groups/classes they are enrolled in."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.enums import StudentStatus
from ..core.ulid_helper import generate_ulid
from ..database import Base


class Student(Base):
    """A learner belonging to one tenant."""

    __tablename__ = "students"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default=StudentStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("ix_students_tenant_last_name", "tenant_id", "last_name"),)

    def __repr__(self) -> str:
        return f"<Student {self.id}: {self.first_name} {self.last_name}>"


class StudentGroup(Base):
    """
    A standing group or class of students attached to one center.

    The group type (GROUP or CLASS) must match the session type used when
    generating sessions for it.
    """

    __tablename__ = "groups"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    center_id = Column(String(26), ForeignKey("centers.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    type = Column(String(10), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    capacity = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship("GroupStudent", back_populates="group", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("type IN ('GROUP', 'CLASS')", name="ck_groups_type"),
        Index("ix_groups_tenant_center", "tenant_id", "center_id"),
    )

    def __repr__(self) -> str:
        return f"<StudentGroup {self.id}: {self.name} ({self.type})>"


class GroupStudent(Base):
    """Membership of a student in a group."""

    __tablename__ = "group_students"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    group_id = Column(String(26), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(String(26), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)

    group = relationship("StudentGroup", back_populates="members")

    __table_args__ = (
        UniqueConstraint("tenant_id", "group_id", "student_id", name="uq_group_students_tenant_group_student"),
        Index("ix_group_students_tenant_group", "tenant_id", "group_id"),
    )
