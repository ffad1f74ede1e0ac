# backend/app/models/session.py
"""
Scheduled session model.

A session is one concrete meeting: a tutor, a center, an absolute UTC
start/end and the students enrolled in it. Sessions are stored by absolute
instant; the IANA zone they were planned in is kept for display.

Uniqueness: a tutor can have at most one session per center starting at the
same instant (uq_sessions_tenant_tutor_center_start). Concurrent batch
generation relies on this constraint to detect rows created by another
request after a plan was built.
"""

from datetime import datetime, timezone
import logging

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)

SESSION_START_UNIQUE_CONSTRAINT = "uq_sessions_tenant_tutor_center_start"
SESSION_STUDENT_UNIQUE_CONSTRAINT = "uq_session_students_tenant_session_student"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class ClassSession(Base):
    """A scheduled tutoring session (one-on-one, group or class)."""

    __tablename__ = "sessions"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    center_id = Column(String(26), ForeignKey("centers.id", ondelete="CASCADE"), nullable=False)
    tutor_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    session_type = Column(String(20), nullable=False)
    group_id = Column(String(26), ForeignKey("groups.id", ondelete="SET NULL"), nullable=True)

    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=False)
    timezone = Column(String(64), nullable=False)
    zoom_link = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc, onupdate=_now_utc)

    students = relationship(
        "SessionStudent",
        back_populates="session",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "tutor_id", "center_id", "start_at", name=SESSION_START_UNIQUE_CONSTRAINT
        ),
        CheckConstraint(
            "session_type IN ('ONE_ON_ONE', 'GROUP', 'CLASS')", name="ck_sessions_session_type"
        ),
        CheckConstraint("end_at > start_at", name="ck_sessions_time_order"),
        Index("ix_sessions_tenant_start", "tenant_id", "start_at"),
        Index("ix_sessions_tenant_center_start", "tenant_id", "center_id", "start_at"),
        Index("ix_sessions_tenant_tutor_start", "tenant_id", "tutor_id", "start_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<ClassSession {self.id}: tutor={self.tutor_id}, center={self.center_id}, "
            f"type={self.session_type}, start={self.start_at}>"
        )

    @property
    def student_ids(self) -> frozenset[str]:
        return frozenset(link.student_id for link in self.students)


class SessionStudent(Base):
    """Enrollment of one student in one session."""

    __tablename__ = "session_students"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    session_id = Column(String(26), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(String(26), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc, server_default=func.now())

    session = relationship("ClassSession", back_populates="students")

    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "session_id", "student_id", name=SESSION_STUDENT_UNIQUE_CONSTRAINT
        ),
        Index("ix_session_students_tenant_session", "tenant_id", "session_id"),
        Index("ix_session_students_tenant_student", "tenant_id", "student_id"),
    )
