# backend/app/models/center.py
"""Tutoring centers and the staff assigned to them."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Center(Base):
    """A physical or virtual location that runs sessions."""

    __tablename__ = "centers"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    timezone = Column(String(64), nullable=False, default="America/Edmonton")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("ix_centers_tenant", "tenant_id"),)

    def __repr__(self) -> str:
        return f"<Center {self.id}: {self.name}>"


class StaffCenter(Base):
    """Assignment of a staff user (typically a tutor) to a center."""

    __tablename__ = "staff_centers"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    center_id = Column(String(26), ForeignKey("centers.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "user_id", "center_id", name="uq_staff_centers_tenant_user_center"),
    )
