# backend/app/models/tenant.py
"""
Tenant, user, and membership models.

Every tutoring organization is a tenant. Users are global; what they may do
inside a tenant is decided by their TenantMembership rows.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Tenant(Base):
    """A tutoring organization."""

    __tablename__ = "tenants"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    slug = Column(String(64), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<Tenant {self.slug}>"


class User(Base):
    """A person who can sign in (staff or parent)."""

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    memberships = relationship("TenantMembership", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email}>"


class TenantMembership(Base):
    """Role held by a user inside one tenant."""

    __tablename__ = "tenant_memberships"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(26), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("tenant_id", "user_id", "role", name="uq_tenant_memberships_tenant_user_role"),
        Index("ix_tenant_memberships_tenant_user", "tenant_id", "user_id"),
    )
