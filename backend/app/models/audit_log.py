# backend/app/models/audit_log.py
"""
Audit logging model to capture administrative actions for key entities.

Rows are written by request handlers after an administrative operation
finishes; the metadata payload holds counts and error codes only.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy import Column, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from ..core.ulid_helper import generate_ulid
from ..database import Base


def _now_utc() -> datetime:
    """Return timezone-aware UTC timestamp for defaults."""
    return datetime.now(timezone.utc)


class AuditLog(Base):
    """Persistence model for audit trail entries."""

    __tablename__ = "audit_log"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(26), nullable=False)
    actor_id = Column(String(26), nullable=True)
    action = Column(String(50), nullable=False)
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(String(64), nullable=True)
    result = Column(String(10), nullable=False)
    # "metadata" is reserved on declarative classes
    event_metadata = Column(
        "metadata",
        JSONB(astext_type=Text()).with_variant(JSON(), "sqlite"),
        nullable=True,
    )
    occurred_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_now_utc,
        server_default=func.now(),
    )

    __table_args__ = (Index("ix_audit_log_tenant_occurred", "tenant_id", "occurred_at"),)

    @classmethod
    def from_event(
        cls,
        *,
        tenant_id: str,
        actor_id: str | None,
        action: str,
        entity_type: str,
        entity_id: str | None,
        result: str,
        metadata: Mapping[str, Any] | None = None,
    ) -> "AuditLog":
        """Factory helper to build an AuditLog row from event fields."""
        return cls(
            tenant_id=tenant_id,
            actor_id=actor_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            result=result,
            event_metadata=dict(metadata) if metadata is not None else None,
        )
