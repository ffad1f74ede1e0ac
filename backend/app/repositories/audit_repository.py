# backend/app/repositories/audit_repository.py
"""
Repository helpers for audit_log persistence and querying.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog
from app.monitoring.prometheus_metrics import prometheus_metrics


class AuditRepository:
    """Persist and query audit trail entries."""

    def __init__(self, db: Session):
        self.db = db

    def write(self, audit: AuditLog) -> None:
        """Persist a new audit row inside the active transaction."""
        self.db.add(audit)
        self.db.flush()
        prometheus_metrics.record_audit_write(audit.entity_type, audit.action, audit.result)

    def list_for_tenant(
        self,
        tenant_id: str,
        *,
        action: Optional[str] = None,
        limit: int = 50,
    ) -> list[AuditLog]:
        """Return a tenant's audit rows, newest first."""
        stmt = select(AuditLog).where(AuditLog.tenant_id == tenant_id)
        if action:
            stmt = stmt.where(AuditLog.action == action)
        stmt = stmt.order_by(AuditLog.occurred_at.desc(), AuditLog.id.desc()).limit(max(0, limit))
        return list(self.db.execute(stmt).scalars().all())
