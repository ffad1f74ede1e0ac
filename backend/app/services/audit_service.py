"""Service for creating tenant audit log entries."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
import logging
from typing import Any, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.enums import AuditResult
from app.core.request_context import get_request_id
from app.models.audit_log import AuditLog
from app.repositories.factory import RepositoryFactory

logger = logging.getLogger(__name__)

SESSIONS_GENERATED = "SESSIONS_GENERATED"
SESSION_ENTITY = "SESSION"


class AuditService:
    """Create and persist audit log entries."""

    def __init__(self, db: Session):
        self.db = db
        self.repository = RepositoryFactory.create_audit_repository(db)

    def log(
        self,
        action: str,
        entity_type: str,
        *,
        tenant_id: str,
        actor_id: str | None,
        result: AuditResult,
        entity_id: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> AuditLog:
        """Create an audit log entry and commit it."""
        payload = _sanitize_metadata(dict(metadata) if metadata else {})
        request_id = get_request_id()
        if request_id and "request_id" not in payload:
            payload["request_id"] = request_id

        entry = AuditLog.from_event(
            tenant_id=tenant_id,
            actor_id=actor_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            result=result.value,
            metadata=payload,
        )
        self.repository.write(entry)
        self.db.commit()
        return entry

    def try_log(self, action: str, entity_type: str, **kwargs: Any) -> AuditLog | None:
        """
        Same as log(), but a failed write is logged and swallowed.

        Used after the audited operation has already finished, where an audit
        failure must not change the response.
        """
        try:
            return self.log(action, entity_type, **kwargs)
        except SQLAlchemyError as exc:
            logger.error("Failed to write audit entry %s/%s: %s", entity_type, action, exc)
            self.db.rollback()
            return None


def _sanitize_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    return {str(key): _to_json_value(value) for key, value in metadata.items()}


def _to_json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): _to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_json_value(v) for v in value]
    return value
