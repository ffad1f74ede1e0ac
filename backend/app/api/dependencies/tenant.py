# backend/app/api/dependencies/tenant.py
"""
Tenant and actor resolution for administrative routes.

Authentication itself happens upstream; by the time a request reaches the
API the gateway has set X-Tenant-ID and X-Actor-ID. This dependency turns
those headers into a TenantContext and enforces the Owner/Admin role.
"""

from dataclasses import dataclass
import logging
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from ...core.constants import ACTOR_HEADER, TENANT_HEADER
from ...core.enums import ADMIN_ROLES
from ...core.exceptions import ForbiddenException, UnauthorizedException
from ...repositories import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantContext:
    """Validated tenant scope and acting administrator."""

    tenant_id: str
    actor_id: str


def require_tenant_admin(
    tenant_id: Optional[str] = Header(default=None, alias=TENANT_HEADER),
    actor_id: Optional[str] = Header(default=None, alias=ACTOR_HEADER),
    db: Session = Depends(get_db),
) -> TenantContext:
    """
    Resolve the tenant context and require an Owner or Admin membership.

    Raises:
        HTTPException: 401 when either header is missing, 403 when the actor
            is not an administrator of the tenant
    """
    tenant_id = (tenant_id or "").strip()
    actor_id = (actor_id or "").strip()
    if not tenant_id or not actor_id:
        raise UnauthorizedException(
            "Tenant and actor are required", code="UNAUTHORIZED"
        ).to_http_exception()

    repository = RepositoryFactory.create_session_generation_repository(db)
    if not repository.has_role(tenant_id, actor_id, ADMIN_ROLES):
        logger.info("Actor %s denied admin access to tenant %s", actor_id, tenant_id)
        raise ForbiddenException(
            "Administrator role required", code="FORBIDDEN"
        ).to_http_exception()

    return TenantContext(tenant_id=tenant_id, actor_id=actor_id)
