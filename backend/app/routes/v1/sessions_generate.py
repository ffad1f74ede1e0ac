# backend/app/routes/v1/sessions_generate.py
"""
Session generation routes - API v1

Versioned endpoints under /api/v1/sessions/generate.
Both endpoints take the same body and share one plan builder; only the
commit endpoint writes.

Endpoints:
    POST /preview → Dry-run: counts, samples and range, no writes
    POST /        → Generate sessions, audit the outcome

The body is parsed here rather than by FastAPI so that malformed JSON and
schema violations answer 400 like every other input error on these routes.
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError

from ...api.dependencies.services import get_audit_service, get_session_generation_service
from ...api.dependencies.tenant import TenantContext, require_tenant_admin
from ...core.enums import AuditResult
from ...core.exceptions import DomainException, ValidationException
from ...schemas.session_generation import (
    GenerateSessionsCommitResponse,
    GenerateSessionsPreviewResponse,
    GenerateSessionsRequest,
)
from ...services.audit_service import SESSION_ENTITY, SESSIONS_GENERATED, AuditService
from ...services.session_generation.service import SessionGenerationService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["sessions-generate-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


async def _parse_request(request: Request) -> GenerateSessionsRequest:
    body = await request.body()
    try:
        return GenerateSessionsRequest.model_validate_json(body or b"")
    except ValidationError as e:
        raise ValidationException(
            "Invalid request body",
            code="VALIDATION_ERROR",
            details={
                "errors": e.errors(include_url=False, include_context=False, include_input=False)
            },
        )


@router.post(
    "/preview",
    response_model=GenerateSessionsPreviewResponse,
    response_model_by_alias=True,
)
async def preview_generated_sessions(
    request: Request,
    context: TenantContext = Depends(require_tenant_admin),
    service: SessionGenerationService = Depends(get_session_generation_service),
) -> GenerateSessionsPreviewResponse:
    """
    Preview what generating sessions for a weekly recurrence would do.

    Requires an Owner or Admin of the tenant. No writes occur.
    """
    try:
        payload = await _parse_request(request)
        plan = await asyncio.to_thread(
            service.build_plan, payload.to_recurrence_spec(), context.tenant_id, context.actor_id
        )
        return GenerateSessionsPreviewResponse.from_plan(plan)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "",
    response_model=GenerateSessionsCommitResponse,
    response_model_by_alias=True,
)
async def generate_sessions(
    request: Request,
    context: TenantContext = Depends(require_tenant_admin),
    service: SessionGenerationService = Depends(get_session_generation_service),
    audit_service: AuditService = Depends(get_audit_service),
) -> GenerateSessionsCommitResponse:
    """
    Generate sessions for a weekly recurrence.

    Existing identical sessions are skipped as duplicates, sessions blocked
    by another booking of the tutor or a rostered student are skipped as
    conflicts. Sessions created concurrently by another request are counted
    as duplicates.
    """
    try:
        payload = await _parse_request(request)
        plan, result = await asyncio.to_thread(
            service.generate, payload.to_recurrence_spec(), context.tenant_id, context.actor_id
        )
    except DomainException as e:
        await asyncio.to_thread(
            audit_service.try_log,
            SESSIONS_GENERATED,
            SESSION_ENTITY,
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
            result=AuditResult.FAILURE,
            metadata={"error_code": e.code},
        )
        handle_domain_exception(e)
    except Exception as e:
        await asyncio.to_thread(
            audit_service.try_log,
            SESSIONS_GENERATED,
            SESSION_ENTITY,
            tenant_id=context.tenant_id,
            actor_id=context.actor_id,
            result=AuditResult.FAILURE,
            metadata={"error_code": type(e).__name__},
        )
        raise

    await asyncio.to_thread(
        audit_service.try_log,
        SESSIONS_GENERATED,
        SESSION_ENTITY,
        tenant_id=context.tenant_id,
        actor_id=context.actor_id,
        result=AuditResult.SUCCESS,
        metadata={
            "created_count": result.created_count,
            "skipped_duplicate_count": result.skipped_duplicate_count,
            "drift_duplicate_count": result.drift_duplicate_count,
            "conflict_count": result.conflict_count,
            "session_type": payload.session_type,
            "center_id": payload.center_id,
            "tutor_id": payload.tutor_id,
            "start_date": payload.start_date,
            "end_date": payload.end_date,
        },
    )
    return GenerateSessionsCommitResponse.from_result(plan, result)
