# backend/app/routes/v1/health.py
"""
Health check endpoint for monitoring and load balancer probes.
"""

from __future__ import annotations

from fastapi import APIRouter

from app.schemas.main_responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """
    Lightweight health check that doesn't hit the database.
    """
    return HealthResponse(status="ok")
