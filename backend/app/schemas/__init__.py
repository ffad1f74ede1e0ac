# backend/app/schemas/__init__.py
"""
Pydantic schemas for the TutorOps API.

Request bodies use camelCase aliases on the wire; responses are dumped by
alias.
"""

from .main_responses import HealthResponse
from .session_generation import (
    GenerateSessionsCommitResponse,
    GenerateSessionsPreviewResponse,
    GenerateSessionsRequest,
    GenerationRange,
    GenerationSample,
    GenerationSummary,
)

__all__ = [
    # Health
    "HealthResponse",
    # Session generation
    "GenerateSessionsCommitResponse",
    "GenerateSessionsPreviewResponse",
    "GenerateSessionsRequest",
    "GenerationRange",
    "GenerationSample",
    "GenerationSummary",
]
