"""Application-wide constants for the TutorOps backend."""

from __future__ import annotations

from datetime import date

BRAND_NAME = "TutorOps"

API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Back-office API for tutoring organizations"
API_VERSION = "1.0.0"

# Session generation display caps (totals are never capped)
GENERATION_SAMPLE_LIMIT = 10
GENERATION_CREATED_ID_LIMIT = 10

# ISO weekday numbering: 1=Monday ... 7=Sunday
MIN_WEEKDAY = 1
MAX_WEEKDAY = 7

# Local dates a recurrence may span; leaves room for UTC conversion and the
# day-by-day walk without leaving the datetime range
MIN_GENERATION_DATE = date(1, 1, 3)
MAX_GENERATION_DATE = date(9999, 12, 29)

# Meeting link constraints
MAX_MEETING_LINK_LENGTH = 2048

# Request headers resolved by the tenant context dependency
TENANT_HEADER = "X-Tenant-ID"
ACTOR_HEADER = "X-Actor-ID"
REQUEST_ID_HEADER = "X-Request-ID"
