# backend/app/services/session_generation/__init__.py
"""
Recurring session generation.

Pipeline (pure parts exported here):
- occurrences: weekly rule -> UTC occurrences
- classifier: occurrence + existing bookings -> PlanLine
- plan: PlanLine variants, SessionGenerationPlan, CommitResult

The database-backed orchestrator lives in
app.services.session_generation.service.SessionGenerationService.
"""

from .classifier import classify, is_duplicate
from .occurrences import generate_occurrences, resolve_range, validate_recurrence
from .plan import (
    CommitResult,
    CreateLine,
    PlanLine,
    PlanSample,
    SessionGenerationPlan,
    SkipConflictLine,
    SkipDuplicateLine,
    SkipReason,
)
from .types import ExistingBooking, ExistingBookingIndex, Occurrence, RecurrenceSpec, Roster
from .zoom_link import normalize_zoom_link

__all__ = [
    "CommitResult",
    "CreateLine",
    "ExistingBooking",
    "ExistingBookingIndex",
    "Occurrence",
    "PlanLine",
    "PlanSample",
    "RecurrenceSpec",
    "Roster",
    "SessionGenerationPlan",
    "SkipConflictLine",
    "SkipDuplicateLine",
    "SkipReason",
    "classify",
    "generate_occurrences",
    "is_duplicate",
    "normalize_zoom_link",
    "resolve_range",
    "validate_recurrence",
]
