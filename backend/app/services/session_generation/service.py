# backend/app/services/session_generation/service.py
"""
Session Generation Service for the TutorOps backend.

Turns a weekly recurrence into concrete sessions for one tutor at one center.

Preview and commit share build_plan(); commit() only adds the writes. Plans
are built from state read once at the start of the call, so commit re-checks
nothing itself and instead relies on the session start uniqueness constraint
to catch rows created by a concurrent request in the meantime ("drift").
Drift is counted as a duplicate, never raised.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...core.config import settings
from ...core.enums import SessionType
from ...core.exceptions import ReferenceNotFoundException, ValidationException
from ...models.session import SESSION_START_UNIQUE_CONSTRAINT
from ...monitoring.prometheus_metrics import prometheus_metrics
from ...repositories import RepositoryFactory
from ...repositories.booking_index_repository import BookingIndexRepository
from ...repositories.session_generation_repository import SessionGenerationRepository
from ..base import BaseService
from .classifier import classify
from .occurrences import generate_occurrences, resolve_range, validate_recurrence
from .plan import CommitResult, PlanLine, SessionGenerationPlan
from .types import RecurrenceSpec, Roster
from .zoom_link import normalize_zoom_link

logger = logging.getLogger(__name__)

# SQLSTATE unique_violation
PG_UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Whether an IntegrityError is a uniqueness violation (as opposed to FK/CHECK/NOT NULL)."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code is not None:
        return str(code) == PG_UNIQUE_VIOLATION

    message = str(orig if orig is not None else exc)
    return "UNIQUE constraint failed" in message or SESSION_START_UNIQUE_CONSTRAINT in message


class SessionGenerationService(BaseService):
    """
    Builds and executes session generation plans.

    Validation failures (ValidationException, ReferenceNotFoundException)
    are raised before any booking query runs.
    """

    def __init__(
        self,
        db: Session,
        repository: Optional[SessionGenerationRepository] = None,
        booking_index_repository: Optional[BookingIndexRepository] = None,
    ):
        """
        Initialize session generation service.

        Args:
            db: Database session
            repository: Optional SessionGenerationRepository instance
            booking_index_repository: Optional BookingIndexRepository instance
        """
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_session_generation_repository(db)
        self.booking_index_repository = (
            booking_index_repository or RepositoryFactory.create_booking_index_repository(db)
        )

    # Plan construction

    @BaseService.measure_operation("build_plan")
    def build_plan(self, spec: RecurrenceSpec, tenant_id: str, actor_id: str) -> SessionGenerationPlan:
        """
        Classify every occurrence of a recurrence without writing anything.

        Args:
            spec: Recurrence to expand
            tenant_id: Tenant scope for every lookup
            actor_id: Administrator requesting the plan (logged)

        Returns:
            Plan with one line per generated occurrence

        Raises:
            InvalidRecurrenceError: Structurally invalid recurrence
            ValidationException: Wrong field combination, group mismatch or bad meeting link
            ReferenceNotFoundException: Center, tutor, assignment, student or group missing
        """
        validate_recurrence(spec)
        self._validate_session_type_fields(spec)
        self._validate_references(spec, tenant_id)

        roster = self._resolve_roster(spec, tenant_id)
        zoom_link = normalize_zoom_link(spec.zoom_link, settings.allowed_meeting_link_hosts)

        occurrences = generate_occurrences(spec)
        index = self.booking_index_repository.load_bookings(
            tenant_id, [occurrence.start_at_utc for occurrence in occurrences]
        )

        lines: List[PlanLine] = [
            classify(occurrence, spec, roster, index, zoom_link) for occurrence in occurrences
        ]
        range_from, range_to = resolve_range(spec, occurrences)

        plan = SessionGenerationPlan(
            lines=tuple(lines),
            range_from=range_from,
            range_to=range_to,
            zoom_link_applied=zoom_link is not None,
            sample_limit=settings.generation_sample_limit,
        )

        self.logger.info(
            "Built session plan for tenant=%s actor=%s tutor=%s center=%s: %s",
            tenant_id,
            actor_id,
            spec.tutor_id,
            spec.center_id,
            plan.summary(),
        )
        prometheus_metrics.record_generation_outcome("plan", "create", plan.would_create_count)
        prometheus_metrics.record_generation_outcome(
            "plan", "duplicate", plan.would_skip_duplicate_count
        )
        prometheus_metrics.record_generation_outcome("plan", "conflict", plan.would_conflict_count)
        return plan

    def _validate_session_type_fields(self, spec: RecurrenceSpec) -> None:
        if spec.session_type == SessionType.ONE_ON_ONE:
            if not spec.student_id:
                raise ValidationException(
                    "studentId is required for ONE_ON_ONE sessions",
                    code="VALIDATION_ERROR",
                    details={"field": "studentId"},
                )
            if spec.group_id:
                raise ValidationException(
                    "groupId is not allowed for ONE_ON_ONE sessions",
                    code="VALIDATION_ERROR",
                    details={"field": "groupId"},
                )
            return

        if not spec.group_id:
            raise ValidationException(
                f"groupId is required for {spec.session_type.value} sessions",
                code="VALIDATION_ERROR",
                details={"field": "groupId"},
            )
        if spec.student_id:
            raise ValidationException(
                f"studentId is not allowed for {spec.session_type.value} sessions",
                code="VALIDATION_ERROR",
                details={"field": "studentId"},
            )

    def _validate_references(self, spec: RecurrenceSpec, tenant_id: str) -> None:
        if self.repository.get_center(tenant_id, spec.center_id) is None:
            raise ReferenceNotFoundException("Center not found", entity="center")

        if not self.repository.has_tutor_role(tenant_id, spec.tutor_id):
            raise ReferenceNotFoundException("Tutor not found", entity="tutor")

        if not self.repository.is_assigned_to_center(tenant_id, spec.tutor_id, spec.center_id):
            raise ReferenceNotFoundException(
                "Tutor is not assigned to this center", entity="staff_center"
            )

        if spec.session_type == SessionType.ONE_ON_ONE:
            if self.repository.get_student(tenant_id, spec.student_id) is None:
                raise ReferenceNotFoundException("Student not found", entity="student")
            return

        group = self.repository.get_group(tenant_id, spec.group_id)
        if group is None:
            raise ReferenceNotFoundException("Group not found", entity="group")
        if group.center_id != spec.center_id:
            raise ValidationException(
                "Group does not belong to this center",
                code="GROUP_CENTER_MISMATCH",
                details={"field": "groupId"},
            )
        if group.type != spec.session_type.value:
            raise ValidationException(
                "Group type does not match session type",
                code="GROUP_TYPE_MISMATCH",
                details={"field": "sessionType", "groupType": group.type},
            )

    def _resolve_roster(self, spec: RecurrenceSpec, tenant_id: str) -> Roster:
        if spec.session_type == SessionType.ONE_ON_ONE:
            return Roster(student_ids=(spec.student_id,))
        return Roster(student_ids=tuple(self.repository.get_group_roster(tenant_id, spec.group_id)))

    # Commit

    @BaseService.measure_operation("commit_plan")
    def commit(self, plan: SessionGenerationPlan, tenant_id: str) -> CommitResult:
        """
        Persist every CreateLine of a plan in one transaction.

        Each insert runs inside a SAVEPOINT: a uniqueness violation rolls back
        only that row and is counted as drift. Any other failure rolls back
        the whole batch.

        Raises:
            ServiceException: Non-recoverable persistence failure (nothing committed)
        """
        result = CommitResult(
            plan_duplicate_count=plan.would_skip_duplicate_count,
            conflict_count=plan.would_conflict_count,
            range_from=plan.range_from,
            range_to=plan.range_to,
        )
        id_limit = settings.generation_created_id_limit

        with self.transaction():
            for line in plan.create_lines:
                try:
                    with self.db.begin_nested():
                        session = self.repository.create_session_with_roster(
                            tenant_id, line.booking_data, line.roster.student_ids
                        )
                except IntegrityError as e:
                    if not is_unique_violation(e):
                        raise
                    result.drift_duplicate_count += 1
                    self.logger.warning(
                        "Session at %s already exists for tutor=%s center=%s (drift)",
                        line.occurrence.start_at_utc.isoformat(),
                        line.booking_data["tutor_id"],
                        line.booking_data["center_id"],
                    )
                    continue

                result.created_count += 1
                if len(result.created_sample_ids) < id_limit:
                    result.created_sample_ids.append(session.id)

        self.logger.info(
            "Committed session plan for tenant=%s: created=%d skipped_duplicate=%d "
            "(drift=%d) conflicts=%d",
            tenant_id,
            result.created_count,
            result.skipped_duplicate_count,
            result.drift_duplicate_count,
            result.conflict_count,
        )
        prometheus_metrics.record_generation_outcome("commit", "create", result.created_count)
        prometheus_metrics.record_generation_outcome(
            "commit", "drift", result.drift_duplicate_count
        )
        return result

    def generate(
        self, spec: RecurrenceSpec, tenant_id: str, actor_id: str
    ) -> Tuple[SessionGenerationPlan, CommitResult]:
        """Build a plan and commit it; the plan is identical to what preview returns."""
        plan = self.build_plan(spec, tenant_id, actor_id)
        return plan, self.commit(plan, tenant_id)
