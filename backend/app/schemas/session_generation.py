# backend/app/schemas/session_generation.py
"""
Schemas for batch session generation (preview and commit).

Both endpoints share GenerateSessionsRequest. Field names are camelCase on
the wire; Python attributes stay snake_case.
"""

import datetime
import re
from typing import Annotated, Any, List, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from ..core.constants import MAX_WEEKDAY, MIN_WEEKDAY
from ..core.enums import SessionType
from ..core.timezone_utils import to_iso_utc
from ..services.session_generation.plan import CommitResult, PlanSample, SessionGenerationPlan
from ..services.session_generation.types import RecurrenceSpec
from ._strict_base import StrictModel, StrictRequestModel

DateType = datetime.date
TimeType = datetime.time

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_PATTERN = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")

Weekday = Annotated[int, Field(strict=True, ge=MIN_WEEKDAY, le=MAX_WEEKDAY)]
NonEmptyId = Annotated[str, Field(min_length=1, max_length=64)]


class GenerateSessionsRequest(StrictRequestModel):
    """Weekly recurrence to preview or generate."""

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    center_id: NonEmptyId = Field(alias="centerId")
    tutor_id: NonEmptyId = Field(alias="tutorId")
    session_type: SessionType = Field(alias="sessionType")
    student_id: Optional[str] = Field(default=None, alias="studentId", max_length=64)
    group_id: Optional[str] = Field(default=None, alias="groupId", max_length=64)
    start_date: DateType = Field(alias="startDate", description="YYYY-MM-DD, inclusive")
    end_date: DateType = Field(alias="endDate", description="YYYY-MM-DD, inclusive")
    weekdays: List[Weekday] = Field(min_length=1, description="ISO weekdays, 1=Monday..7=Sunday")
    start_time: TimeType = Field(alias="startTime", description="HH:MM, 24h local time")
    end_time: TimeType = Field(alias="endTime", description="HH:MM, 24h local time")
    timezone: str = Field(min_length=1, max_length=64, description="IANA zone name")
    zoom_link: Optional[str] = Field(default=None, alias="zoomLink")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def require_iso_date(cls, v: Any) -> Any:
        if not isinstance(v, str) or not _DATE_PATTERN.match(v.strip()):
            raise ValueError("Expected a date in YYYY-MM-DD format")
        return v.strip()

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def require_hh_mm(cls, v: Any) -> Any:
        if not isinstance(v, str) or not _TIME_PATTERN.match(v.strip()):
            raise ValueError("Expected a time in HH:MM 24-hour format")
        return v.strip()

    @field_validator("student_id", "group_id")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @field_validator("weekdays")
    @classmethod
    def collapse_duplicates(cls, v: List[int]) -> List[int]:
        return sorted(set(v))

    @model_validator(mode="after")
    def validate_combination(self) -> "GenerateSessionsRequest":
        if self.end_time <= self.start_time:
            raise ValueError("endTime must be after startTime")
        if self.end_date < self.start_date:
            raise ValueError("endDate must be on or after startDate")

        if self.session_type == SessionType.ONE_ON_ONE:
            if not self.student_id:
                raise ValueError("studentId is required for ONE_ON_ONE sessions")
            if self.group_id:
                raise ValueError("groupId is not allowed for ONE_ON_ONE sessions")
        else:
            if not self.group_id:
                raise ValueError(f"groupId is required for {self.session_type.value} sessions")
            if self.student_id:
                raise ValueError(f"studentId is not allowed for {self.session_type.value} sessions")
        return self

    def to_recurrence_spec(self) -> RecurrenceSpec:
        return RecurrenceSpec(
            center_id=self.center_id,
            tutor_id=self.tutor_id,
            session_type=self.session_type,
            student_id=self.student_id,
            group_id=self.group_id,
            start_date=self.start_date,
            end_date=self.end_date,
            weekdays=frozenset(self.weekdays),
            start_time=self.start_time,
            end_time=self.end_time,
            timezone=self.timezone,
            zoom_link=self.zoom_link,
        )


class _CamelResponse(StrictModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True, populate_by_name=True)


class GenerationRange(_CamelResponse):
    """UTC range covered by the plan."""

    range_from: str = Field(alias="from")
    range_to: str = Field(alias="to")


class GenerationSample(_CamelResponse):
    date: str = Field(description="Occurrence start (ISO-8601 UTC)")
    reason: str


class GenerationSummary(_CamelResponse):
    """Exact count plus a capped sample for display."""

    count: int
    sample: List[GenerationSample]

    @classmethod
    def build(cls, count: int, samples: List[PlanSample]) -> "GenerationSummary":
        return cls(
            count=count,
            sample=[GenerationSample(date=s.date, reason=s.reason.value) for s in samples],
        )


def _range(plan_from: datetime.datetime, plan_to: datetime.datetime) -> GenerationRange:
    return GenerationRange(range_from=to_iso_utc(plan_from), range_to=to_iso_utc(plan_to))


class GenerateSessionsPreviewResponse(_CamelResponse):
    """Result of a dry-run plan. No writes were made."""

    range: GenerationRange
    would_create_count: int = Field(alias="wouldCreateCount")
    would_skip_duplicate_count: int = Field(alias="wouldSkipDuplicateCount")
    would_conflict_count: int = Field(alias="wouldConflictCount")
    duplicates_summary: GenerationSummary = Field(alias="duplicatesSummary")
    conflicts_summary: GenerationSummary = Field(alias="conflictsSummary")
    zoom_link_applied: bool = Field(alias="zoomLinkApplied")

    @classmethod
    def from_plan(cls, plan: SessionGenerationPlan) -> "GenerateSessionsPreviewResponse":
        return cls(
            range=_range(plan.range_from, plan.range_to),
            would_create_count=plan.would_create_count,
            would_skip_duplicate_count=plan.would_skip_duplicate_count,
            would_conflict_count=plan.would_conflict_count,
            duplicates_summary=GenerationSummary.build(
                plan.would_skip_duplicate_count, plan.duplicate_samples
            ),
            conflicts_summary=GenerationSummary.build(
                plan.would_conflict_count, plan.conflict_samples
            ),
            zoom_link_applied=plan.zoom_link_applied,
        )


class GenerateSessionsCommitResponse(_CamelResponse):
    """Result of generating sessions."""

    created_count: int = Field(alias="createdCount")
    skipped_duplicate_count: int = Field(alias="skippedDuplicateCount")
    conflict_count: int = Field(alias="conflictCount")
    range: GenerationRange
    created_sample_ids: List[str] = Field(alias="createdSampleIds")

    @classmethod
    def from_result(
        cls, plan: SessionGenerationPlan, result: CommitResult
    ) -> "GenerateSessionsCommitResponse":
        return cls(
            created_count=result.created_count,
            skipped_duplicate_count=result.skipped_duplicate_count,
            conflict_count=result.conflict_count,
            range=_range(plan.range_from, plan.range_to),
            created_sample_ids=list(result.created_sample_ids),
        )
