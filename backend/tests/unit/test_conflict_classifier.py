"""Unit tests for the conflict classifier (no database)."""

from datetime import date, datetime, time, timezone

import pytest

from app.core.enums import SessionType
from app.services.session_generation.classifier import classify, is_duplicate
from app.services.session_generation.plan import (
    CreateLine,
    SkipConflictLine,
    SkipDuplicateLine,
    SkipReason,
)
from app.services.session_generation.types import (
    ExistingBooking,
    Occurrence,
    RecurrenceSpec,
    Roster,
)

START = datetime(2024, 3, 5, 16, 0, tzinfo=timezone.utc)
END = datetime(2024, 3, 5, 17, 0, tzinfo=timezone.utc)
OCCURRENCE = Occurrence(start_at_utc=START, end_at_utc=END, local_date=date(2024, 3, 5))


def _one_on_one(**overrides) -> RecurrenceSpec:
    values = dict(
        center_id="center-a",
        tutor_id="tutor-a",
        session_type=SessionType.ONE_ON_ONE,
        student_id="student-1",
        start_date=date(2024, 3, 1),
        end_date=date(2024, 3, 31),
        weekdays=frozenset({2}),
        start_time=time(9, 0),
        end_time=time(10, 0),
        timezone="America/Edmonton",
    )
    values.update(overrides)
    return RecurrenceSpec(**values)


def _group(session_type: SessionType = SessionType.GROUP, **overrides) -> RecurrenceSpec:
    return _one_on_one(session_type=session_type, student_id=None, group_id="group-1", **overrides)


def _booking(**overrides) -> ExistingBooking:
    values = dict(
        id="existing",
        center_id="center-a",
        tutor_id="tutor-a",
        group_id=None,
        session_type=SessionType.ONE_ON_ONE,
        student_ids=frozenset({"student-1"}),
    )
    values.update(overrides)
    return ExistingBooking(**values)


def _index(*bookings: ExistingBooking):
    return {START: tuple(bookings)} if bookings else {}


ONE_ON_ONE_ROSTER = Roster(student_ids=("student-1",))
GROUP_ROSTER = Roster(student_ids=("student-1", "student-2"))


def test_no_existing_bookings_creates():
    line = classify(OCCURRENCE, _one_on_one(), ONE_ON_ONE_ROSTER, {})

    assert isinstance(line, CreateLine)
    assert line.occurrence == OCCURRENCE
    assert line.roster == ONE_ON_ONE_ROSTER
    assert line.booking_data == {
        "center_id": "center-a",
        "tutor_id": "tutor-a",
        "session_type": "ONE_ON_ONE",
        "group_id": None,
        "start_at": START,
        "end_at": END,
        "timezone": "America/Edmonton",
        "zoom_link": None,
    }


def test_create_line_carries_zoom_link_and_group():
    line = classify(OCCURRENCE, _group(), GROUP_ROSTER, {}, "https://zoom.us/j/1")

    assert isinstance(line, CreateLine)
    assert line.booking_data["group_id"] == "group-1"
    assert line.booking_data["session_type"] == "GROUP"
    assert line.booking_data["zoom_link"] == "https://zoom.us/j/1"


def test_bookings_at_other_instants_are_ignored():
    other = datetime(2024, 3, 5, 15, 0, tzinfo=timezone.utc)
    index = {other: (_booking(),)}

    assert isinstance(classify(OCCURRENCE, _one_on_one(), ONE_ON_ONE_ROSTER, index), CreateLine)


class TestDuplicate:
    def test_identical_one_on_one_is_duplicate_not_conflict(self):
        # Also satisfies the tutor-collision predicate; duplicate must win
        line = classify(OCCURRENCE, _one_on_one(), ONE_ON_ONE_ROSTER, _index(_booking()))

        assert isinstance(line, SkipDuplicateLine)
        assert line.reason is SkipReason.DUPLICATE_SESSION_EXISTS

    def test_identical_group_is_duplicate(self):
        booking = _booking(
            session_type=SessionType.GROUP, group_id="group-1", student_ids=frozenset()
        )

        line = classify(OCCURRENCE, _group(), GROUP_ROSTER, _index(booking))

        assert isinstance(line, SkipDuplicateLine)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"center_id": "center-b"},
            {"tutor_id": "tutor-b"},
            {"session_type": SessionType.GROUP, "group_id": "group-1"},
            {"student_ids": frozenset({"student-9"})},
        ],
    )
    def test_one_on_one_identity_requires_every_field(self, overrides):
        assert not is_duplicate(_booking(**overrides), _one_on_one())

    def test_group_identity_requires_same_group(self):
        booking = _booking(session_type=SessionType.GROUP, group_id="group-2")

        assert not is_duplicate(booking, _group())

    def test_group_identity_requires_same_session_type(self):
        booking = _booking(session_type=SessionType.CLASS, group_id="group-1")

        assert not is_duplicate(booking, _group(SessionType.GROUP))


class TestTutorCollision:
    def test_same_tutor_at_another_center(self):
        booking = _booking(center_id="center-b", student_ids=frozenset({"student-7"}))

        line = classify(OCCURRENCE, _one_on_one(), ONE_ON_ONE_ROSTER, _index(booking))

        assert isinstance(line, SkipConflictLine)
        assert line.reason is SkipReason.TUTOR_START_COLLISION

    def test_tutor_collision_wins_over_student_collision(self):
        # Same tutor and an overlapping roster; the tutor check runs first
        booking = _booking(session_type=SessionType.GROUP, group_id="group-9")

        line = classify(OCCURRENCE, _one_on_one(), ONE_ON_ONE_ROSTER, _index(booking))

        assert isinstance(line, SkipConflictLine)
        assert line.reason is SkipReason.TUTOR_START_COLLISION

    def test_same_tutor_different_group(self):
        booking = _booking(session_type=SessionType.GROUP, group_id="group-2", student_ids=frozenset())

        line = classify(OCCURRENCE, _group(), GROUP_ROSTER, _index(booking))

        assert isinstance(line, SkipConflictLine)
        assert line.reason is SkipReason.TUTOR_START_COLLISION


class TestStudentCollision:
    def test_rostered_student_booked_with_another_tutor(self):
        booking = _booking(tutor_id="tutor-b", student_ids=frozenset({"student-2"}))

        line = classify(OCCURRENCE, _group(), GROUP_ROSTER, _index(booking))

        assert isinstance(line, SkipConflictLine)
        assert line.reason is SkipReason.STUDENT_START_COLLISION

    def test_one_on_one_student_booked_with_another_tutor(self):
        booking = _booking(tutor_id="tutor-b")

        line = classify(OCCURRENCE, _one_on_one(), ONE_ON_ONE_ROSTER, _index(booking))

        assert isinstance(line, SkipConflictLine)
        assert line.reason is SkipReason.STUDENT_START_COLLISION

    def test_one_on_one_ignores_students_outside_target(self):
        booking = _booking(tutor_id="tutor-b", student_ids=frozenset({"student-2", "student-3"}))

        line = classify(OCCURRENCE, _one_on_one(), ONE_ON_ONE_ROSTER, _index(booking))

        assert isinstance(line, CreateLine)

    def test_empty_roster_never_collides_on_students(self):
        booking = _booking(tutor_id="tutor-b", student_ids=frozenset({"student-1"}))

        line = classify(OCCURRENCE, _group(), Roster(), _index(booking))

        assert isinstance(line, CreateLine)


def test_duplicate_found_among_several_bookings_at_same_instant():
    bookings = (
        _booking(id="other-tutor", tutor_id="tutor-b", student_ids=frozenset({"student-1"})),
        _booking(id="same"),
    )

    line = classify(OCCURRENCE, _one_on_one(), ONE_ON_ONE_ROSTER, _index(*bookings))

    assert isinstance(line, SkipDuplicateLine)


def test_skip_conflict_line_rejects_duplicate_reason():
    with pytest.raises(ValueError):
        SkipConflictLine(occurrence=OCCURRENCE, reason=SkipReason.DUPLICATE_SESSION_EXISTS)
