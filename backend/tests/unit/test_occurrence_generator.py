"""Unit tests for the weekly occurrence generator (no database)."""

from datetime import date, datetime, time, timedelta, timezone
import logging

import pytest
import pytz

from app.core.enums import SessionType
from app.core.exceptions import InvalidRecurrenceError
from app.services.session_generation import occurrences as occurrences_module
from app.services.session_generation.occurrences import generate_occurrences, resolve_range
from app.services.session_generation.types import RecurrenceSpec

EDMONTON = pytz.timezone("America/Edmonton")


def _spec(**overrides) -> RecurrenceSpec:
    values = dict(
        center_id="center",
        tutor_id="tutor",
        session_type=SessionType.ONE_ON_ONE,
        student_id="student",
        start_date=date(2024, 3, 1),
        end_date=date(2024, 3, 31),
        weekdays=frozenset({2}),
        start_time=time(9, 0),
        end_time=time(10, 0),
        timezone="America/Edmonton",
    )
    values.update(overrides)
    return RecurrenceSpec(**values)


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestEdmontonSpringForward:
    def test_tuesdays_in_march_2024(self):
        occurrences = generate_occurrences(_spec())

        assert [o.local_date for o in occurrences] == [
            date(2024, 3, 5),
            date(2024, 3, 12),
            date(2024, 3, 19),
            date(2024, 3, 26),
        ]

    def test_offsets_change_at_dst_but_wall_clock_does_not(self):
        occurrences = generate_occurrences(_spec())

        # MST (-07:00) before 2024-03-10, MDT (-06:00) after
        assert occurrences[0].start_at_utc == _utc(2024, 3, 5, 16, 0)
        assert occurrences[0].end_at_utc == _utc(2024, 3, 5, 17, 0)
        assert occurrences[1].start_at_utc == _utc(2024, 3, 12, 15, 0)
        assert occurrences[3].end_at_utc == _utc(2024, 3, 26, 16, 0)

        offsets = [o.start_at_utc.astimezone(EDMONTON).utcoffset() for o in occurrences]
        assert offsets == [timedelta(hours=-7)] + [timedelta(hours=-6)] * 3

        for occurrence in occurrences:
            local_start = occurrence.start_at_utc.astimezone(EDMONTON)
            local_end = occurrence.end_at_utc.astimezone(EDMONTON)
            assert local_start.time() == time(9, 0)
            assert local_end.time() == time(10, 0)

    def test_results_are_utc_aware(self):
        for occurrence in generate_occurrences(_spec()):
            assert occurrence.start_at_utc.utcoffset() == timedelta(0)


def test_fall_back_keeps_local_time_across_november():
    spec = _spec(
        start_date=date(2024, 10, 28),
        end_date=date(2024, 11, 10),
        weekdays=frozenset({1}),
        start_time=time(16, 30),
        end_time=time(17, 30),
    )

    occurrences = generate_occurrences(spec)

    assert [o.start_at_utc for o in occurrences] == [
        _utc(2024, 10, 28, 22, 30),
        _utc(2024, 11, 4, 23, 30),
    ]


def test_start_in_spring_forward_gap_is_skipped():
    # 2024-03-10 02:30 does not exist in Edmonton
    spec = _spec(
        start_date=date(2024, 3, 3),
        end_date=date(2024, 3, 17),
        weekdays=frozenset({7}),
        start_time=time(2, 30),
        end_time=time(3, 30),
    )

    occurrences = generate_occurrences(spec)

    assert [o.local_date for o in occurrences] == [date(2024, 3, 3), date(2024, 3, 17)]


def test_end_in_spring_forward_gap_is_skipped():
    spec = _spec(
        start_date=date(2024, 3, 10),
        end_date=date(2024, 3, 10),
        weekdays=frozenset({7}),
        start_time=time(1, 30),
        end_time=time(2, 15),
    )

    assert generate_occurrences(spec) == []


def test_ambiguous_fall_back_time_uses_first_instant():
    # 2024-11-03 01:15 happens twice in Edmonton; the first is MDT (-06:00)
    spec = _spec(
        start_date=date(2024, 11, 3),
        end_date=date(2024, 11, 3),
        weekdays=frozenset({7}),
        start_time=time(1, 15),
        end_time=time(1, 45),
    )

    occurrences = generate_occurrences(spec)

    assert len(occurrences) == 1
    assert occurrences[0].start_at_utc == _utc(2024, 11, 3, 7, 15)
    assert occurrences[0].end_at_utc == _utc(2024, 11, 3, 7, 45)


def test_multiple_weekdays_are_emitted_in_date_order():
    spec = _spec(
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 14),
        weekdays=frozenset({5, 1, 3}),
        timezone="UTC",
    )

    dates = [o.local_date for o in generate_occurrences(spec)]

    assert dates == [
        date(2024, 1, 1),
        date(2024, 1, 3),
        date(2024, 1, 5),
        date(2024, 1, 8),
        date(2024, 1, 10),
        date(2024, 1, 12),
    ]
    assert dates == sorted(dates)


def test_sunday_is_weekday_seven():
    spec = _spec(
        start_date=date(2024, 1, 1), end_date=date(2024, 1, 7), weekdays=frozenset({7})
    )

    assert [o.local_date for o in generate_occurrences(spec)] == [date(2024, 1, 7)]


def test_single_day_range_without_matching_weekday_is_empty():
    spec = _spec(start_date=date(2024, 3, 6), end_date=date(2024, 3, 6))

    assert generate_occurrences(spec) == []


def test_generation_is_deterministic():
    assert generate_occurrences(_spec()) == generate_occurrences(_spec())


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"timezone": "Mars/Olympus_Mons"}, "timezone"),
        ({"end_time": time(9, 0)}, "endTime"),
        ({"end_time": time(8, 0)}, "endTime"),
        ({"weekdays": frozenset()}, "weekdays"),
        ({"weekdays": frozenset({0, 2})}, "weekdays"),
        ({"weekdays": frozenset({8})}, "weekdays"),
        ({"end_date": date(2024, 2, 1)}, "endDate"),
        ({"start_date": date(1, 1, 1), "end_date": date(1, 1, 7)}, "startDate"),
        ({"start_date": date(9999, 12, 30), "end_date": date(9999, 12, 31)}, "endDate"),
    ],
)
def test_invalid_recurrence_is_rejected(overrides, field):
    with pytest.raises(InvalidRecurrenceError) as exc_info:
        generate_occurrences(_spec(**overrides))

    assert exc_info.value.code == "INVALID_RECURRENCE"
    assert exc_info.value.details["field"] == field


def test_late_evening_on_last_supported_date_converts_to_utc():
    spec = _spec(
        start_date=date(9999, 12, 27),
        end_date=date(9999, 12, 29),
        weekdays=frozenset(range(1, 8)),
        start_time=time(20, 0),
        end_time=time(23, 0),
    )

    occurrences = generate_occurrences(spec)

    assert [o.local_date for o in occurrences] == [
        date(9999, 12, 27),
        date(9999, 12, 28),
        date(9999, 12, 29),
    ]
    assert occurrences[-1].end_at_utc.date() == date(9999, 12, 30)


def test_non_positive_resolved_window_is_logged_and_skipped(monkeypatch, caplog):
    instant = _utc(2024, 3, 5, 16, 0)
    monkeypatch.setattr(occurrences_module, "localize_wall_time", lambda *args: instant)

    with caplog.at_level(logging.INFO, logger=occurrences_module.__name__):
        occurrences = generate_occurrences(_spec(end_date=date(2024, 3, 5)))

    assert occurrences == []
    assert "not a positive window" in caplog.text


class TestResolveRange:
    def test_range_spans_first_start_to_last_end(self):
        spec = _spec()
        occurrences = generate_occurrences(spec)

        assert resolve_range(spec, occurrences) == (
            _utc(2024, 3, 5, 16, 0),
            _utc(2024, 3, 26, 16, 0),
        )

    def test_empty_plan_falls_back_to_requested_window(self):
        spec = _spec(start_date=date(2024, 3, 6), end_date=date(2024, 3, 7))

        assert resolve_range(spec, []) == (
            _utc(2024, 3, 6, 16, 0),
            _utc(2024, 3, 7, 17, 0),
        )
