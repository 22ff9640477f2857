import pytest

from timegrid.core.exceptions import ValidationError
from timegrid.models.schedule import ScheduleStatus
from timegrid.schemas.schedule import ScheduleCandidate
from timegrid.services.conflict_service import ConflictDetector, conflict_reasons


def candidate(**overrides):
    data = {
        "course_id": "c2",
        "course_section_id": "cs2",
        "room_id": "2B11",
        "lecturer_id": "L2",
        "class_id": "K2",
        "semester_week_id": 36,
        "day_of_week": 1,
        "start_period": 2,
        "total_period": 3,
    }
    data.update(overrides)
    return ScheduleCandidate(**data)


@pytest.fixture
def existing(make_schedule):
    return make_schedule(id=10, room_id="2B11", lecturer_id="L1", day_of_week=1, start_period=1, total_period=3)


def test_room_conflict(existing):
    conflict = ConflictDetector().check(candidate(room_id="2B11"), [existing])
    assert conflict == existing
    assert conflict_reasons(candidate(room_id="2B11"), conflict) == ["room"]


def test_lecturer_conflict(existing):
    proposed = candidate(room_id="2B99", lecturer_id="L1", start_period=3, total_period=3)
    conflict = ConflictDetector().check(proposed, [existing])
    assert conflict is not None
    assert conflict.id == 10
    assert conflict_reasons(proposed, conflict) == ["lecturer"]


def test_class_conflict(existing):
    proposed = candidate(room_id="2B99", lecturer_id="L9", class_id="K1")
    assert ConflictDetector().check(proposed, [existing]).id == 10


def test_different_day_is_clear(existing):
    proposed = candidate(room_id="2B11", lecturer_id="L1", day_of_week=2, start_period=1, total_period=3)
    assert ConflictDetector().check(proposed, [existing]) is None


def test_cancelled_entries_are_ignored(make_schedule):
    cancelled = make_schedule(id=10, status=ScheduleStatus.CANCELLED)
    assert ConflictDetector().check(candidate(room_id="2B11"), [cancelled]) is None


def test_adjacent_periods_never_conflict(existing):
    proposed = candidate(room_id="2B11", lecturer_id="L1", class_id="K1", start_period=4, total_period=3)
    assert ConflictDetector().check(proposed, [existing]) is None


def test_no_shared_resource_is_clear(existing):
    proposed = candidate(room_id="2B99", lecturer_id="L9", class_id="K9")
    assert ConflictDetector().check(proposed, [existing]) is None


def test_other_weeks_are_ignored(existing):
    assert ConflictDetector().check(candidate(semester_week_id=37), [existing]) is None


def test_editing_in_place_excludes_itself(existing):
    unchanged = candidate(
        room_id=existing.room_id,
        lecturer_id=existing.lecturer_id,
        class_id=existing.class_id,
        start_period=existing.start_period,
        total_period=existing.total_period,
    )
    detector = ConflictDetector()
    assert detector.check(unchanged, [existing]) == existing
    assert detector.check(unchanged, [existing], exclude_id=existing.id) is None


def test_smallest_id_wins(make_schedule):
    entries = [
        make_schedule(id=30, start_period=3, total_period=1),
        make_schedule(id=7, room_id="R7", start_period=2, total_period=2),
        make_schedule(id=12, start_period=4, total_period=1),
    ]
    proposed = candidate(room_id="2B11", lecturer_id="L1", start_period=1, total_period=5)
    detector = ConflictDetector()
    assert detector.check(proposed, entries).id == 7
    assert detector.check(proposed, list(reversed(entries))).id == 7


def test_invalid_candidate_raises(existing):
    with pytest.raises(ValidationError):
        ConflictDetector().check(candidate(start_period=9, total_period=3), [existing])


def test_audit_week_reports_each_shared_resource(make_schedule):
    schedules = [
        make_schedule(id=1, room_name="Room 2B11", start_period=1, total_period=3),
        make_schedule(id=2, class_id="K2", start_period=3, total_period=2),
        make_schedule(id=3, room_id="R3", lecturer_id="L3", class_id="K3", start_period=1, total_period=3),
        make_schedule(id=4, status=ScheduleStatus.CANCELLED),
        make_schedule(id=5, day_of_week=2),
    ]
    report = ConflictDetector().audit_week(schedules)

    assert report.semester_week_id == 36
    assert [item.id for item in report.conflicts] == ["room-1-2", "lecturer-1-2"]
    assert report.conflicts[0].conflict_type == "room_conflict"
    assert "Room overlap in Room 2B11" in report.conflicts[0].description
    assert report.conflicts[1].affected_schedules == [1, 2]


def test_audit_week_without_conflicts(make_schedule):
    schedules = [
        make_schedule(id=1, start_period=1, total_period=3),
        make_schedule(id=2, start_period=4, total_period=3),
    ]
    assert ConflictDetector().audit_week(schedules).conflicts == []
