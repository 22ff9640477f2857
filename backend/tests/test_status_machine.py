import pytest

from timegrid.core.exceptions import InvalidTransitionError
from timegrid.models.schedule import ScheduleStatus
from timegrid.services import status_machine


@pytest.mark.parametrize(
    "current,target",
    [
        (ScheduleStatus.PENDING, ScheduleStatus.IN_PROGRESS),
        (ScheduleStatus.IN_PROGRESS, ScheduleStatus.COMPLETED),
        (ScheduleStatus.PENDING, ScheduleStatus.CANCELLED),
        (ScheduleStatus.IN_PROGRESS, ScheduleStatus.CANCELLED),
    ],
)
def test_legal_transitions(make_schedule, current, target):
    schedule = make_schedule(status=current)
    moved = status_machine.transition(schedule, target)

    assert moved.status == target
    assert schedule.status == current
    assert moved.id == schedule.id


@pytest.mark.parametrize("terminal", [ScheduleStatus.COMPLETED, ScheduleStatus.CANCELLED])
@pytest.mark.parametrize("target", list(ScheduleStatus))
def test_terminal_states_reject_every_move(make_schedule, terminal, target):
    with pytest.raises(InvalidTransitionError) as exc_info:
        status_machine.transition(make_schedule(status=terminal), target)
    assert exc_info.value.details == {"current": terminal.value, "target": target.value}


@pytest.mark.parametrize(
    "current,target",
    [
        (ScheduleStatus.PENDING, ScheduleStatus.COMPLETED),
        (ScheduleStatus.PENDING, ScheduleStatus.PENDING),
        (ScheduleStatus.IN_PROGRESS, ScheduleStatus.PENDING),
    ],
)
def test_skipping_or_reversing_is_rejected(make_schedule, current, target):
    with pytest.raises(InvalidTransitionError):
        status_machine.transition(make_schedule(status=current), target)


def test_helpers():
    assert status_machine.INITIAL_STATUS == ScheduleStatus.PENDING
    assert status_machine.is_terminal(ScheduleStatus.CANCELLED)
    assert not status_machine.is_terminal(ScheduleStatus.IN_PROGRESS)
    assert status_machine.allowed_targets(ScheduleStatus.PENDING) == {
        ScheduleStatus.IN_PROGRESS,
        ScheduleStatus.CANCELLED,
    }
    assert not status_machine.can_transition(ScheduleStatus.COMPLETED, ScheduleStatus.CANCELLED)


def test_unknown_target_is_an_invalid_transition(make_schedule):
    with pytest.raises(InvalidTransitionError) as exc_info:
        status_machine.transition(make_schedule(), "ARCHIVED")
    assert exc_info.value.details == {"current": "PENDING", "target": "ARCHIVED"}
