"""Lifecycle of a schedule entry.

PENDING is the initial state. A manager may cancel a PENDING or IN_PROGRESS
entry; moving PENDING -> IN_PROGRESS -> COMPLETED is driven by an external
clock comparing the current time with the entry's week, day and periods.
Only the legality of a move is decided here. COMPLETED and CANCELLED are
terminal. Deleting an entry is not a transition and is allowed in any state.
"""

from __future__ import annotations

from timegrid.core.exceptions import InvalidTransitionError
from timegrid.models.schedule import ScheduleStatus
from timegrid.schemas.schedule import Schedule

INITIAL_STATUS = ScheduleStatus.PENDING

TERMINAL_STATUSES = frozenset({ScheduleStatus.COMPLETED, ScheduleStatus.CANCELLED})

ALLOWED_TRANSITIONS: dict[ScheduleStatus, frozenset[ScheduleStatus]] = {
    ScheduleStatus.PENDING: frozenset({ScheduleStatus.IN_PROGRESS, ScheduleStatus.CANCELLED}),
    ScheduleStatus.IN_PROGRESS: frozenset({ScheduleStatus.COMPLETED, ScheduleStatus.CANCELLED}),
    ScheduleStatus.COMPLETED: frozenset(),
    ScheduleStatus.CANCELLED: frozenset(),
}


def is_terminal(status: ScheduleStatus) -> bool:
    return status in TERMINAL_STATUSES


def allowed_targets(status: ScheduleStatus) -> frozenset[ScheduleStatus]:
    return ALLOWED_TRANSITIONS[status]


def can_transition(current: ScheduleStatus, target: ScheduleStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def transition(schedule: Schedule, target: ScheduleStatus) -> Schedule:
    """Return a copy of ``schedule`` moved to ``target``.

    Raises InvalidTransitionError for any move not listed in ALLOWED_TRANSITIONS,
    including every move out of a terminal state and no-op moves.
    """
    try:
        target = ScheduleStatus(target)
    except ValueError:
        raise InvalidTransitionError(schedule.status.value, str(target)) from None
    if not can_transition(schedule.status, target):
        raise InvalidTransitionError(schedule.status.value, target.value)
    return schedule.model_copy(update={"status": target})
