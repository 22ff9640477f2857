from __future__ import annotations

from typing import Iterable

from timegrid.core.exceptions import StructuralError, ValidationError
from timegrid.schemas.grid import (
    ContinuationCell,
    DayColumn,
    EmptyCell,
    PeriodRow,
    StartCell,
    WeekGrid,
)
from timegrid.schemas.schedule import Schedule
from timegrid.schemas.timeslot import DAY_NAMES, PERIOD_TIMES, PERIODS_PER_DAY


class WeekGridBuilder:
    """Lays out one semester week as a 7 x 10 day-by-period matrix.

    Each schedule occupies a StartCell carrying its row span followed by
    ContinuationCells for the rest of its periods. Every input is expected to
    have passed the conflict check already, so any clash found here means bad
    data and raises StructuralError instead of overwriting a cell.
    """

    def build(self, schedules: Iterable[Schedule], semester_week_id: int | None = None) -> WeekGrid:
        cells: dict[int, list] = {
            day: [EmptyCell() for _ in range(PERIODS_PER_DAY)] for day in DAY_NAMES
        }

        for schedule in sorted(schedules, key=lambda item: item.id):
            if semester_week_id is not None and schedule.semester_week_id != semester_week_id:
                raise StructuralError(
                    f"Schedule {schedule.id} belongs to week {schedule.semester_week_id}, not {semester_week_id}",
                    details={"schedule_id": schedule.id, "semester_week_id": schedule.semester_week_id},
                )
            try:
                slot = schedule.timeslot.ensure_valid()
            except ValidationError as exc:
                raise StructuralError(
                    f"Schedule {schedule.id} has an invalid timeslot",
                    details={"schedule_id": schedule.id, **exc.details},
                ) from exc

            column = cells[slot.day_of_week]
            for period in slot.periods():
                occupant = column[period - 1]
                if not isinstance(occupant, EmptyCell):
                    raise StructuralError(
                        f"Schedule {schedule.id} overlaps schedule {_occupant_id(occupant)} "
                        f"on {DAY_NAMES[slot.day_of_week]} period {period}",
                        details={
                            "schedule_id": schedule.id,
                            "occupied_by": _occupant_id(occupant),
                            "day_of_week": slot.day_of_week,
                            "period": period,
                        },
                    )

            column[slot.start_period - 1] = StartCell(schedule=schedule, row_span=slot.total_period)
            for period in range(slot.start_period + 1, slot.end_period + 1):
                column[period - 1] = ContinuationCell(schedule_id=schedule.id)

        return WeekGrid(
            semester_week_id=semester_week_id,
            periods=[
                PeriodRow(period=period, start_time=start, end_time=end)
                for period, (start, end) in PERIOD_TIMES.items()
            ],
            days=[
                DayColumn(day_of_week=day, label=label, cells=cells[day])
                for day, label in DAY_NAMES.items()
            ],
        )


def _occupant_id(cell: StartCell | ContinuationCell) -> int:
    if isinstance(cell, StartCell):
        return cell.schedule.id
    return cell.schedule_id
