from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from timegrid.core.exceptions import ValidationError
from timegrid.schemas.schedule import Schedule
from timegrid.schemas.timeslot import PERIODS_PER_DAY


class EmptyCell(BaseModel):
    kind: Literal["empty"] = "empty"


class StartCell(BaseModel):
    kind: Literal["start"] = "start"
    schedule: Schedule
    row_span: int


class ContinuationCell(BaseModel):
    """Covered by the start cell above it; renderers skip it."""

    kind: Literal["continuation"] = "continuation"
    schedule_id: int


GridCell = Annotated[Union[EmptyCell, StartCell, ContinuationCell], Field(discriminator="kind")]


class PeriodRow(BaseModel):
    period: int
    start_time: str
    end_time: str


class DayColumn(BaseModel):
    day_of_week: int
    label: str
    cells: list[GridCell]


class WeekGrid(BaseModel):
    semester_week_id: int | None = None
    periods: list[PeriodRow]
    days: list[DayColumn]

    def cell(self, day_of_week: int, period: int) -> EmptyCell | StartCell | ContinuationCell:
        if not 1 <= day_of_week <= len(self.days) or not 1 <= period <= PERIODS_PER_DAY:
            raise ValidationError(
                f"No grid cell at day {day_of_week}, period {period}",
                details={"day_of_week": day_of_week, "period": period},
            )
        return self.days[day_of_week - 1].cells[period - 1]

    def start_cells(self) -> list[StartCell]:
        return [cell for day in self.days for cell in day.cells if isinstance(cell, StartCell)]
