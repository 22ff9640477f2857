from __future__ import annotations

from pydantic import BaseModel, Field

from timegrid.models.schedule import ScheduleStatus
from timegrid.schemas.timeslot import TimeSlot


class ScheduleCandidate(BaseModel):
    """A proposed weekly meeting, as submitted before it has an id."""

    course_id: str = Field(min_length=1, max_length=36)
    course_section_id: str = Field(min_length=1, max_length=36)
    room_id: str = Field(min_length=1, max_length=36)
    lecturer_id: str = Field(min_length=1, max_length=36)
    class_id: str = Field(min_length=1, max_length=36)
    semester_week_id: int
    # Range checks live in TimeSlot.ensure_valid so they raise the domain ValidationError.
    day_of_week: int
    start_period: int
    total_period: int

    @property
    def timeslot(self) -> TimeSlot:
        return TimeSlot(
            day_of_week=self.day_of_week,
            start_period=self.start_period,
            total_period=self.total_period,
        )


class ScheduleDisplay(BaseModel):
    subject_code: str | None = Field(default=None, max_length=50)
    subject_name: str | None = Field(default=None, max_length=200)
    room_name: str | None = Field(default=None, max_length=100)
    lecturer_name: str | None = Field(default=None, max_length=200)
    class_name: str | None = Field(default=None, max_length=100)
    course_group: int | None = None
    course_section: int | None = None
    semester_week_label: str | None = Field(default=None, max_length=100)


class ScheduleCreate(ScheduleDisplay, ScheduleCandidate):
    pass


class ScheduleUpdate(BaseModel):
    room_id: str | None = Field(default=None, min_length=1, max_length=36)
    lecturer_id: str | None = Field(default=None, min_length=1, max_length=36)
    semester_week_id: int | None = None
    day_of_week: int | None = None
    start_period: int | None = None
    total_period: int | None = None
    room_name: str | None = Field(default=None, max_length=100)
    lecturer_name: str | None = Field(default=None, max_length=200)
    semester_week_label: str | None = Field(default=None, max_length=100)


class Schedule(ScheduleDisplay, ScheduleCandidate):
    id: int
    status: ScheduleStatus = ScheduleStatus.PENDING

    model_config = {"from_attributes": True}

    def is_cancelled(self) -> bool:
        return self.status == ScheduleStatus.CANCELLED


class ScheduleFilter(BaseModel):
    semester_week_id: int | None = None
    day_of_week: int | None = None
    room_id: str | None = None
    lecturer_id: str | None = None
    class_id: str | None = None
    course_id: str | None = None
    status: ScheduleStatus | None = None


class ConflictCheckRequest(ScheduleCandidate):
    exclude_id: int | None = None


class ConflictCheckResult(BaseModel):
    has_conflict: bool
    conflict: Schedule | None = None
    reasons: list[str] = Field(default_factory=list)


class TransitionRequest(BaseModel):
    status: ScheduleStatus
