from pydantic import BaseModel
from typing import Literal, List


class ConflictDetail(BaseModel):
    id: str
    conflict_type: Literal[
        "room_conflict",
        "lecturer_conflict",
        "class_conflict",
    ]
    description: str
    semester_week_id: int
    day_of_week: int
    affected_schedules: List[int]  # Schedule ids involved, ascending


class ConflictReport(BaseModel):
    semester_week_id: int | None = None
    conflicts: List[ConflictDetail]
