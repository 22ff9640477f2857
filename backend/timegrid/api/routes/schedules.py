from fastapi import APIRouter, Depends, status

from timegrid.api.deps import get_scheduling_service
from timegrid.models.schedule import ScheduleStatus
from timegrid.schemas.conflict import ConflictReport
from timegrid.schemas.grid import WeekGrid
from timegrid.schemas.schedule import (
    ConflictCheckRequest,
    ConflictCheckResult,
    Schedule,
    ScheduleCreate,
    ScheduleFilter,
    ScheduleUpdate,
    TransitionRequest,
)
from timegrid.services.scheduling import SchedulingService

router = APIRouter()


@router.post("/check-conflict", response_model=ConflictCheckResult)
def check_conflict(
    payload: ConflictCheckRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> ConflictCheckResult:
    return service.check_conflict(payload, exclude_id=payload.exclude_id)


@router.get("/", response_model=list[Schedule])
def list_schedules(
    semester_week_id: int | None = None,
    day_of_week: int | None = None,
    room_id: str | None = None,
    lecturer_id: str | None = None,
    class_id: str | None = None,
    course_id: str | None = None,
    schedule_status: ScheduleStatus | None = None,
    service: SchedulingService = Depends(get_scheduling_service),
) -> list[Schedule]:
    filters = ScheduleFilter(
        semester_week_id=semester_week_id,
        day_of_week=day_of_week,
        room_id=room_id,
        lecturer_id=lecturer_id,
        class_id=class_id,
        course_id=course_id,
        status=schedule_status,
    )
    return service.list_schedules(filters)


@router.post("/", response_model=Schedule, status_code=status.HTTP_201_CREATED)
def create_schedule(
    payload: ScheduleCreate,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Schedule:
    return service.create_schedule(payload)


@router.get("/weeks/{semester_week_id}/grid", response_model=WeekGrid)
def week_grid(
    semester_week_id: int,
    room_id: str | None = None,
    lecturer_id: str | None = None,
    class_id: str | None = None,
    include_cancelled: bool = False,
    service: SchedulingService = Depends(get_scheduling_service),
) -> WeekGrid:
    return service.build_week_grid(
        semester_week_id,
        room_id=room_id,
        lecturer_id=lecturer_id,
        class_id=class_id,
        include_cancelled=include_cancelled,
    )


@router.get("/weeks/{semester_week_id}/conflicts", response_model=ConflictReport)
def week_conflicts(
    semester_week_id: int,
    service: SchedulingService = Depends(get_scheduling_service),
) -> ConflictReport:
    return service.audit_week(semester_week_id)


@router.get("/{schedule_id}", response_model=Schedule)
def get_schedule(
    schedule_id: int,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Schedule:
    return service.get_schedule(schedule_id)


@router.put("/{schedule_id}", response_model=Schedule)
def update_schedule(
    schedule_id: int,
    payload: ScheduleUpdate,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Schedule:
    return service.reschedule(schedule_id, payload)


@router.post("/{schedule_id}/transition", response_model=Schedule)
def transition_schedule(
    schedule_id: int,
    payload: TransitionRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Schedule:
    return service.transition(schedule_id, payload.status)


@router.patch("/{schedule_id}/cancel", response_model=Schedule)
def cancel_schedule(
    schedule_id: int,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Schedule:
    return service.cancel_schedule(schedule_id)


@router.delete("/{schedule_id}")
def delete_schedule(
    schedule_id: int,
    service: SchedulingService = Depends(get_scheduling_service),
) -> dict:
    service.delete_schedule(schedule_id)
    return {"success": True}
