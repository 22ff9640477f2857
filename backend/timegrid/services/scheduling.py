from __future__ import annotations

import logging

from timegrid.core.config import get_settings
from timegrid.core.exceptions import (
    ConflictError,
    GridScopeError,
    InvalidTransitionError,
    ScheduleNotFoundError,
    StructuralError,
)
from timegrid.models.schedule import ScheduleStatus
from timegrid.schemas.conflict import ConflictReport
from timegrid.schemas.grid import WeekGrid
from timegrid.schemas.schedule import (
    ConflictCheckResult,
    Schedule,
    ScheduleCandidate,
    ScheduleCreate,
    ScheduleFilter,
    ScheduleUpdate,
)
from timegrid.services import status_machine
from timegrid.services.bucket_lock import BucketLockRegistry, get_bucket_locks
from timegrid.services.conflict_service import ConflictDetector, conflict_reasons
from timegrid.services.repository import ScheduleRepository
from timegrid.services.week_grid import WeekGridBuilder

logger = logging.getLogger(__name__)


class SchedulingService:
    """Entry point used by the API layer.

    Fetches from the repository, runs the pure conflict/grid/status logic and
    writes back. Creating or moving an entry holds the (week, day) bucket lock
    across the conflict check and the write.
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        *,
        locks: BucketLockRegistry | None = None,
        lock_timeout: float | None = None,
    ) -> None:
        self.repository = repository
        self.locks = locks or get_bucket_locks()
        self.lock_timeout = lock_timeout if lock_timeout is not None else get_settings().bucket_lock_timeout_seconds
        self.detector = ConflictDetector()
        self.grid_builder = WeekGridBuilder()

    def get_schedule(self, schedule_id: int) -> Schedule:
        schedule = self.repository.get(schedule_id)
        if schedule is None:
            raise ScheduleNotFoundError(schedule_id)
        return schedule

    def list_schedules(self, filters: ScheduleFilter) -> list[Schedule]:
        return self.repository.search(filters)

    def check_conflict(self, candidate: ScheduleCandidate, exclude_id: int | None = None) -> ConflictCheckResult:
        # Reject malformed input before touching the store.
        candidate.timeslot.ensure_valid()
        existing = self.repository.fetch_by_week_and_day(candidate.semester_week_id, candidate.day_of_week)
        conflict = self.detector.check(candidate, existing, exclude_id=exclude_id)
        if conflict is None:
            return ConflictCheckResult(has_conflict=False)
        return ConflictCheckResult(
            has_conflict=True,
            conflict=conflict,
            reasons=conflict_reasons(candidate, conflict),
        )

    def create_schedule(self, payload: ScheduleCreate) -> Schedule:
        payload.timeslot.ensure_valid()
        with self.locks.hold(payload.semester_week_id, payload.day_of_week, timeout=self.lock_timeout):
            result = self.check_conflict(payload)
            if result.has_conflict:
                logger.info(
                    "Rejected schedule for course %s in week %s: conflicts with schedule %s (%s)",
                    payload.course_id,
                    payload.semester_week_id,
                    result.conflict.id,
                    ", ".join(result.reasons),
                )
                raise ConflictError(result.conflict, result.reasons)
            schedule = self.repository.add(payload, status_machine.INITIAL_STATUS)
        logger.info(
            "Created schedule %s (week %s, %s)",
            schedule.id,
            schedule.semester_week_id,
            schedule.timeslot.describe(),
        )
        return schedule

    def reschedule(self, schedule_id: int, payload: ScheduleUpdate) -> Schedule:
        current = self.get_schedule(schedule_id)
        if current.status != ScheduleStatus.PENDING:
            raise InvalidTransitionError(
                current.status.value,
                current.status.value,
                message=f"Only pending schedules can be rescheduled (schedule {schedule_id} is {current.status.value})",
            )
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        moves_week = changes.get("semester_week_id", current.semester_week_id) != current.semester_week_id
        if moves_week and "semester_week_label" not in changes:
            # The old label names the old week.
            changes["semester_week_label"] = None
        updated = current.model_copy(update=changes)
        updated.timeslot.ensure_valid()
        with self.locks.hold(updated.semester_week_id, updated.day_of_week, timeout=self.lock_timeout):
            result = self.check_conflict(updated, exclude_id=schedule_id)
            if result.has_conflict:
                logger.info(
                    "Rejected move of schedule %s: conflicts with schedule %s (%s)",
                    schedule_id,
                    result.conflict.id,
                    ", ".join(result.reasons),
                )
                raise ConflictError(result.conflict, result.reasons)
            saved = self.repository.save(updated)
        logger.info("Rescheduled schedule %s to week %s, %s", saved.id, saved.semester_week_id, saved.timeslot.describe())
        return saved

    def transition(self, schedule_id: int, target: ScheduleStatus) -> Schedule:
        current = self.get_schedule(schedule_id)
        moved = status_machine.transition(current, target)
        saved = self.repository.save(moved)
        logger.info("Schedule %s moved from %s to %s", schedule_id, current.status.value, saved.status.value)
        return saved

    def cancel_schedule(self, schedule_id: int) -> Schedule:
        return self.transition(schedule_id, ScheduleStatus.CANCELLED)

    def delete_schedule(self, schedule_id: int) -> None:
        # Administrative removal, allowed in every status.
        if not self.repository.delete(schedule_id):
            raise ScheduleNotFoundError(schedule_id)
        logger.info("Deleted schedule %s", schedule_id)

    def build_week_grid(
        self,
        semester_week_id: int,
        *,
        room_id: str | None = None,
        lecturer_id: str | None = None,
        class_id: str | None = None,
        include_cancelled: bool = False,
    ) -> WeekGrid:
        """Grid of one week, optionally narrowed to a room, lecturer or class.

        A grid cell holds a single entry. Scoped to one resource the conflict
        invariant guarantees that. Two entries sharing a cell but no resource
        are legitimate parallel sessions and raise GridScopeError (422) asking
        for a narrower grid; entries that share a resource as well are a
        StructuralError.
        """
        schedules = self.repository.fetch_by_week(semester_week_id)
        selected = [
            schedule
            for schedule in schedules
            if (include_cancelled or not schedule.is_cancelled())
            and (room_id is None or schedule.room_id == room_id)
            and (lecturer_id is None or schedule.lecturer_id == lecturer_id)
            and (class_id is None or schedule.class_id == class_id)
        ]
        try:
            return self.grid_builder.build(selected, semester_week_id=semester_week_id)
        except StructuralError as exc:
            by_id = {schedule.id: schedule for schedule in selected}
            placed = by_id.get(exc.details.get("schedule_id"))
            occupant = by_id.get(exc.details.get("occupied_by"))
            if placed is None or occupant is None or conflict_reasons(placed, occupant):
                raise
            # The first clash was a parallel session; a real conflict may still sit further on.
            if self.detector.audit_week(selected).conflicts:
                raise
            raise GridScopeError(semester_week_id, sorted([occupant.id, placed.id])) from exc

    def audit_week(self, semester_week_id: int) -> ConflictReport:
        report = self.detector.audit_week(self.repository.fetch_by_week(semester_week_id))
        report.semester_week_id = semester_week_id
        if report.conflicts:
            logger.warning("Week %s holds %d conflicting pair(s)", semester_week_id, len(report.conflicts))
        return report
