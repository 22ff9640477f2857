class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Raised when a timeslot is malformed (bad day, period or span)."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)


class ConflictError(AppError):
    """Raised when a candidate schedule collides with an existing one.

    ``conflict`` is the colliding schedule so callers can show what it clashes with.
    """
    def __init__(self, conflict, reasons: list[str]):
        self.conflict = conflict
        self.reasons = reasons
        super().__init__(
            f"Schedule conflicts with schedule {conflict.id} ({', '.join(reasons)})",
            status_code=409,
            details={"conflict": conflict.model_dump(mode="json"), "reasons": reasons},
        )


class StructuralError(AppError):
    """Raised when data that should have been rejected upstream reaches the week grid."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=500, details=details)


class InvalidTransitionError(AppError):
    """Raised when a schedule status change is not allowed."""
    def __init__(self, current: str, target: str, message: str = None):
        self.current = current
        self.target = target
        super().__init__(
            message or f"Cannot move schedule from {current} to {target}",
            status_code=409,
            details={"current": current, "target": target},
        )


class RepositoryError(AppError):
    """Raised when schedules cannot be read from or written to the store."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=503, details=details)


class ScheduleNotFoundError(AppError):
    def __init__(self, schedule_id: int):
        super().__init__(f"Schedule with id {schedule_id} not found", status_code=404)


class ScheduleLockTimeoutError(AppError):
    def __init__(self, semester_week_id: int, day_of_week: int, timeout: float):
        super().__init__(
            "Another change to this week and day is in progress, try again",
            status_code=503,
            details={
                "semester_week_id": semester_week_id,
                "day_of_week": day_of_week,
                "timeout_seconds": timeout,
            },
        )


class GridScopeError(ValidationError):
    """Raised when a week runs parallel sessions and the grid was not narrowed to one resource."""
    def __init__(self, semester_week_id: int, schedule_ids: list[int]):
        super().__init__(
            f"Week {semester_week_id} runs sessions in parallel; "
            "narrow the grid to a room, lecturer or class",
            details={"semester_week_id": semester_week_id, "parallel_schedules": schedule_ids},
        )
