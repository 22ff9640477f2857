from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timegrid.core.exceptions import RepositoryError, ScheduleNotFoundError
from timegrid.models.schedule import ScheduleRecord, ScheduleStatus
from timegrid.schemas.schedule import Schedule, ScheduleCreate, ScheduleFilter

logger = logging.getLogger(__name__)


class ScheduleRepository(Protocol):
    """Source of existing schedules for the conflict check and the week grid.

    Implementations raise RepositoryError when the store cannot be read;
    they must never answer a failed read with an empty list.
    """

    def fetch_by_week_and_day(self, semester_week_id: int, day_of_week: int) -> list[Schedule]: ...

    def fetch_by_week(self, semester_week_id: int) -> list[Schedule]: ...

    def get(self, schedule_id: int) -> Schedule | None: ...

    def add(self, payload: ScheduleCreate, status: ScheduleStatus) -> Schedule: ...

    def save(self, schedule: Schedule) -> Schedule: ...

    def delete(self, schedule_id: int) -> bool: ...

    def search(self, filters: ScheduleFilter) -> list[Schedule]: ...


class SqlAlchemyScheduleRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def fetch_by_week_and_day(self, semester_week_id: int, day_of_week: int) -> list[Schedule]:
        return self.search(ScheduleFilter(semester_week_id=semester_week_id, day_of_week=day_of_week))

    def fetch_by_week(self, semester_week_id: int) -> list[Schedule]:
        return self.search(ScheduleFilter(semester_week_id=semester_week_id))

    def get(self, schedule_id: int) -> Schedule | None:
        try:
            record = self.db.get(ScheduleRecord, schedule_id)
        except SQLAlchemyError as exc:
            raise self._failure("read", exc, schedule_id=schedule_id) from exc
        return Schedule.model_validate(record) if record is not None else None

    def search(self, filters: ScheduleFilter) -> list[Schedule]:
        query = select(ScheduleRecord)
        for field, value in filters.model_dump(exclude_none=True).items():
            query = query.where(getattr(ScheduleRecord, field) == value)
        query = query.order_by(
            ScheduleRecord.semester_week_id,
            ScheduleRecord.day_of_week,
            ScheduleRecord.start_period,
            ScheduleRecord.id,
        )
        try:
            records = list(self.db.execute(query).scalars())
        except SQLAlchemyError as exc:
            raise self._failure("read", exc, **filters.model_dump(mode="json", exclude_none=True)) from exc
        return [Schedule.model_validate(record) for record in records]

    def add(self, payload: ScheduleCreate, status: ScheduleStatus) -> Schedule:
        record = ScheduleRecord(**payload.model_dump(), status=status)
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise self._failure("write", exc) from exc
        return Schedule.model_validate(record)

    def save(self, schedule: Schedule) -> Schedule:
        try:
            record = self.db.get(ScheduleRecord, schedule.id)
            if record is None:
                raise ScheduleNotFoundError(schedule.id)
            for key, value in schedule.model_dump(exclude={"id"}).items():
                setattr(record, key, value)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise self._failure("write", exc, schedule_id=schedule.id) from exc
        return Schedule.model_validate(record)

    def delete(self, schedule_id: int) -> bool:
        try:
            record = self.db.get(ScheduleRecord, schedule_id)
            if record is None:
                return False
            self.db.delete(record)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise self._failure("write", exc, schedule_id=schedule_id) from exc
        return True

    @staticmethod
    def _failure(operation: str, exc: SQLAlchemyError, **context) -> RepositoryError:
        logger.error("Schedule store %s failed (%s): %s", operation, context, exc)
        return RepositoryError(
            f"Could not {operation} schedules",
            details={"operation": operation, **context},
        )
