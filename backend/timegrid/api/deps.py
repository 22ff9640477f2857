from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from timegrid.db.session import SessionLocal
from timegrid.services.repository import SqlAlchemyScheduleRepository
from timegrid.services.scheduling import SchedulingService


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    return SchedulingService(SqlAlchemyScheduleRepository(db))
