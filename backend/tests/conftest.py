import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timegrid.api.deps import get_db
from timegrid.db.base import Base
from timegrid.main import app
from timegrid.models.schedule import ScheduleStatus
from timegrid.schemas.schedule import Schedule
from timegrid.services.bucket_lock import clear_bucket_locks


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    clear_bucket_locks()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    clear_bucket_locks()


@pytest.fixture
def make_schedule():
    def factory(id=1, **overrides):
        data = {
            "id": id,
            "course_id": "c1",
            "course_section_id": "cs1",
            "room_id": "2B11",
            "lecturer_id": "L1",
            "class_id": "K1",
            "semester_week_id": 36,
            "day_of_week": 1,
            "start_period": 1,
            "total_period": 3,
            "status": ScheduleStatus.PENDING,
        }
        data.update(overrides)
        return Schedule(**data)

    return factory
