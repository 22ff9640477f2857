from __future__ import annotations

import logging

from sqlalchemy import inspect

from timegrid.db.base import Base
from timegrid.db.session import engine
import timegrid.models  # noqa: F401  registers tables on Base.metadata

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "schedules": {
        "id",
        "room_id",
        "lecturer_id",
        "class_id",
        "semester_week_id",
        "day_of_week",
        "start_period",
        "total_period",
        "status",
    },
}


def missing_schema_parts(connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables: list[str] = []
    missing_columns: dict[str, list[str]] = {}
    for table_name, columns in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            missing_tables.append(table_name)
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(columns - existing)
        if missing:
            missing_columns[table_name] = missing
    return missing_tables, missing_columns


def ensure_schema() -> None:
    Base.metadata.create_all(bind=engine)
    with engine.connect() as connection:
        missing_tables, missing_columns = missing_schema_parts(connection)
    if missing_tables or missing_columns:
        logger.warning(
            "Schedule schema is incomplete: missing tables=%s, missing columns=%s",
            missing_tables,
            missing_columns,
        )
