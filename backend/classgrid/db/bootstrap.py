from __future__ import annotations

import logging

from sqlalchemy import Connection, inspect, text

from classgrid.db.base import Base
from classgrid.db.session import engine
import classgrid.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "classrooms": {"id", "school_id", "name", "subjects"},
    "class_schedules": {
        "id",
        "school_id",
        "classroom_id",
        "day_of_week",
        "start_time",
        "end_time",
        "is_break_period",
        "break_type",
        "subject_name",
        "teacher_name",
    },
}


def _ensure_classroom_subjects_column() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "classrooms" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("classrooms")}
        if "subjects" in column_names:
            return
        if connection.dialect.name == "postgresql":
            connection.execute(
                text("ALTER TABLE classrooms ADD COLUMN subjects JSONB NOT NULL DEFAULT '[]'::jsonb")
            )
            return
        connection.execute(text("ALTER TABLE classrooms ADD COLUMN subjects JSON NOT NULL DEFAULT '[]'"))


def find_schema_gaps(connection: Connection) -> tuple[list[str], dict[str, list[str]]]:
    """Tables and columns from ``REQUIRED_COLUMNS`` that the database lacks."""
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables = sorted(name for name in REQUIRED_COLUMNS if name not in table_names)
    missing_columns: dict[str, list[str]] = {}
    for table_name, required in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(required - existing)
        if missing:
            missing_columns[table_name] = missing
    return missing_tables, missing_columns


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        missing_tables, missing_columns = find_schema_gaps(connection)
    if missing_tables:
        raise RuntimeError(f"Missing required tables: {', '.join(missing_tables)}")
    if missing_columns:
        flat = [f"{table}.{column}" for table, columns in missing_columns.items() for column in columns]
        raise RuntimeError(f"Missing required columns: {', '.join(flat)}")


def ensure_runtime_schema_compatibility() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        _ensure_classroom_subjects_column()
        _assert_required_columns()
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc
