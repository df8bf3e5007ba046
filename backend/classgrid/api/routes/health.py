from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from classgrid.core.exceptions import AppError
from classgrid.db.bootstrap import find_schema_gaps
from classgrid.db.session import engine
from classgrid.services.day_window import DayWindow
from classgrid.services.time_interval import format_minutes

logger = logging.getLogger(__name__)

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _database_report() -> dict:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            missing_tables, missing_columns = find_schema_gaps(connection)
    except SQLAlchemyError as exc:
        logger.warning("Readiness probe could not reach the database: %s", exc)
        return {"ok": False, "schema_ok": False, "missing_tables": [], "missing_columns": {}, "error": str(exc)}
    return {
        "ok": True,
        "schema_ok": not missing_tables and not missing_columns,
        "missing_tables": missing_tables,
        "missing_columns": missing_columns,
        "error": None,
    }


def _timetable_report() -> dict:
    try:
        window = DayWindow.from_settings()
    except AppError as exc:
        return {"ok": False, "error": exc.message}
    return {
        "ok": True,
        "day_start": format_minutes(window.start_minutes),
        "day_end": format_minutes(window.end_minutes),
        "snap_minutes": window.snap_minutes,
        "default_slot_minutes": window.default_duration_minutes,
    }


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live() -> dict:
    return {"status": "ok", "timestamp": _now()}


@router.get("/health/ready")
def health_ready() -> JSONResponse:
    database = _database_report()
    timetable = _timetable_report()
    ready = database["ok"] and database["schema_ok"] and timetable["ok"]
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ok" if ready else "degraded",
            "timestamp": _now(),
            "database": database,
            "timetable": timetable,
        },
    )
