from functools import lru_cache
import json
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from classgrid.services.time_interval import TIME_PATTERN


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(env_file=str(BACKEND_ENV_FILE), env_file_encoding="utf-8")

    project_name: str = "classgrid API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    database_url: str = "sqlite+pysqlite:///./classgrid.db"

    # Visible day window and interaction grid of the class timetable.
    timetable_day_start: str = "07:00"
    timetable_day_end: str = "19:00"
    timetable_snap_minutes: int = 15
    timetable_default_slot_minutes: int = 30

    # Schedule storage client used by the record coordinator.
    storage_base_url: str = "http://localhost:8000/api"
    storage_timeout_seconds: float = 10.0
    storage_refetch_after_update: bool = True

    max_request_size_bytes: int = 1_000_000
    security_enable_hsts: bool = False
    security_hsts_max_age_seconds: int = 31536000

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("timetable_day_start", "timetable_day_end")
    @classmethod
    def validate_day_bound(cls, value: str) -> str:
        stripped = value.strip()
        if not TIME_PATTERN.match(stripped):
            raise ValueError("Timetable day bounds must be in HH:MM 24-hour format")
        return stripped

    @field_validator("timetable_snap_minutes", "timetable_default_slot_minutes")
    @classmethod
    def validate_positive_minutes(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Timetable minute settings must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
