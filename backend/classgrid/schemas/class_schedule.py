from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from classgrid.models.class_schedule import BreakType, DayOfWeek
from classgrid.services.time_interval import TIME_PATTERN, parse_time_to_minutes


def _normalize_name(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


class ScheduleBase(BaseModel):
    day_of_week: DayOfWeek = Field(alias="dayOfWeek")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    is_break_period: bool = Field(default=False, alias="isBreakPeriod")
    break_type: BreakType | None = Field(default=None, alias="breakType")
    teacher_name: str | None = Field(default=None, alias="teacherName", max_length=200)
    subject_name: str | None = Field(default=None, alias="subjectName", max_length=200)

    model_config = {
        "populate_by_name": True,
    }

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @field_validator("teacher_name", "subject_name")
    @classmethod
    def normalize_names(cls, value: str | None) -> str | None:
        return _normalize_name(value)

    @model_validator(mode="after")
    def validate_slot_kind(self) -> "ScheduleBase":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("End time must be after start time")
        if self.is_break_period:
            if self.break_type is None:
                raise ValueError("breakType is required for a break period")
            self.teacher_name = None
            self.subject_name = None
        else:
            if not self.subject_name:
                raise ValueError("subjectName is required for a lesson")
            if not self.teacher_name:
                raise ValueError("teacherName is required for a lesson")
            self.break_type = None
        return self


class ScheduleCreate(ScheduleBase):
    pass


class ScheduleUpdate(BaseModel):
    day_of_week: DayOfWeek | None = Field(default=None, alias="dayOfWeek")
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")
    is_break_period: bool | None = Field(default=None, alias="isBreakPeriod")
    break_type: BreakType | None = Field(default=None, alias="breakType")
    teacher_name: str | None = Field(default=None, alias="teacherName", max_length=200)
    subject_name: str | None = Field(default=None, alias="subjectName", max_length=200)

    model_config = {
        "populate_by_name": True,
    }

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str | None) -> str | None:
        if value is not None and not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value


class ScheduleOut(BaseModel):
    schedule_id: str = Field(alias="scheduleId")
    day_of_week: DayOfWeek = Field(alias="dayOfWeek")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    is_break_period: bool = Field(alias="isBreakPeriod")
    break_type: BreakType | None = Field(default=None, alias="breakType")
    teacher_name: str | None = Field(default=None, alias="teacherName")
    subject_name: str | None = Field(default=None, alias="subjectName")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    model_config = {
        "populate_by_name": True,
    }


class ScheduleEnvelope(BaseModel):
    message: str
    data: ScheduleOut


class ScheduleListEnvelope(BaseModel):
    message: str
    data: list[ScheduleOut] = Field(default_factory=list)


class MessageOut(BaseModel):
    message: str
