from __future__ import annotations

from pydantic import BaseModel, Field

from classgrid.models.class_schedule import DayOfWeek
from classgrid.schemas.class_schedule import ScheduleOut


class PositionedSlotOut(BaseModel):
    schedule: ScheduleOut
    top_fraction: float = Field(alias="topFraction", ge=0.0, le=1.0)
    height_fraction: float = Field(alias="heightFraction", ge=0.0, le=1.0)
    left_fraction: float = Field(alias="leftFraction", ge=0.0, le=1.0)
    width_fraction: float = Field(alias="widthFraction", ge=0.0, le=1.0)
    column_index: int = Field(alias="columnIndex", ge=0)
    column_count: int = Field(alias="columnCount", ge=1)
    ongoing: bool = False

    model_config = {"populate_by_name": True}


class DayLayoutOut(BaseModel):
    day: DayOfWeek
    slots: list[PositionedSlotOut] = Field(default_factory=list)
    hidden_count: int = Field(default=0, alias="hiddenCount", ge=0)

    model_config = {"populate_by_name": True}


class TimeTickOut(BaseModel):
    label: str
    top_fraction: float = Field(alias="topFraction", ge=0.0, le=1.0)

    model_config = {"populate_by_name": True}


class TimetableLayoutOut(BaseModel):
    class_id: str = Field(alias="classId")
    window_start: str = Field(alias="windowStart")
    window_end: str = Field(alias="windowEnd")
    snap_minutes: int = Field(alias="snapMinutes")
    ticks: list[TimeTickOut] = Field(default_factory=list)
    today: DayOfWeek | None = None
    now_fraction: float | None = Field(default=None, alias="nowFraction", ge=0.0, le=1.0)
    days: list[DayLayoutOut] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class SnapRequest(BaseModel):
    day: DayOfWeek
    pointer_fraction: float = Field(alias="pointerFraction", ge=0.0, le=1.0)

    model_config = {"populate_by_name": True}


class CandidateIntervalOut(BaseModel):
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")

    model_config = {"populate_by_name": True}


class SnapResponse(BaseModel):
    day: DayOfWeek
    candidate: CandidateIntervalOut | None = None
