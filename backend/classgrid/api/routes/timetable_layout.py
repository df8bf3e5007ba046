from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from classgrid.api.deps import get_classroom, get_db
from classgrid.api.routes.class_schedules import list_class_schedules, to_schedule_out
from classgrid.models.class_schedule import DayOfWeek
from classgrid.models.classroom import Classroom
from classgrid.schemas.class_schedule import ScheduleOut
from classgrid.schemas.layout import (
    CandidateIntervalOut,
    DayLayoutOut,
    PositionedSlotOut,
    SnapRequest,
    SnapResponse,
    TimeTickOut,
    TimetableLayoutOut,
)
from classgrid.services.day_window import DayWindow
from classgrid.services.grid_snapper import snap_pointer_to_candidate
from classgrid.services.schedule_storage import slot_from_schedule
from classgrid.services.slots import WORKING_DAYS, ClassTimetable
from classgrid.services.time_interval import format_minutes
from classgrid.services.timetable_layout import layout_day

router = APIRouter()


def get_day_window() -> DayWindow:
    return DayWindow.from_settings()


def get_current_time() -> datetime:
    """Local wall-clock time of the school, used for the now line and ongoing slots."""
    return datetime.now()


def school_day_of(moment: datetime) -> DayOfWeek | None:
    weekday = moment.weekday()
    return WORKING_DAYS[weekday] if weekday < len(WORKING_DAYS) else None


def load_timetable(db: Session, classroom: Classroom) -> tuple[ClassTimetable, dict[str, ScheduleOut]]:
    schedules = [to_schedule_out(record) for record in list_class_schedules(db, classroom)]
    timetable = ClassTimetable(class_id=classroom.id, school_id=classroom.school_id)
    for schedule in schedules:
        timetable = timetable.with_slot(slot_from_schedule(schedule))
    return timetable, {schedule.schedule_id: schedule for schedule in schedules}


@router.get("/schools/{school_id}/classes/{class_id}/timetable/layout", response_model=TimetableLayoutOut)
def get_timetable_layout(
    day: DayOfWeek | None = None,
    classroom: Classroom = Depends(get_classroom),
    db: Session = Depends(get_db),
    window: DayWindow = Depends(get_day_window),
    now: datetime = Depends(get_current_time),
) -> TimetableLayoutOut:
    timetable, schedules = load_timetable(db, classroom)
    today = school_day_of(now)
    now_minute = now.hour * 60 + now.minute
    days = [day] if day is not None else list(WORKING_DAYS)

    day_layouts: list[DayLayoutOut] = []
    for current_day in days:
        positioned = layout_day(timetable.for_day(current_day), window)
        visible = [item for item in positioned if item.visible]
        day_layouts.append(
            DayLayoutOut(
                day=current_day,
                hidden_count=len(positioned) - len(visible),
                slots=[
                    PositionedSlotOut(
                        schedule=schedules[item.slot.id],
                        top_fraction=item.top_fraction,
                        height_fraction=item.height_fraction,
                        left_fraction=item.left_fraction,
                        width_fraction=item.width_fraction,
                        column_index=item.column_index,
                        column_count=item.column_count,
                        ongoing=current_day == today and item.slot.interval.contains(now_minute),
                    )
                    for item in visible
                ],
            )
        )

    return TimetableLayoutOut(
        class_id=classroom.id,
        window_start=format_minutes(window.start_minutes),
        window_end=format_minutes(window.end_minutes),
        snap_minutes=window.snap_minutes,
        ticks=[TimeTickOut(label=label, top_fraction=top) for label, top in window.ticks()],
        today=today,
        now_fraction=window.now_fraction(now_minute),
        days=day_layouts,
    )


@router.post("/schools/{school_id}/classes/{class_id}/timetable/snap", response_model=SnapResponse)
def snap_new_slot(
    payload: SnapRequest,
    classroom: Classroom = Depends(get_classroom),
    db: Session = Depends(get_db),
    window: DayWindow = Depends(get_day_window),
) -> SnapResponse:
    timetable, _ = load_timetable(db, classroom)
    candidate = snap_pointer_to_candidate(window, timetable.for_day(payload.day), payload.pointer_fraction)
    if candidate is None:
        return SnapResponse(day=payload.day, candidate=None)
    return SnapResponse(
        day=payload.day,
        candidate=CandidateIntervalOut(start_time=candidate.start_time, end_time=candidate.end_time),
    )
