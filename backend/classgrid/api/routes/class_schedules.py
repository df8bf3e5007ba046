import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from classgrid.api.deps import get_classroom, get_db
from classgrid.models.class_schedule import ClassSchedule, DayOfWeek
from classgrid.models.classroom import Classroom
from classgrid.schemas.class_schedule import (
    MessageOut,
    ScheduleBase,
    ScheduleCreate,
    ScheduleEnvelope,
    ScheduleListEnvelope,
    ScheduleOut,
    ScheduleUpdate,
)
from classgrid.services.time_interval import parse_time_to_minutes

logger = logging.getLogger(__name__)

router = APIRouter()

DAY_ORDER = {day: index for index, day in enumerate(DayOfWeek)}

SCHEDULE_FIELDS = (
    "day_of_week",
    "start_time",
    "end_time",
    "is_break_period",
    "break_type",
    "teacher_name",
    "subject_name",
)


def to_schedule_out(record: ClassSchedule) -> ScheduleOut:
    return ScheduleOut(
        schedule_id=record.id,
        day_of_week=record.day_of_week,
        start_time=record.start_time,
        end_time=record.end_time,
        is_break_period=record.is_break_period,
        break_type=record.break_type,
        teacher_name=record.teacher_name,
        subject_name=record.subject_name,
        created_at=record.created_at,
    )


def list_class_schedules(db: Session, classroom: Classroom) -> list[ClassSchedule]:
    records = db.execute(
        select(ClassSchedule).where(
            ClassSchedule.classroom_id == classroom.id,
            ClassSchedule.school_id == classroom.school_id,
        )
    ).scalars()
    return sorted(
        records,
        key=lambda item: (
            DAY_ORDER[item.day_of_week],
            parse_time_to_minutes(item.start_time),
            parse_time_to_minutes(item.end_time),
        ),
    )


def get_schedule_record(db: Session, classroom: Classroom, schedule_id: str) -> ClassSchedule:
    record = db.get(ClassSchedule, schedule_id)
    if record is None or record.classroom_id != classroom.id or record.school_id != classroom.school_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule not found")
    return record


def ensure_subject_taught(classroom: Classroom, payload: ScheduleBase) -> None:
    if payload.is_break_period:
        return
    taught = {str(item.get("subjectName", "")).strip() for item in classroom.subjects or []}
    taught.discard("")
    if taught and payload.subject_name not in taught:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Subject {payload.subject_name} is not taught in class {classroom.name}",
        )


@router.get("/schools/{school_id}/classes/{class_id}/schedules", response_model=ScheduleListEnvelope)
def list_schedules(
    classroom: Classroom = Depends(get_classroom),
    db: Session = Depends(get_db),
) -> ScheduleListEnvelope:
    records = list_class_schedules(db, classroom)
    return ScheduleListEnvelope(
        message="Schedules retrieved successfully",
        data=[to_schedule_out(record) for record in records],
    )


@router.post(
    "/schools/{school_id}/classes/{class_id}/schedules",
    response_model=ScheduleEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def create_schedule(
    payload: ScheduleCreate,
    classroom: Classroom = Depends(get_classroom),
    db: Session = Depends(get_db),
) -> ScheduleEnvelope:
    ensure_subject_taught(classroom, payload)
    record = ClassSchedule(
        school_id=classroom.school_id,
        classroom_id=classroom.id,
        **{name: getattr(payload, name) for name in SCHEDULE_FIELDS},
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(
        "Created schedule %s for class %s on %s %s-%s",
        record.id,
        classroom.id,
        record.day_of_week.value,
        record.start_time,
        record.end_time,
    )
    return ScheduleEnvelope(message="Schedule created successfully", data=to_schedule_out(record))


@router.get("/schools/{school_id}/classes/{class_id}/schedules/{schedule_id}", response_model=ScheduleEnvelope)
def get_schedule(
    schedule_id: str,
    classroom: Classroom = Depends(get_classroom),
    db: Session = Depends(get_db),
) -> ScheduleEnvelope:
    record = get_schedule_record(db, classroom, schedule_id)
    return ScheduleEnvelope(message="Schedule retrieved successfully", data=to_schedule_out(record))


@router.put("/schools/{school_id}/classes/{class_id}/schedules/{schedule_id}", response_model=MessageOut)
def update_schedule(
    schedule_id: str,
    payload: ScheduleUpdate,
    classroom: Classroom = Depends(get_classroom),
    db: Session = Depends(get_db),
) -> MessageOut:
    record = get_schedule_record(db, classroom, schedule_id)

    merged = {name: getattr(record, name) for name in SCHEDULE_FIELDS}
    merged.update(payload.model_dump(exclude_unset=True))
    try:
        validated = ScheduleCreate.model_validate(merged)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    ensure_subject_taught(classroom, validated)

    for name in SCHEDULE_FIELDS:
        setattr(record, name, getattr(validated, name))
    db.commit()
    logger.info("Updated schedule %s for class %s", schedule_id, classroom.id)
    # The update contract answers with a message only; clients re-fetch the record when they need it.
    return MessageOut(message="Schedule updated successfully")


@router.delete("/schools/{school_id}/classes/{class_id}/schedules/{schedule_id}", response_model=MessageOut)
def delete_schedule(
    schedule_id: str,
    classroom: Classroom = Depends(get_classroom),
    db: Session = Depends(get_db),
) -> MessageOut:
    record = get_schedule_record(db, classroom, schedule_id)
    db.delete(record)
    db.commit()
    logger.info("Deleted schedule %s for class %s", schedule_id, classroom.id)
    return MessageOut(message="Schedule deleted successfully")
