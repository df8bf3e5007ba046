import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from classgrid.api.deps import get_classroom, get_db
from classgrid.models.classroom import Classroom
from classgrid.schemas.classroom import (
    ClassroomCreate,
    ClassroomListOut,
    ClassroomOut,
    SubjectAssignment,
    SubjectListOut,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def to_classroom_out(classroom: Classroom) -> ClassroomOut:
    return ClassroomOut(
        class_id=classroom.id,
        school_id=classroom.school_id,
        name=classroom.name,
        division=classroom.division,
        class_teacher=classroom.class_teacher,
        subjects=[SubjectAssignment.model_validate(item) for item in classroom.subjects or []],
    )


@router.get("/classrooms/{school_id}/classes", response_model=ClassroomListOut)
def list_classes(school_id: str, db: Session = Depends(get_db)) -> ClassroomListOut:
    classrooms = db.execute(
        select(Classroom).where(Classroom.school_id == school_id).order_by(Classroom.name)
    ).scalars()
    return ClassroomListOut(school_id=school_id, classes=[to_classroom_out(item) for item in classrooms])


@router.post("/classrooms/{school_id}/classes", response_model=ClassroomOut, status_code=status.HTTP_201_CREATED)
def create_class(school_id: str, payload: ClassroomCreate, db: Session = Depends(get_db)) -> ClassroomOut:
    classroom = Classroom(
        school_id=school_id,
        name=payload.name,
        division=payload.division,
        class_teacher=payload.class_teacher,
        subjects=[item.model_dump(by_alias=True) for item in payload.subjects],
    )
    db.add(classroom)
    db.commit()
    db.refresh(classroom)
    logger.info("Created class %s (%s) for school %s", classroom.id, classroom.name, school_id)
    return to_classroom_out(classroom)


@router.get("/classrooms/{school_id}/classes/{class_id}/subjects", response_model=SubjectListOut)
def list_class_subjects(classroom: Classroom = Depends(get_classroom)) -> SubjectListOut:
    return SubjectListOut(
        class_id=classroom.id,
        subjects=[SubjectAssignment.model_validate(item) for item in classroom.subjects or []],
    )
