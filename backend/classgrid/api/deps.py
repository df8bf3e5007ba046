from collections.abc import Generator

from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from classgrid.db.session import SessionLocal
from classgrid.models.classroom import Classroom


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_classroom(school_id: str, class_id: str, db: Session = Depends(get_db)) -> Classroom:
    classroom = db.execute(
        select(Classroom).where(Classroom.id == class_id, Classroom.school_id == school_id)
    ).scalar_one_or_none()
    if classroom is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    return classroom
