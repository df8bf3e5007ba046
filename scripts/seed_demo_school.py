"""Seed a demo class with a week of lessons and breaks, including overlapping slots.

Run:
  PYTHONPATH=backend python scripts/seed_demo_school.py
"""

from __future__ import annotations

import os

from sqlalchemy import select

from classgrid.db.bootstrap import ensure_runtime_schema_compatibility
from classgrid.db.session import SessionLocal
from classgrid.models.class_schedule import BreakType, ClassSchedule, DayOfWeek
from classgrid.models.classroom import Classroom

SCHOOL_ID = os.getenv("DEMO_SCHOOL_ID", "demo-school")
CLASS_NAME = os.getenv("DEMO_CLASS_NAME", "Grade 7")

SUBJECTS = [
    {"subjectName": "Mathematics", "teacherName": "Ms. Rao"},
    {"subjectName": "Science", "teacherName": "Mr. Iyer"},
    {"subjectName": "English", "teacherName": "Mrs. Das"},
    {"subjectName": "History", "teacherName": "Mr. Khan"},
]

# (start, end, subject index or break type)
DAILY_PLAN: list[tuple[str, str, int | BreakType]] = [
    ("08:00", "08:15", BreakType.assembly),
    ("08:15", "09:00", 0),
    ("09:00", "09:45", 1),
    ("09:45", "10:00", BreakType.short_break),
    ("10:00", "10:45", 2),
    ("10:45", "11:30", 3),
    ("12:30", "13:15", BreakType.lunch),
]

# Parallel lab group on Wednesday, to exercise the overlap columns.
EXTRA_SLOTS: list[tuple[DayOfWeek, str, str, int]] = [
    (DayOfWeek.wednesday, "09:30", "10:15", 0),
    (DayOfWeek.wednesday, "09:15", "11:00", 2),
]


def _upsert_classroom(session) -> Classroom:
    classroom = session.execute(
        select(Classroom).where(Classroom.school_id == SCHOOL_ID, Classroom.name == CLASS_NAME)
    ).scalar_one_or_none()
    if classroom is None:
        classroom = Classroom(school_id=SCHOOL_ID, name=CLASS_NAME, division="A", class_teacher="Ms. Rao")
        session.add(classroom)
    classroom.subjects = SUBJECTS
    session.flush()
    return classroom


def _schedule(classroom: Classroom, day: DayOfWeek, start: str, end: str, entry: int | BreakType) -> ClassSchedule:
    record = ClassSchedule(
        school_id=classroom.school_id,
        classroom_id=classroom.id,
        day_of_week=day,
        start_time=start,
        end_time=end,
    )
    if isinstance(entry, BreakType):
        record.is_break_period = True
        record.break_type = entry
    else:
        record.is_break_period = False
        record.subject_name = SUBJECTS[entry]["subjectName"]
        record.teacher_name = SUBJECTS[entry]["teacherName"]
    return record


def main() -> None:
    ensure_runtime_schema_compatibility()
    with SessionLocal() as session:
        classroom = _upsert_classroom(session)
        existing = session.execute(
            select(ClassSchedule).where(ClassSchedule.classroom_id == classroom.id)
        ).scalars()
        for record in existing:
            session.delete(record)

        count = 0
        for day in DayOfWeek:
            for start, end, entry in DAILY_PLAN:
                session.add(_schedule(classroom, day, start, end, entry))
                count += 1
        for day, start, end, entry in EXTRA_SLOTS:
            session.add(_schedule(classroom, day, start, end, entry))
            count += 1
        session.commit()

        print(f"Seeded {count} schedule slots for {CLASS_NAME} (school={SCHOOL_ID}, class={classroom.id})")


if __name__ == "__main__":
    main()
