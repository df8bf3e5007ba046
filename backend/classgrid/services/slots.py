"""Domain values for one class's weekly timetable.

A ``ScheduleSlot`` without an ``id`` is a local draft that has not been
confirmed by schedule storage yet.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Union

from classgrid.core.exceptions import SlotValidationError
from classgrid.models.class_schedule import BreakType, DayOfWeek
from classgrid.services.time_interval import TimeInterval

WORKING_DAYS: tuple[DayOfWeek, ...] = tuple(DayOfWeek)


@dataclass(frozen=True)
class Lesson:
    subject_name: str
    teacher_name: str


@dataclass(frozen=True)
class Break:
    break_type: BreakType


SlotKind = Union[Lesson, Break]


@dataclass(frozen=True)
class ScheduleSlot:
    day_of_week: DayOfWeek
    interval: TimeInterval
    kind: SlotKind
    id: str | None = None

    @property
    def is_break(self) -> bool:
        return isinstance(self.kind, Break)

    @property
    def is_draft(self) -> bool:
        return self.id is None


@dataclass(frozen=True)
class SlotPatch:
    """Replacement values for an existing slot; ``None`` keeps the current value."""

    day_of_week: DayOfWeek | None = None
    interval: TimeInterval | None = None
    kind: SlotKind | None = None

    def apply(self, slot: ScheduleSlot) -> ScheduleSlot:
        return replace(
            slot,
            day_of_week=self.day_of_week if self.day_of_week is not None else slot.day_of_week,
            interval=self.interval if self.interval is not None else slot.interval,
            kind=self.kind if self.kind is not None else slot.kind,
        )


@dataclass(frozen=True)
class ClassTimetable:
    class_id: str
    school_id: str
    slots: tuple[ScheduleSlot, ...] = field(default_factory=tuple)

    def for_day(self, day: DayOfWeek | str) -> list[ScheduleSlot]:
        day = coerce_day(day)
        return [slot for slot in self.slots if slot.day_of_week == day]

    def get(self, slot_id: str) -> ScheduleSlot | None:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        return None

    def with_slot(self, slot: ScheduleSlot) -> "ClassTimetable":
        """Insert ``slot``, replacing any slot that carries the same id."""
        if slot.id is None:
            return replace(self, slots=self.slots + (slot,))
        kept = tuple(existing for existing in self.slots if existing.id != slot.id)
        return replace(self, slots=kept + (slot,))

    def without(self, slot_id: str) -> "ClassTimetable":
        return replace(self, slots=tuple(slot for slot in self.slots if slot.id != slot_id))


def coerce_day(value: DayOfWeek | str) -> DayOfWeek:
    if isinstance(value, DayOfWeek):
        return value
    try:
        return DayOfWeek(str(value).strip())
    except ValueError as exc:
        raise SlotValidationError("dayOfWeek", f"Invalid day value: {value}") from exc


def coerce_break_type(value: BreakType | str | None) -> BreakType:
    if isinstance(value, BreakType):
        return value
    if value is None or not str(value).strip():
        raise SlotValidationError("breakType", "Break type is required for a break period")
    try:
        return BreakType(str(value).strip())
    except ValueError as exc:
        allowed = ", ".join(item.value for item in BreakType)
        raise SlotValidationError("breakType", f"Break type must be one of: {allowed}") from exc


def validate_slot(slot: ScheduleSlot, allowed_subjects: Iterable[str] | None = None) -> ScheduleSlot:
    """Check the lesson/break invariants and return a normalized copy of ``slot``."""
    day = coerce_day(slot.day_of_week)
    interval = slot.interval
    if not isinstance(interval, TimeInterval):
        raise SlotValidationError("interval", "A start and end time are required")

    kind = slot.kind
    if isinstance(kind, Lesson):
        subject_name = (kind.subject_name or "").strip()
        teacher_name = (kind.teacher_name or "").strip()
        if not subject_name:
            raise SlotValidationError("subjectName", "Please fill in subject name")
        if not teacher_name:
            raise SlotValidationError("teacherName", "Please fill in teacher name")
        if allowed_subjects is not None:
            allowed = {item.strip() for item in allowed_subjects if item and item.strip()}
            if allowed and subject_name not in allowed:
                raise SlotValidationError("subjectName", f"Subject {subject_name} is not taught in this class")
        kind = Lesson(subject_name=subject_name, teacher_name=teacher_name)
    elif isinstance(kind, Break):
        kind = Break(break_type=coerce_break_type(kind.break_type))
    else:
        raise SlotValidationError("kind", "A slot must be either a lesson or a break")

    return replace(slot, day_of_week=day, interval=interval, kind=kind)
