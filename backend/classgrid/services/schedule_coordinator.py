"""Owner of one class's timetable on the editing side.

The coordinator keeps the authoritative local copy of the slots, validates
every mutation before it reaches storage and only changes local state once
storage has confirmed the request. A slot accepts one in-flight mutation at a
time.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterable, Iterator

from classgrid.core.config import get_settings
from classgrid.core.exceptions import ResourceNotFoundError, SlotBusyError, SlotValidationError, StorageFailure
from classgrid.models.class_schedule import DayOfWeek
from classgrid.services.day_window import DayWindow
from classgrid.services.grid_snapper import snap_pointer_to_candidate
from classgrid.services.schedule_storage import ScheduleStorage, SupportsGet
from classgrid.services.slots import (
    ClassTimetable,
    Lesson,
    ScheduleSlot,
    SlotKind,
    SlotPatch,
    coerce_day,
    validate_slot,
)
from classgrid.services.time_interval import TimeInterval
from classgrid.services.timetable_layout import PositionedSlot, layout_day

logger = logging.getLogger(__name__)


class SlotState(str, Enum):
    draft = "draft"
    pending = "pending"
    confirmed = "confirmed"
    discarded = "discarded"
    removed = "removed"


class ScheduleCoordinator:
    def __init__(
        self,
        storage: ScheduleStorage,
        *,
        class_id: str,
        school_id: str,
        window: DayWindow | None = None,
        allowed_subjects: Iterable[str] | None = None,
        refetch_after_update: bool | None = None,
    ) -> None:
        self._storage = storage
        self._window = window or DayWindow.from_settings()
        self._allowed_subjects = list(allowed_subjects) if allowed_subjects is not None else None
        if refetch_after_update is None:
            refetch_after_update = get_settings().storage_refetch_after_update
        self._refetch_after_update = refetch_after_update
        self._timetable = ClassTimetable(class_id=class_id, school_id=school_id)
        self._states: dict[str, SlotState] = {}
        self._in_flight: set[str] = set()

    @property
    def timetable(self) -> ClassTimetable:
        return self._timetable

    @property
    def window(self) -> DayWindow:
        return self._window

    @property
    def allowed_subjects(self) -> list[str] | None:
        return self._allowed_subjects

    def set_allowed_subjects(self, subjects: Iterable[str] | None) -> None:
        self._allowed_subjects = list(subjects) if subjects is not None else None

    def state_of(self, key: str) -> SlotState | None:
        return self._states.get(key)

    def is_pending(self, key: str) -> bool:
        return key in self._in_flight

    @contextmanager
    def _in_flight_request(self, key: str) -> Iterator[None]:
        if key in self._in_flight:
            raise SlotBusyError(key)
        previous = self._states.get(key)
        self._in_flight.add(key)
        self._states[key] = SlotState.pending
        try:
            yield
        except BaseException:
            if previous is None or previous is SlotState.draft:
                self._states[key] = SlotState.discarded
            else:
                self._states[key] = previous
            raise
        finally:
            self._in_flight.discard(key)

    # Read side

    def slots_for_day(self, day: DayOfWeek | str) -> list[ScheduleSlot]:
        return self._timetable.for_day(day)

    def positioned_slots_for_day(self, day: DayOfWeek | str) -> list[PositionedSlot]:
        return layout_day(self.slots_for_day(day), self._window)

    def snap_pointer_to_candidate(self, day: DayOfWeek | str, pointer_fraction: float) -> TimeInterval | None:
        return snap_pointer_to_candidate(self._window, self.slots_for_day(day), pointer_fraction)

    # Write side

    async def load(self) -> ClassTimetable:
        slots = await self._storage.list_for_class(self._timetable.class_id, self._timetable.school_id)
        timetable = ClassTimetable(class_id=self._timetable.class_id, school_id=self._timetable.school_id)
        for slot in slots:
            timetable = timetable.with_slot(slot)
        self._timetable = timetable
        self._states = {slot.id: SlotState.confirmed for slot in timetable.slots if slot.id is not None}
        return timetable

    async def refresh_slot(self, slot_id: str) -> ScheduleSlot:
        """Replace the local copy of ``slot_id`` with the stored record."""
        if self._timetable.get(slot_id) is None:
            raise ResourceNotFoundError("Schedule", slot_id)
        if not isinstance(self._storage, SupportsGet):
            raise SlotValidationError("scheduleId", "Schedule storage cannot fetch a single slot")
        with self._in_flight_request(slot_id):
            fresh = await self._storage.get(self._timetable.class_id, self._timetable.school_id, slot_id)
        self._timetable = self._timetable.with_slot(fresh)
        self._states[slot_id] = SlotState.confirmed
        return fresh

    def draft_key(self, draft: ScheduleSlot) -> str:
        """State key of an unsaved draft; equal drafts share one key."""
        slot = validate_slot(draft, None)
        if isinstance(slot.kind, Lesson):
            what = f"{slot.kind.subject_name}|{slot.kind.teacher_name}"
        else:
            what = slot.kind.break_type.value
        return f"draft-{slot.day_of_week.value}-{slot.interval.start_time}-{slot.interval.end_time}-{what}"

    async def create(self, draft: ScheduleSlot) -> ScheduleSlot:
        """Send ``draft`` to storage.

        While the request runs, ``state_of(draft_key(draft))`` is pending and a
        second create of an equal draft raises ``SlotBusyError``. A failed
        create leaves the key discarded until the draft is submitted again.
        """
        if not draft.is_draft:
            raise SlotValidationError("scheduleId", "A new slot must not carry an id")
        slot = validate_slot(draft, self._allowed_subjects)
        key = self.draft_key(slot)
        if self.is_pending(key):
            raise SlotBusyError(key)
        self._states[key] = SlotState.draft

        with self._in_flight_request(key):
            confirmed = await self._storage.create(self._timetable.class_id, self._timetable.school_id, slot)

        # Confirmed drafts live on under their storage id.
        del self._states[key]
        self._timetable = self._timetable.with_slot(confirmed)
        if confirmed.id is not None:
            self._states[confirmed.id] = SlotState.confirmed
        return confirmed

    async def update(self, slot_id: str, patch: SlotPatch) -> ScheduleSlot:
        current = self._timetable.get(slot_id)
        if current is None:
            raise ResourceNotFoundError("Schedule", slot_id)
        changed = validate_slot(patch.apply(current), self._allowed_subjects)

        with self._in_flight_request(slot_id):
            await self._storage.update(self._timetable.class_id, self._timetable.school_id, slot_id, changed)
            # Storage answers with a message only; without a re-fetch the sent values are assumed applied verbatim.
            confirmed = changed
            if self._refetch_after_update and isinstance(self._storage, SupportsGet):
                try:
                    confirmed = await self._storage.get(self._timetable.class_id, self._timetable.school_id, slot_id)
                except StorageFailure:
                    logger.warning("Re-fetch of updated schedule slot %s failed; keeping the sent values", slot_id)

        self._timetable = self._timetable.with_slot(confirmed)
        self._states[slot_id] = SlotState.confirmed
        logger.debug("Updated schedule slot %s of class %s", slot_id, self._timetable.class_id)
        return confirmed

    async def remove(self, slot_id: str) -> None:
        if self._timetable.get(slot_id) is None:
            raise ResourceNotFoundError("Schedule", slot_id)

        with self._in_flight_request(slot_id):
            await self._storage.delete(self._timetable.class_id, self._timetable.school_id, slot_id)

        self._timetable = self._timetable.without(slot_id)
        self._states[slot_id] = SlotState.removed

    def draft_from_candidate(self, day: DayOfWeek | str, candidate: TimeInterval, kind: SlotKind) -> ScheduleSlot:
        """Complete a snapped candidate into a draft that ``create`` accepts."""
        return ScheduleSlot(day_of_week=coerce_day(day), interval=candidate, kind=kind)
