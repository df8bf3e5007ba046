"""Calendar-style layout of one class's week.

Every pass is recomputed from scratch: slots of a day are grouped into
overlap clusters, each cluster gets first-fit columns, and each slot is turned
into fractional coordinates against the visible day window.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from classgrid.models.class_schedule import DayOfWeek
from classgrid.services.day_window import DayWindow
from classgrid.services.slots import WORKING_DAYS, ClassTimetable, ScheduleSlot


@dataclass(frozen=True)
class OverlapCluster:
    slots: tuple[ScheduleSlot, ...]
    column_indexes: tuple[int, ...]

    @property
    def column_count(self) -> int:
        return max(self.column_indexes) + 1 if self.column_indexes else 0


@dataclass(frozen=True)
class PositionedSlot:
    slot: ScheduleSlot
    top_fraction: float
    height_fraction: float
    left_fraction: float
    width_fraction: float
    column_index: int
    column_count: int

    @property
    def visible(self) -> bool:
        return self.height_fraction > 0


def _sort_key(slot: ScheduleSlot) -> tuple[int, int]:
    return slot.interval.start_minutes, slot.interval.end_minutes


def group_overlaps(slots: Iterable[ScheduleSlot]) -> list[list[ScheduleSlot]]:
    """Partition a day's slots into maximal transitively-overlapping clusters."""
    clusters: list[list[ScheduleSlot]] = []
    current: list[ScheduleSlot] = []
    current_max_end = 0
    for slot in sorted(slots, key=_sort_key):
        if current and slot.interval.start_minutes < current_max_end:
            current.append(slot)
            current_max_end = max(current_max_end, slot.interval.end_minutes)
            continue
        if current:
            clusters.append(current)
        current = [slot]
        current_max_end = slot.interval.end_minutes
    if current:
        clusters.append(current)
    return clusters


def assign_columns(cluster: Sequence[ScheduleSlot]) -> list[int]:
    """First-fit column per slot; ``cluster`` must already be in (start, end) order."""
    column_end_times: list[int] = []
    indexes: list[int] = []
    for slot in cluster:
        for index, column_end in enumerate(column_end_times):
            if column_end <= slot.interval.start_minutes:
                column_end_times[index] = slot.interval.end_minutes
                indexes.append(index)
                break
        else:
            indexes.append(len(column_end_times))
            column_end_times.append(slot.interval.end_minutes)
    return indexes


def build_clusters(slots: Iterable[ScheduleSlot]) -> list[OverlapCluster]:
    return [
        OverlapCluster(slots=tuple(group), column_indexes=tuple(assign_columns(group)))
        for group in group_overlaps(slots)
    ]


def position_slot(window: DayWindow, slot: ScheduleSlot, column_index: int, column_count: int) -> PositionedSlot:
    start = window.clamp(slot.interval.start_minutes)
    end = window.clamp(slot.interval.end_minutes)
    width = 1 / max(1, column_count)
    return PositionedSlot(
        slot=slot,
        top_fraction=(start - window.start_minutes) / window.span,
        height_fraction=(end - start) / window.span,
        left_fraction=column_index * width,
        width_fraction=width,
        column_index=column_index,
        column_count=column_count,
    )


def layout_day(slots: Iterable[ScheduleSlot], window: DayWindow) -> list[PositionedSlot]:
    positioned: list[PositionedSlot] = []
    for cluster in build_clusters(slots):
        column_count = cluster.column_count
        for slot, column_index in zip(cluster.slots, cluster.column_indexes):
            positioned.append(position_slot(window, slot, column_index, column_count))
    return positioned


def layout_week(timetable: ClassTimetable, window: DayWindow) -> dict[DayOfWeek, list[PositionedSlot]]:
    return {day: layout_day(timetable.for_day(day), window) for day in WORKING_DAYS}
