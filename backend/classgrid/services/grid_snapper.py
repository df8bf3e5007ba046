from __future__ import annotations

import math
from typing import Iterable

from classgrid.services.day_window import DayWindow
from classgrid.services.slots import ScheduleSlot
from classgrid.services.time_interval import TimeInterval


def snap_start_minute(window: DayWindow, pointer_fraction: float, snap_minutes: int | None = None) -> int:
    """Nearest grid line (counted from window start) under the pointer.

    The result always leaves room for one full grid step before window end.
    """
    step = snap_minutes or window.snap_minutes
    fraction = max(0.0, min(1.0, pointer_fraction))
    offset = fraction * window.span
    # Round half up, like a browser's Math.round.
    steps = math.floor(offset / step + 0.5)
    last_steps = (window.span - step) // step
    return window.start_minutes + max(0, min(steps, last_steps)) * step


def candidate_interval(
    window: DayWindow,
    pointer_fraction: float,
    *,
    snap_minutes: int | None = None,
    duration_minutes: int | None = None,
) -> TimeInterval:
    step = snap_minutes or window.snap_minutes
    duration = duration_minutes or window.default_duration_minutes
    start = snap_start_minute(window, pointer_fraction, step)
    end = window.clamp(start + duration)
    if end <= start:
        end = start + step
    return TimeInterval(start, end)


def collides(candidate: TimeInterval, existing: Iterable[ScheduleSlot]) -> bool:
    return any(candidate.overlaps(slot.interval) for slot in existing)


def snap_pointer_to_candidate(
    window: DayWindow,
    day_slots: Iterable[ScheduleSlot],
    pointer_fraction: float,
    *,
    snap_minutes: int | None = None,
    duration_minutes: int | None = None,
) -> TimeInterval | None:
    """Candidate interval for a double-click, or None when it would overlap a slot.

    A rejected snap is a normal outcome (the click simply missed a free spot),
    so nothing is raised.
    """
    if pointer_fraction is None or not math.isfinite(pointer_fraction):
        return None
    candidate = candidate_interval(
        window,
        pointer_fraction,
        snap_minutes=snap_minutes,
        duration_minutes=duration_minutes,
    )
    if collides(candidate, day_slots):
        return None
    return candidate
