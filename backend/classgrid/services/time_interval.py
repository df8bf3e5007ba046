"""Wall-clock arithmetic for the class timetable.

Times travel as ``"HH:MM"`` strings at the API boundary and as integer minute
offsets from midnight everywhere else.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from classgrid.core.exceptions import InvalidIntervalError, InvalidTimeFormatError

MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise InvalidTimeFormatError(value)
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(minutes: int) -> str:
    if isinstance(minutes, bool) or not isinstance(minutes, int) or not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeFormatError(minutes)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


@dataclass(frozen=True, order=True)
class TimeInterval:
    start_minutes: int
    end_minutes: int

    def __post_init__(self) -> None:
        if not 0 <= self.start_minutes < MINUTES_PER_DAY or not 0 < self.end_minutes <= MINUTES_PER_DAY:
            raise InvalidIntervalError(self.start_minutes, self.end_minutes)
        if self.end_minutes <= self.start_minutes:
            raise InvalidIntervalError(self.start_minutes, self.end_minutes)

    @classmethod
    def from_strings(cls, start_time: str, end_time: str) -> "TimeInterval":
        return cls(parse_time_to_minutes(start_time), parse_time_to_minutes(end_time))

    @property
    def start_time(self) -> str:
        return format_minutes(self.start_minutes)

    @property
    def end_time(self) -> str:
        return format_minutes(self.end_minutes)

    def overlaps(self, other: "TimeInterval") -> bool:
        # Touching intervals (a.end == b.start) do not overlap.
        return self.start_minutes < other.end_minutes and other.start_minutes < self.end_minutes

    def contains(self, minute: int) -> bool:
        return self.start_minutes <= minute < self.end_minutes


def minutes_of(interval: TimeInterval) -> int:
    return interval.end_minutes - interval.start_minutes


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    return a.overlaps(b)
