from __future__ import annotations

from dataclasses import dataclass

from classgrid.core.config import Settings, get_settings
from classgrid.core.exceptions import ConfigurationError
from classgrid.services.time_interval import MINUTES_PER_DAY, clamp, format_minutes, parse_time_to_minutes


@dataclass(frozen=True)
class DayWindow:
    """Visible time range of a day column plus the pointer-interaction grid.

    ``snap_minutes`` is the creation granularity and ``default_duration_minutes``
    the length of a freshly snapped candidate.
    """

    start_minutes: int = 7 * 60
    end_minutes: int = 19 * 60
    snap_minutes: int = 15
    default_duration_minutes: int = 30

    def __post_init__(self) -> None:
        if not 0 <= self.start_minutes < self.end_minutes <= MINUTES_PER_DAY:
            raise ConfigurationError("Day window must satisfy 00:00 <= start < end <= 24:00")
        if self.snap_minutes <= 0 or self.snap_minutes > self.span:
            raise ConfigurationError("Snap granularity must be positive and fit inside the day window")
        if self.default_duration_minutes <= 0:
            raise ConfigurationError("Default slot duration must be positive")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "DayWindow":
        settings = settings or get_settings()
        return cls(
            start_minutes=parse_time_to_minutes(settings.timetable_day_start),
            end_minutes=parse_time_to_minutes(settings.timetable_day_end),
            snap_minutes=settings.timetable_snap_minutes,
            default_duration_minutes=settings.timetable_default_slot_minutes,
        )

    @property
    def span(self) -> int:
        return self.end_minutes - self.start_minutes

    def clamp(self, minute: int) -> int:
        return clamp(minute, self.start_minutes, self.end_minutes)

    def fraction_of(self, minute: int) -> float:
        return (self.clamp(minute) - self.start_minutes) / self.span

    def minute_at(self, fraction: float) -> float:
        return self.start_minutes + fraction * self.span

    def contains(self, minute: int) -> bool:
        return self.start_minutes <= minute <= self.end_minutes

    def now_fraction(self, minute_of_day: int) -> float | None:
        """Top offset of the current-time indicator, or None outside the window."""
        if not self.contains(minute_of_day):
            return None
        return self.fraction_of(minute_of_day)

    def ticks(self, step_minutes: int | None = None) -> list[tuple[str, float]]:
        """Time-axis labels from window start up to (not including) window end."""
        step = step_minutes or self.snap_minutes
        labels: list[tuple[str, float]] = []
        minute = self.start_minutes
        while minute < self.end_minutes:
            labels.append((format_minutes(minute), self.fraction_of(minute)))
            minute += step
        return labels
