import pytest
from pydantic import ValidationError

from classgrid.core.config import Settings
from classgrid.core.exceptions import ConfigurationError
from classgrid.services.day_window import DayWindow


def test_default_window_covers_school_day():
    window = DayWindow()

    assert window.span == 720
    assert window.fraction_of(7 * 60) == 0
    assert window.fraction_of(19 * 60) == 1
    assert window.fraction_of(13 * 60) == pytest.approx(0.5)


def test_fraction_is_clamped_outside_window():
    window = DayWindow()

    assert window.fraction_of(5 * 60) == 0
    assert window.fraction_of(21 * 60) == 1
    assert window.minute_at(0.5) == 13 * 60


def test_from_settings_reads_timetable_options():
    settings = Settings(
        timetable_day_start="08:30",
        timetable_day_end="16:30",
        timetable_snap_minutes=10,
        timetable_default_slot_minutes=40,
    )

    window = DayWindow.from_settings(settings)

    assert window == DayWindow(start_minutes=510, end_minutes=990, snap_minutes=10, default_duration_minutes=40)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"start_minutes": 600, "end_minutes": 600},
        {"start_minutes": 700, "end_minutes": 600},
        {"start_minutes": 0, "end_minutes": 1500},
        {"snap_minutes": 0},
        {"start_minutes": 600, "end_minutes": 610, "snap_minutes": 15},
        {"default_duration_minutes": 0},
    ],
)
def test_invalid_window_is_a_configuration_error(kwargs):
    with pytest.raises(ConfigurationError):
        DayWindow(**kwargs)


def test_ticks_run_from_start_to_before_end():
    window = DayWindow(start_minutes=8 * 60, end_minutes=9 * 60, snap_minutes=15)

    ticks = window.ticks()

    assert [label for label, _ in ticks] == ["08:00", "08:15", "08:30", "08:45"]
    assert [fraction for _, fraction in ticks] == pytest.approx([0, 0.25, 0.5, 0.75])


def test_ticks_accept_custom_step():
    assert len(DayWindow().ticks(60)) == 12


def test_now_fraction_is_hidden_outside_window():
    window = DayWindow()

    assert window.now_fraction(6 * 60) is None
    assert window.now_fraction(20 * 60) is None
    assert window.now_fraction(10 * 60) == pytest.approx(180 / 720)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"timetable_day_start": "7am"},
        {"timetable_day_end": "24:00"},
        {"timetable_snap_minutes": 0},
        {"timetable_default_slot_minutes": -30},
    ],
)
def test_settings_reject_malformed_timetable_options(kwargs):
    with pytest.raises(ValidationError):
        Settings(**kwargs)
