import pytest

from classgrid.core.exceptions import InvalidIntervalError, InvalidTimeFormatError
from classgrid.services.time_interval import (
    MINUTES_PER_DAY,
    TimeInterval,
    format_minutes,
    minutes_of,
    overlaps,
    parse_time_to_minutes,
)


def test_parse_and_format_known_values():
    assert parse_time_to_minutes("00:00") == 0
    assert parse_time_to_minutes("07:00") == 420
    assert parse_time_to_minutes("23:59") == 1439
    assert format_minutes(540) == "09:00"
    assert format_minutes(5) == "00:05"


@pytest.mark.parametrize("value", ["7:00", "24:00", "12:60", "12-30", "", "ab:cd", " 09:00", "09:00 "])
def test_parse_rejects_malformed_text(value):
    with pytest.raises(InvalidTimeFormatError):
        parse_time_to_minutes(value)


def test_invalid_time_format_is_a_value_error():
    with pytest.raises(ValueError):
        parse_time_to_minutes("25:00")


@pytest.mark.parametrize("value", [-1, MINUTES_PER_DAY, 2000])
def test_format_rejects_out_of_range_minutes(value):
    with pytest.raises(InvalidTimeFormatError):
        format_minutes(value)


def test_round_trip_over_every_minute_of_the_day():
    for minute in range(MINUTES_PER_DAY):
        text = format_minutes(minute)
        assert parse_time_to_minutes(text) == minute
        assert format_minutes(parse_time_to_minutes(text)) == text


def test_interval_requires_end_after_start():
    with pytest.raises(InvalidIntervalError):
        TimeInterval(600, 600)
    with pytest.raises(InvalidIntervalError):
        TimeInterval.from_strings("10:00", "09:00")
    with pytest.raises(InvalidIntervalError):
        TimeInterval(-5, 10)


def test_interval_may_end_at_midnight():
    interval = TimeInterval(23 * 60, MINUTES_PER_DAY)
    assert minutes_of(interval) == 60


def test_interval_strings_and_duration():
    interval = TimeInterval.from_strings("09:00", "10:30")
    assert interval.start_time == "09:00"
    assert interval.end_time == "10:30"
    assert minutes_of(interval) == 90


def test_touching_intervals_do_not_overlap():
    first = TimeInterval.from_strings("08:00", "09:00")
    second = TimeInterval.from_strings("09:00", "10:00")
    third = TimeInterval.from_strings("08:30", "09:30")

    assert not overlaps(first, second)
    assert overlaps(first, third)
    assert overlaps(third, second)
    assert first.contains(480)
    assert not first.contains(540)
