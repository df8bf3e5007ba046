from datetime import datetime

import pytest

from classgrid.api.routes.timetable_layout import get_current_time
from classgrid.main import app

SCHOOL_ID = "school-1"


def class_url(classroom, suffix):
    return f"/api/schools/{SCHOOL_ID}/classes/{classroom['classId']}/{suffix}"


def add_lesson(client, classroom, start, end, day="Monday"):
    response = client.post(
        class_url(classroom, "schedules"),
        json={
            "dayOfWeek": day,
            "startTime": start,
            "endTime": end,
            "subjectName": "Science",
            "teacherName": "Mr. Iyer",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["scheduleId"]


def test_layout_of_overlapping_slots(client, classroom):
    first = add_lesson(client, classroom, "09:00", "10:00")
    second = add_lesson(client, classroom, "09:30", "10:30")

    response = client.get(class_url(classroom, "timetable/layout"), params={"day": "Monday"})

    assert response.status_code == 200
    body = response.json()
    assert body["windowStart"] == "07:00"
    assert body["windowEnd"] == "19:00"
    assert body["snapMinutes"] == 15
    assert len(body["ticks"]) == 48
    assert body["ticks"][0] == {"label": "07:00", "topFraction": 0.0}

    [day] = body["days"]
    assert day["day"] == "Monday"
    assert day["hiddenCount"] == 0
    positioned = {item["schedule"]["scheduleId"]: item for item in day["slots"]}
    assert positioned[first]["columnIndex"] == 0
    assert positioned[second]["columnIndex"] == 1
    assert positioned[first]["columnCount"] == 2
    assert positioned[second]["leftFraction"] == pytest.approx(0.5)
    assert positioned[first]["topFraction"] == pytest.approx(120 / 720)
    assert positioned[first]["heightFraction"] == pytest.approx(60 / 720)


def test_layout_of_whole_week(client, classroom):
    add_lesson(client, classroom, "08:00", "09:00", day="Tuesday")

    body = client.get(class_url(classroom, "timetable/layout")).json()

    assert [day["day"] for day in body["days"]] == [
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
    ]
    assert len(body["days"][1]["slots"]) == 1
    assert body["days"][0]["slots"] == []


def test_slots_outside_window_are_counted_as_hidden(client, classroom):
    add_lesson(client, classroom, "19:30", "20:30")
    add_lesson(client, classroom, "06:00", "07:30")

    day = client.get(class_url(classroom, "timetable/layout"), params={"day": "Monday"}).json()["days"][0]

    assert day["hiddenCount"] == 1
    assert len(day["slots"]) == 1
    assert day["slots"][0]["topFraction"] == 0.0


def test_layout_rejects_unknown_day(client, classroom):
    response = client.get(class_url(classroom, "timetable/layout"), params={"day": "Sunday"})

    assert response.status_code == 422


def test_snap_returns_free_candidate(client, classroom):
    response = client.post(
        class_url(classroom, "timetable/snap"),
        json={"day": "Monday", "pointerFraction": (9 * 60 + 7 - 7 * 60) / 720},
    )

    assert response.status_code == 200
    assert response.json() == {"day": "Monday", "candidate": {"startTime": "09:00", "endTime": "09:30"}}


def test_snap_onto_existing_slot_is_rejected(client, classroom):
    add_lesson(client, classroom, "09:00", "09:20")

    response = client.post(
        class_url(classroom, "timetable/snap"),
        json={"day": "Monday", "pointerFraction": (9 * 60 + 7 - 7 * 60) / 720},
    )

    assert response.status_code == 200
    assert response.json()["candidate"] is None


def test_snap_validates_pointer_range(client, classroom):
    response = client.post(class_url(classroom, "timetable/snap"), json={"day": "Monday", "pointerFraction": 1.5})

    assert response.status_code == 422


def test_layout_for_unknown_class_is_not_found(client):
    response = client.get(f"/api/schools/{SCHOOL_ID}/classes/missing/timetable/layout")

    assert response.status_code == 404


def test_layout_marks_now_line_and_ongoing_slot(client, classroom):
    running = add_lesson(client, classroom, "09:30", "10:15")
    later = add_lesson(client, classroom, "10:15", "11:00")
    tuesday = add_lesson(client, classroom, "09:30", "10:15", day="Tuesday")
    # 2026-10-19 is a Monday.
    app.dependency_overrides[get_current_time] = lambda: datetime(2026, 10, 19, 9, 40)

    body = client.get(class_url(classroom, "timetable/layout")).json()

    assert body["today"] == "Monday"
    assert body["nowFraction"] == pytest.approx((9 * 60 + 40 - 7 * 60) / 720)
    ongoing = {
        item["schedule"]["scheduleId"]: item["ongoing"] for day in body["days"] for item in day["slots"]
    }
    assert ongoing == {running: True, later: False, tuesday: False}


def test_slot_is_not_ongoing_at_its_end_minute(client, classroom):
    slot_id = add_lesson(client, classroom, "09:30", "10:15")
    app.dependency_overrides[get_current_time] = lambda: datetime(2026, 10, 19, 10, 15)

    [item] = client.get(class_url(classroom, "timetable/layout"), params={"day": "Monday"}).json()["days"][0]["slots"]

    assert item["schedule"]["scheduleId"] == slot_id
    assert item["ongoing"] is False


def test_now_line_is_hidden_outside_school_hours_and_days(client, classroom):
    add_lesson(client, classroom, "09:30", "10:15")
    app.dependency_overrides[get_current_time] = lambda: datetime(2026, 10, 19, 20, 0)

    evening = client.get(class_url(classroom, "timetable/layout")).json()
    assert evening["today"] == "Monday"
    assert evening["nowFraction"] is None

    # 2026-10-25 is a Sunday.
    app.dependency_overrides[get_current_time] = lambda: datetime(2026, 10, 25, 9, 40)

    sunday = client.get(class_url(classroom, "timetable/layout")).json()
    assert sunday["today"] is None
    assert sunday["nowFraction"] == pytest.approx(160 / 720)
    assert not any(item["ongoing"] for day in sunday["days"] for item in day["slots"])
