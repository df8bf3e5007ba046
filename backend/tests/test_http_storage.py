import json

import httpx
import pytest

from classgrid.core.exceptions import StorageFailure
from classgrid.models.class_schedule import BreakType, DayOfWeek
from classgrid.services.classroom_registry import HttpClassroomRegistry
from classgrid.services.day_window import DayWindow
from classgrid.services.schedule_coordinator import ScheduleCoordinator
from classgrid.services.schedule_storage import HttpScheduleStorage, slot_to_payload
from classgrid.services.slots import Break, Lesson, ScheduleSlot, SlotPatch
from classgrid.services.time_interval import TimeInterval

pytestmark = pytest.mark.anyio

SCHOOL_ID = "school-1"


async def create_classroom(api_client):
    response = await api_client.post(
        f"/classrooms/{SCHOOL_ID}/classes",
        json={
            "className": "Grade 7",
            "subjects": [
                {"subjectName": "Mathematics", "teacherName": "Ms. Rao"},
                {"subjectName": "Science", "teacherName": "Mr. Iyer"},
            ],
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["classId"]


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://storage.test/api")


def draft(start="09:00", end="09:45", subject="Mathematics", teacher="Ms. Rao"):
    return ScheduleSlot(
        day_of_week=DayOfWeek.monday,
        interval=TimeInterval.from_strings(start, end),
        kind=Lesson(subject_name=subject, teacher_name=teacher),
    )


async def test_coordinator_round_trip_over_http(api_client):
    class_id = await create_classroom(api_client)
    storage = HttpScheduleStorage(api_client)
    registry = HttpClassroomRegistry(api_client)
    coordinator = ScheduleCoordinator(
        storage,
        class_id=class_id,
        school_id=SCHOOL_ID,
        window=DayWindow(),
        allowed_subjects=await registry.subjects_for_class(class_id, SCHOOL_ID),
    )

    assert coordinator.allowed_subjects == ["Mathematics", "Science"]
    assert (await coordinator.load()).slots == ()

    created = await coordinator.create(draft())
    assert created.id is not None

    updated = await coordinator.update(
        created.id,
        SlotPatch(interval=TimeInterval.from_strings("10:00", "10:45"), kind=Lesson("Science", "Mr. Iyer")),
    )
    assert updated.interval.start_time == "10:00"
    assert updated.kind == Lesson("Science", "Mr. Iyer")

    listed = (await api_client.get(f"/schools/{SCHOOL_ID}/classes/{class_id}/schedules")).json()["data"]
    assert [(item["startTime"], item["subjectName"]) for item in listed] == [("10:00", "Science")]

    await coordinator.remove(created.id)
    assert coordinator.timetable.slots == ()
    assert (await storage.list_for_class(class_id, SCHOOL_ID)) == []


async def test_break_slot_survives_round_trip(api_client):
    class_id = await create_classroom(api_client)
    storage = HttpScheduleStorage(api_client)
    lunch = ScheduleSlot(
        day_of_week=DayOfWeek.friday,
        interval=TimeInterval.from_strings("12:30", "13:15"),
        kind=Break(break_type=BreakType.lunch),
    )

    created = await storage.create(class_id, SCHOOL_ID, lunch)
    fetched = await storage.get(class_id, SCHOOL_ID, created.id)

    assert fetched == created
    assert fetched.kind == Break(BreakType.lunch)


async def test_server_rejection_is_a_storage_failure(api_client):
    class_id = await create_classroom(api_client)
    storage = HttpScheduleStorage(api_client)

    with pytest.raises(StorageFailure) as exc_info:
        await storage.create(class_id, SCHOOL_ID, draft(subject="Art"))

    assert exc_info.value.details["status_code"] == 422

    with pytest.raises(StorageFailure):
        await storage.delete(class_id, SCHOOL_ID, "missing")


async def test_unknown_class_subjects_are_a_storage_failure(api_client):
    registry = HttpClassroomRegistry(api_client)

    with pytest.raises(StorageFailure):
        await registry.subjects_for_class("missing", SCHOOL_ID)


async def test_transport_error_is_a_storage_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_client(handler) as client:
        storage = HttpScheduleStorage(client)
        with pytest.raises(StorageFailure) as exc_info:
            await storage.list_for_class("class-1", SCHOOL_ID)

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Schedule storage is unreachable"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, content=b"not json"),
        httpx.Response(200, json=["unexpected"]),
        httpx.Response(200, json={"message": "ok"}),
        httpx.Response(200, json={"message": "ok", "data": [{"scheduleId": "1", "dayOfWeek": "Funday"}]}),
    ],
)
async def test_malformed_listing_is_a_storage_failure(response):
    async with mock_client(lambda request: response) as client:
        storage = HttpScheduleStorage(client)
        with pytest.raises(StorageFailure) as exc_info:
            await storage.list_for_class("class-1", SCHOOL_ID)

    assert exc_info.value.message == "Invalid response format"


async def test_update_sends_full_slot_and_reads_message():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"message": "Schedule updated successfully"})

    slot = draft()
    async with mock_client(handler) as client:
        message = await HttpScheduleStorage(client).update("class-1", SCHOOL_ID, "slot-9", slot)

    assert message == "Schedule updated successfully"
    [request] = requests
    assert request.method == "PUT"
    assert request.url.path == f"/api/schools/{SCHOOL_ID}/classes/class-1/schedules/slot-9"
    assert json.loads(request.content) == slot_to_payload(slot)


async def test_owned_client_is_closed_on_exit():
    async with HttpScheduleStorage(base_url="http://storage.test/api", timeout=1.0) as storage:
        client = storage._client

    assert client.is_closed


async def test_injected_client_stays_open():
    async with mock_client(lambda request: httpx.Response(200, json={})) as client:
        async with HttpScheduleStorage(client):
            pass
        assert not client.is_closed
