"""Client side of the class schedule REST API.

The record coordinator only sees the ``ScheduleStorage`` protocol. Every
transport or backend problem is reported as a single ``StorageFailure``; retry
policy, if any, belongs to the injected ``httpx.AsyncClient`` transport.
"""
from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import ValidationError

from classgrid.core.config import get_settings
from classgrid.core.exceptions import StorageFailure
from classgrid.schemas.class_schedule import ScheduleOut
from classgrid.services.slots import Break, Lesson, ScheduleSlot
from classgrid.services.time_interval import TimeInterval

logger = logging.getLogger(__name__)


class ScheduleStorage(Protocol):
    async def list_for_class(self, class_id: str, school_id: str) -> list[ScheduleSlot]: ...

    async def create(self, class_id: str, school_id: str, draft: ScheduleSlot) -> ScheduleSlot: ...

    async def update(self, class_id: str, school_id: str, slot_id: str, changes: ScheduleSlot) -> str: ...

    async def delete(self, class_id: str, school_id: str, slot_id: str) -> str: ...


@runtime_checkable
class SupportsGet(Protocol):
    async def get(self, class_id: str, school_id: str, slot_id: str) -> ScheduleSlot: ...


def slot_to_payload(slot: ScheduleSlot) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "dayOfWeek": slot.day_of_week.value,
        "startTime": slot.interval.start_time,
        "endTime": slot.interval.end_time,
        "isBreakPeriod": slot.is_break,
    }
    if isinstance(slot.kind, Break):
        payload["breakType"] = slot.kind.break_type.value
        payload["subjectName"] = None
        payload["teacherName"] = None
    else:
        payload["breakType"] = None
        payload["subjectName"] = slot.kind.subject_name
        payload["teacherName"] = slot.kind.teacher_name
    return payload


def slot_from_schedule(schedule: ScheduleOut) -> ScheduleSlot:
    if schedule.is_break_period:
        if schedule.break_type is None:
            raise StorageFailure("Break period returned without a break type", {"scheduleId": schedule.schedule_id})
        kind: Lesson | Break = Break(break_type=schedule.break_type)
    else:
        kind = Lesson(subject_name=schedule.subject_name or "", teacher_name=schedule.teacher_name or "")
    return ScheduleSlot(
        id=schedule.schedule_id,
        day_of_week=schedule.day_of_week,
        interval=TimeInterval.from_strings(schedule.start_time, schedule.end_time),
        kind=kind,
    )


def _parse_slot(data: Any) -> ScheduleSlot:
    try:
        return slot_from_schedule(ScheduleOut.model_validate(data))
    except (ValidationError, ValueError) as exc:
        raise StorageFailure("Invalid response format", {"error": str(exc)}) from exc


class HttpScheduleStorage:
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        if client is None:
            settings = get_settings()
            client = httpx.AsyncClient(
                base_url=base_url or settings.storage_base_url,
                timeout=timeout if timeout is not None else settings.storage_timeout_seconds,
            )
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = client

    async def __aenter__(self) -> "HttpScheduleStorage":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def _endpoint(school_id: str, class_id: str, slot_id: str | None = None) -> str:
        path = f"/schools/{school_id}/classes/{class_id}/schedules"
        if slot_id is not None:
            path = f"{path}/{slot_id}"
        return path

    async def _request(self, method: str, url: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning("Schedule storage %s %s failed with HTTP %d", method, url, status_code)
            raise StorageFailure(
                f"Schedule storage rejected the request (HTTP {status_code})",
                {"status_code": status_code, "body": exc.response.text[:500]},
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Schedule storage %s %s failed: %s", method, url, exc)
            raise StorageFailure("Schedule storage is unreachable", {"error": str(exc)}) from exc

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            raise StorageFailure("Invalid response format") from exc
        if not isinstance(body, dict):
            raise StorageFailure("Invalid response format")
        return body

    @staticmethod
    def _data(body: dict[str, Any]) -> Any:
        if "data" not in body or body["data"] is None:
            raise StorageFailure("Invalid response format")
        return body["data"]

    async def list_for_class(self, class_id: str, school_id: str) -> list[ScheduleSlot]:
        body = await self._request("GET", self._endpoint(school_id, class_id))
        data = self._data(body)
        if not isinstance(data, list):
            raise StorageFailure("Invalid response format")
        return [_parse_slot(item) for item in data]

    async def get(self, class_id: str, school_id: str, slot_id: str) -> ScheduleSlot:
        body = await self._request("GET", self._endpoint(school_id, class_id, slot_id))
        return _parse_slot(self._data(body))

    async def create(self, class_id: str, school_id: str, draft: ScheduleSlot) -> ScheduleSlot:
        body = await self._request("POST", self._endpoint(school_id, class_id), slot_to_payload(draft))
        return _parse_slot(self._data(body))

    async def update(self, class_id: str, school_id: str, slot_id: str, changes: ScheduleSlot) -> str:
        body = await self._request("PUT", self._endpoint(school_id, class_id, slot_id), slot_to_payload(changes))
        return str(body.get("message") or "Schedule updated successfully")

    async def delete(self, class_id: str, school_id: str, slot_id: str) -> str:
        body = await self._request("DELETE", self._endpoint(school_id, class_id, slot_id))
        return str(body.get("message") or "Schedule deleted successfully")
