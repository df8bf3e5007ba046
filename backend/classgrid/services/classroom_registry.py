from __future__ import annotations

import logging
from typing import Protocol

import httpx
from pydantic import ValidationError

from classgrid.core.exceptions import StorageFailure
from classgrid.schemas.classroom import SubjectListOut

logger = logging.getLogger(__name__)


class ClassroomRegistry(Protocol):
    async def subjects_for_class(self, class_id: str, school_id: str) -> list[str]: ...


class HttpClassroomRegistry:
    """Reads the subjects taught in a class from the classrooms API."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def subjects_for_class(self, class_id: str, school_id: str) -> list[str]:
        url = f"/classrooms/{school_id}/classes/{class_id}/subjects"
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            listing = SubjectListOut.model_validate(response.json())
        except httpx.HTTPError as exc:
            logger.warning("Classroom registry lookup %s failed: %s", url, exc)
            raise StorageFailure("Classroom registry is unreachable", {"error": str(exc)}) from exc
        except (ValidationError, ValueError) as exc:
            raise StorageFailure("Invalid response format", {"error": str(exc)}) from exc
        return [item.subject_name for item in listing.subjects]
