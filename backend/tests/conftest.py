import os
import tempfile

# Point the app's own engine (used by the lifespan bootstrap) at a throwaway database.
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+pysqlite:///{os.path.join(tempfile.mkdtemp(prefix='classgrid-'), 'bootstrap.db')}",
)

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from classgrid.api.deps import get_db  # noqa: E402
from classgrid.db.base import Base  # noqa: E402
from classgrid.main import app  # noqa: E402
import classgrid.models  # noqa: E402,F401

SCHOOL_ID = "school-1"


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestingSessionLocal
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture()
def client(session_factory):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
async def api_client(session_factory):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver/api") as async_client:
        yield async_client


def classroom_payload(**overrides):
    payload = {
        "className": "Grade 7",
        "division": "A",
        "classTeacher": "Ms. Rao",
        "subjects": [
            {"subjectName": "Mathematics", "teacherName": "Ms. Rao"},
            {"subjectName": "Science", "teacherName": "Mr. Iyer"},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def classroom(client):
    response = client.post(f"/api/classrooms/{SCHOOL_ID}/classes", json=classroom_payload())
    assert response.status_code == 201
    return response.json()
