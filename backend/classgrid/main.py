import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from classgrid.api.routes import class_schedules, classrooms, health, timetable_layout
from classgrid.core.config import get_settings
from classgrid.core.exceptions import AppError
from classgrid.core.middleware import AccessLogMiddleware, RequestSizeLimitMiddleware, SecurityHeadersMiddleware
from classgrid.db.bootstrap import ensure_runtime_schema_compatibility

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_runtime_schema_compatibility()
    yield


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(AccessLogMiddleware)
app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(SecurityHeadersMiddleware, settings=settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(classrooms.router, prefix=settings.api_prefix, tags=["classrooms"])
app.include_router(class_schedules.router, prefix=settings.api_prefix, tags=["class-schedules"])
app.include_router(timetable_layout.router, prefix=settings.api_prefix, tags=["timetable-layout"])
