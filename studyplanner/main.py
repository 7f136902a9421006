from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studyplanner.api.router import api_router
from studyplanner.core.config import settings
from studyplanner.core.logging import configure_logging, log
from studyplanner.db.init_db import init_db
from studyplanner.db.schema_check import ensure_schema_up_to_date
from studyplanner.db.session import engine
from studyplanner.middleware.request_context import RequestContextMiddleware

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.APP_ENV in ("local", "dev"):
        await init_db(engine)
    else:
        # tables come from alembic in stage/prod
        await ensure_schema_up_to_date(engine, alembic_ini_path="alembic.ini")
    log.info(
        "app_started",
        env=settings.APP_ENV,
        overflow_policy=settings.TIMETABLE_OVERFLOW_POLICY,
        max_slots=settings.TIMETABLE_MAX_SLOTS,
    )
    yield
    await engine.dispose()


app = FastAPI(
    title="StudyPlanner Backend",
    version="0.1.0",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id", "X-Timezone"],
)
app.add_middleware(RequestContextMiddleware)

app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/health")
async def health():
    return {"status": "ok"}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    log.exception("unhandled_exception", request_id=request_id, path=str(request.url))
    return JSONResponse(
        status_code=500,
        content={
            "error": {"code": "internal_error", "message": "Internal server error", "details": {}},
            "request_id": request_id,
        },
        headers={"X-Request-Id": request_id},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    request_id = _request_id(request)
    payload = exc.detail if isinstance(exc.detail, dict) else {
        "error": {"code": "http_error", "message": str(exc.detail), "details": {}},
        "request_id": request_id,
    }
    payload.setdefault("request_id", request_id)
    return JSONResponse(status_code=exc.status_code, content=payload, headers={"X-Request-Id": request_id})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    request_id = _request_id(request)
    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "code": "validation_error",
                "message": "Request validation failed",
                "details": {"errors": jsonable_encoder([{k: v for k, v in e.items() if k != "ctx"} for e in exc.errors()])},
            },
            "request_id": request_id,
        },
        headers={"X-Request-Id": request_id},
    )
