"""FastAPI application for the code runner."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import os
import re
import logging
import uuid
from datetime import datetime, timezone
from time import perf_counter
from typing import Any, Dict

from app.core.config import get_settings
from app.common.quota import QuotaError
from app.features.execution.endpoints import router as code_router
from app.features.execution.errors import ExecutionError
from app.features.projects.repository import project_repository

_settings = get_settings()
logging.basicConfig(
    level=getattr(logging, _settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title=_settings.app_name)
_START_TIME = datetime.now(timezone.utc)


# ------------------------
# CORS Setup
# ------------------------
def _split_env_csv(name: str, default: str = ""):
    raw = os.getenv(name, default)
    return [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]


_FRONTEND_ORIGINS = _split_env_csv(
    "ALLOW_ORIGINS",
    "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,http://127.0.0.1:3000",
)

_CORS_ORIGIN_REGEX = re.compile(r"https?://(localhost|127\.0\.0\.1)(:\d+)?", re.I)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_FRONTEND_ORIGINS,
    allow_origin_regex=_CORS_ORIGIN_REGEX.pattern,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------
# Custom Middlewares
# ------------------------
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    incoming = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
    req_id = incoming or str(uuid.uuid4())
    request.state.request_id = req_id
    logger = logging.getLogger("request")
    logger.info("request.start id=%s %s %s", req_id, request.method, request.url.path)
    t0 = perf_counter()
    response = await call_next(request)
    dt = int((perf_counter() - t0) * 1000)
    response.headers["X-Request-Id"] = req_id
    logger.info("request.end id=%s %s %s %dms %s", req_id, request.method, request.url.path, dt, response.status_code)
    return response


# ------------------------
# Error translation
# ------------------------
@app.exception_handler(ExecutionError)
async def _execution_error_handler(request: Request, exc: ExecutionError):
    return JSONResponse(status_code=exc.http_status, content=exc.to_payload())


@app.exception_handler(StarletteHTTPException)
async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=getattr(exc, "headers", None))


@app.exception_handler(QuotaError)
async def _quota_error_handler(request: Request, exc: QuotaError):
    return JSONResponse(status_code=400, content={"message": "Validation failed", "errors": exc.errors})


def _describe_validation_error(err: Dict[str, Any]) -> str:
    loc = [str(part) for part in err.get("loc", ()) if part != "body"]
    field = ".".join(loc)
    return f"{field}: {err.get('msg', 'invalid value')}" if field else str(err.get("msg", "Invalid request body"))


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed", "errors": [_describe_validation_error(e) for e in exc.errors()]},
    )


@app.exception_handler(Exception)
async def _unhandled_error_handler(request: Request, exc: Exception):
    logging.getLogger("request").exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# ------------------------
# Routers
# ------------------------
app.include_router(code_router)


# ------------------------
# Meta endpoints
# ------------------------
@app.get("/", tags=["meta"], summary="API Root")
async def root():
    return {
        "name": _settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "health": "/healthz",
    }


@app.get("/healthz", tags=["meta"], summary="Liveness / readiness probe")
async def healthz() -> Dict[str, Any]:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    uptime_seconds = (now - _START_TIME).total_seconds()
    try:
        database = "configured" if project_repository.enabled else "missing-config"
    except Exception as e:
        database = f"error:{type(e).__name__}"

    return {
        "status": "ok" if settings.execution_configured else "degraded",
        "time_utc": now.isoformat(),
        "uptime_seconds": round(uptime_seconds, 2),
        "version": os.getenv("APP_VERSION", "dev"),
        "environment": "debug" if settings.debug else "prod",
        "components": {
            "execution_service": "configured" if settings.execution_configured else "missing-config",
            "database": database,
        },
    }
