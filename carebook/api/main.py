"""Carebook FastAPI application entry point.

Start with:
    uvicorn carebook.api.main:app --reload --host 0.0.0.0 --port 8000

Configuration comes from the environment: DATABASE_URL / DB_* for the
database, SCHEDULE_* for the expansion engine, LOG_* for logging.
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from carebook.config import load_postgres_config, load_scheduling_config
from carebook.core.exceptions import CarebookError, ConfigurationError
from carebook.core.logger import configure as configure_logging
from carebook.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    ensure_database_exists,
    init_db,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────
    configure_logging()

    try:
        pg_config = load_postgres_config()
        scheduling_config = load_scheduling_config()
    except ValueError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}", cause=exc) from exc

    await ensure_database_exists(pg_config)
    engine = build_engine(pg_config)
    session_factory = build_session_factory(engine)
    await init_db(pg_config)

    app.state.session_factory = session_factory
    app.state.scheduling_config = scheduling_config
    logger.info(
        "API: scheduling ready (horizon=%d cycles, locale=%s)",
        app.state.scheduling_config.horizon_cycles,
        app.state.scheduling_config.locale,
    )

    yield

    # ── Shutdown ─────────────────────────────────────────────────
    await close_engine()
    logger.info("API: engine disposed")


app = FastAPI(
    title="Carebook API",
    version="1.0.0",
    description="REST API for recurring care schedules: event series, derived events and owner calendars.",
    lifespan=lifespan,
)

# Rate limiter; the limit is configurable via API_RATE_LIMIT env var (default 60/minute)
_api_rate_limit = os.environ.get("API_RATE_LIMIT", "60/minute")
limiter = Limiter(key_func=get_remote_address, default_limits=[_api_rate_limit])
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

_allowed_origins = os.environ.get(
    "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CarebookError)
async def carebook_error_handler(request: Request, exc: CarebookError):
    if exc.http_status >= 500:
        logger.error("API: %s on %s", exc.code, request.url.path, extra={"error": exc.to_dict()})
    else:
        logger.info("API: %s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content={"detail": exc.message, "code": exc.code, "details": exc.details},
    )


# ── Optional API key authentication ──────────────────────────────
# Set ADMIN_API_KEY env var to protect all /api/v1/* endpoints.
# Requests must then include the header:  X-Api-Key: <value>
# If ADMIN_API_KEY is not set the check is skipped (dev/open mode).
_ADMIN_API_KEY = os.environ.get("ADMIN_API_KEY", "").strip() or None


@app.middleware("http")
async def api_key_middleware(request: Request, call_next):
    if _ADMIN_API_KEY and request.url.path.startswith("/api/v1"):
        provided = request.headers.get("X-Api-Key")
        if provided != _ADMIN_API_KEY:
            return JSONResponse(
                status_code=401,
                content={"detail": "Unauthorized: set X-Api-Key header", "code": "UNAUTHORIZED"},
            )
    return await call_next(request)


# ── Routers ───────────────────────────────────────────────────────
from carebook.api.routers import calendar, schedule, series  # noqa: E402

app.include_router(series.router, prefix="/api/v1")
app.include_router(schedule.router, prefix="/api/v1")
app.include_router(calendar.router, prefix="/api/v1")


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
