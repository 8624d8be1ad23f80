"""
api/main.py -- FastAPI application entry point for Taskboard.

Run with:  uvicorn api.main:app --reload

Middleware stack (outermost to innermost, see _MIDDLEWARE_STACK):
  1. log_requests          -- method, path, status and latency per request
  2. TrustedHostMiddleware -- rejects requests with unexpected Host headers
  3. CORSMiddleware        -- credentialed CORS for the front-end origin
  4. SlowAPIMiddleware     -- application-wide and per-route rate limits

Each stage either passes the request on unchanged or short-circuits with its
own response (400 bad host, CORS preflight, 429); none of them touch the
session. Session validation is a route dependency (auth/dependencies.py), so
public routes never pay for it.

Lifespan opens the user and task stores on app.state at startup and disposes
their engines at shutdown.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from api.limiter import limiter
from api.models import ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.tasks import router as tasks_router
from api.routes.users import router as users_router
from auth.store import UserStore
from core.config import get_settings
from core.errors import AppError
from tasks.store import TaskStore

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("taskboard.api")

_settings = get_settings()

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the stores before the first request and close them on shutdown."""
    logger.info("Taskboard API starting up (environment=%s)", _settings.environment)
    app.state.user_store = UserStore(_settings.database_url, _settings.db_pool_size)
    app.state.task_store = TaskStore(_settings.database_url, _settings.db_pool_size)
    logger.info("Stores initialized")

    yield

    app.state.user_store.close()
    app.state.task_store.close()
    logger.info("Taskboard API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Taskboard API",
    description="Personal task management: accounts, sessions and owner-scoped tasks.",
    version="1.0.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
# ---------------------------------------------------------------------------


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# Outermost first. add_middleware() wraps whatever is already registered, so
# the list is applied in reverse to make the first entry the outermost layer.
_MIDDLEWARE_STACK: list[tuple[type, dict]] = [
    (BaseHTTPMiddleware, {"dispatch": log_requests}),
    (TrustedHostMiddleware, {"allowed_hosts": _settings.allowed_hosts}),
    (
        CORSMiddleware,
        {
            "allow_origins": [_settings.client_origin],
            "allow_credentials": True,
            "allow_methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
            "max_age": 3600,
        },
    ),
    (SlowAPIMiddleware, {}),
]

for _middleware, _options in reversed(_MIDDLEWARE_STACK):
    app.add_middleware(_middleware, **_options)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(users_router, prefix="/api", tags=["Users"])
app.include_router(tasks_router, prefix="/api", tags=["Tasks"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every error leaves the API as {"message": ..., "fieldErrors"?: {...}} so
# clients parse failures uniformly. Domain errors are raised once, where they
# are detected, and rendered only here.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str, field_errors: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, field_errors=field_errors).to_content(),
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error(exc.status_code, exc.message, exc.field_errors)


@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with Retry-After when a rate limit is exceeded.

    Declared sync on purpose: SlowAPIMiddleware calls this handler directly
    and uses the return value as the response.
    """
    retry_after = int(getattr(exc, "retry_after", 60) or 60)
    response = _error(429, "Too many requests from this IP, please try again later")
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with one message per field when the request shape is wrong.

    Covers JSON that is not an object, wrong JSON types and non-integer path
    ids. Field-level domain rules are reported the same way by InvalidInput.
    """
    field_errors: dict[str, str] = {}
    for error in exc.errors():
        loc = [part for part in error.get("loc", ()) if isinstance(part, str) and part not in ("body", "query", "path")]
        field = loc[-1] if loc else "body"
        field_errors.setdefault(field, error.get("msg", "Invalid value"))
    return _error(400, "Validation Error", field_errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (unknown route, wrong method) in the same envelope."""
    if exc.status_code == 404:
        return _error(404, f"Not Found - {request.url.path}")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The traceback goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "Internal Server Error")


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py so it is reachable regardless of router state.
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness."""
    return HealthResponse()
