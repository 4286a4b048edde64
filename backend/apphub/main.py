# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Instantiate the FastAPI app.
* Register CORS and request-logging middleware.
* Convert validation errors into the 400 field/message list, and any
  unexpected exception into an opaque 500.
* Mount the feature routers (auth, admin, locations, catalogs, apps,
  corporate content).
* Seed the default roles (and the configured first admin) on startup.
* Expose a /health endpoint for container liveness checks.

Production note
---------------
CORS origins come from settings.cors_origins.  Set SESSION_COOKIE_SECURE
when serving over HTTPS.
"""

import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from apphub.auth.router import router as auth_router
from apphub.admin.router import router as admin_router
from apphub.locations.router import router as locations_router
from apphub.catalogs.router import router as catalogs_router
from apphub.apps.router import router as apps_router
from apphub.corporate.router import router as corporate_router
from apphub.core.config import settings
from apphub.core.logger import logger
from apphub.core.security import get_client_ip
from apphub.database import SessionLocal
from apphub.seed import seed_defaults

app = FastAPI(title="AppHub Admin API", version="1.0.0")

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
# Credentials are allowed so the browser sends the session cookie.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Bodies (passwords, tokens) are never echoed. The client is the first
# X-Forwarded-For hop when a proxy sits in front.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            get_client_ip(request),
            response.status_code,
            elapsed_ms,
        )
        return response


app.add_middleware(_RequestLogMiddleware)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError):
    """Missing or malformed input → 400 with one entry per offending field."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        message = err.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": ".".join(loc) or "body", "message": message})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def _unhandled_error(request: Request, exc: Exception):
    """Log the full traceback server-side; the caller gets an opaque 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(locations_router)
app.include_router(catalogs_router)
app.include_router(apps_router)
app.include_router(corporate_router)

# ---------------------------------------------------------------------------
# Lifecycle + health check
# ---------------------------------------------------------------------------


@app.on_event("startup")
def _on_startup():
    logger.info("AppHub service starting up")
    db = SessionLocal()
    try:
        seed_defaults(db)
    finally:
        db.close()


@app.on_event("shutdown")
def _on_shutdown():
    logger.info("AppHub service shutting down")


@app.get("/health")
def health():
    return {"status": "ok"}
