"""
Lift Planner FastAPI server.
Handles error mapping and the API routers.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..progression import InvalidConfiguration
from .routes.progression import router as r_progression

app = FastAPI(
    title="Lift Planner API",
    description="Next-session load recommendations for strength training",
    version=__version__,
)


@app.exception_handler(InvalidConfiguration)
async def invalid_configuration_handler(request: Request, exc: InvalidConfiguration) -> JSONResponse:
    """
    Planner precondition failures are client errors.
    """
    logging.warning("Rejected request to %s: %s", request.url, exc)
    return JSONResponse(
        {"ok": False, "error": "invalid_configuration", "message": str(exc)},
        status_code=400,
    )


@app.exception_handler(Exception)
async def global_exc_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler: log and return a generic error response.
    """
    logging.exception("Unhandled error in %s: %s", request.url, exc)
    return JSONResponse(
        {"ok": False, "error": "internal_error", "message": "Internal server error"},
        status_code=500,
    )


@app.get("/healthz")
async def healthz() -> dict:
    """
    Health check endpoint.
    """
    return {
        "ok": True,
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/")
async def root() -> dict:
    """
    Root endpoint with API information.
    """
    return {
        "ok": True,
        "name": "Lift Planner API",
        "version": __version__,
        "description": "Next-session load recommendations for strength training",
    }


app.include_router(r_progression, prefix="/api/v1", tags=["progression"])
