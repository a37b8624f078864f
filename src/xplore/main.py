# src/xplore/main.py
"""Main entry point for the Xplore application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from xplore.api import (
    admin_router,
    auth_router,
    club_messages_router,
    clubs_router,
    events_router,
    notifications_router,
    system_router,
    users_router,
)
from xplore.core.errors import UPSTREAM_FAILURE_DETAIL
from xplore.core.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("xplore")

# Initialize FastAPI app
app = FastAPI(
    title="Xplore API",
    description="Campus clubs, events and community API",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(system_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(events_router, prefix="/api")
app.include_router(clubs_router, prefix="/api")
app.include_router(club_messages_router, prefix="/api")
app.include_router(notifications_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.exception_handler(SQLAlchemyError)
async def handle_store_failure(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Surface store failures as a generic 500 without leaking details."""
    logger.error(
        "Store failure on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": UPSTREAM_FAILURE_DETAIL},
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("xplore.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
