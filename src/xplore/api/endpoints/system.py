# src/xplore/api/endpoints/system.py
"""Health and runtime information endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from xplore.core.settings import settings
from xplore.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])

SessionDep = Annotated[Session, Depends(get_db)]


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@router.get("/health/db", response_model=None)
async def database_health(db: SessionDep) -> dict[str, str] | JSONResponse:
    """Round-trip a trivial query to confirm the store is reachable."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable"},
        )
    return {"status": "ok", "app": settings.app_name, "version": settings.app_version}
