# src/xplore/api/endpoints/admin.py
"""Administrator dashboard endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from xplore.api.dependencies import AdminDep, SessionDep
from xplore.schemas.dashboard import DashboardResponse
from xplore.services.dashboard import DashboardCache, collect_dashboard, get_dashboard_cache

router = APIRouter(prefix="/admin", tags=["admin"])

DashboardCacheDep = Annotated[DashboardCache, Depends(get_dashboard_cache)]


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    _admin: AdminDep,
    db: SessionDep,
    cache: DashboardCacheDep,
) -> DashboardResponse:
    """Aggregate counts and recent records; may be up to a minute stale."""
    return cache.get_or_compute(lambda: collect_dashboard(db))
