"""Dashboard counters for the default user."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from src.app.analytics.repository import AnalyticsRepository
from src.app.api.deps import get_analytics_repository, get_current_user_id
from src.app.schemas.common import ApiResponse, ok

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=ApiResponse)
async def dashboard_stats(
    user_id: str = Depends(get_current_user_id),
    analytics: AnalyticsRepository = Depends(get_analytics_repository),
) -> ApiResponse:
    stats = await analytics.dashboard_stats(user_id)
    return ok(stats.model_dump(mode="json"))
