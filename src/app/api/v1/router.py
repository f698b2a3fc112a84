"""V1 API router -- aggregates all v1 endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from src.app.api.v1 import bots, content, dashboard, health, meetings

router = APIRouter()

router.include_router(health.router)
router.include_router(bots.router)
router.include_router(content.router)
router.include_router(meetings.router)
router.include_router(dashboard.router)
