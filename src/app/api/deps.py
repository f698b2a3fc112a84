"""FastAPI dependencies resolving the acting user and services on app.state.

Services are created once in the application lifespan (see src/app/main.py).
A service that was not initialized yields 503.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request, status

from src.app.analytics.repository import AnalyticsRepository
from src.app.bots.manager import BotManager
from src.app.config import get_settings
from src.app.content.generator import ContentGenerator
from src.app.content.service import ContentService
from src.app.meetings.service import MeetingService


def _require_state(request: Request, name: str, label: str) -> Any:
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{label} not initialized",
        )
    return service


async def get_current_user_id() -> str:
    """Single-user mode: every request acts as the configured default user."""
    return get_settings().DEFAULT_USER_ID


def get_bot_manager(request: Request) -> BotManager:
    return _require_state(request, "bot_manager", "Bot manager")


def get_content_generator(request: Request) -> ContentGenerator:
    return _require_state(request, "content_generator", "Content generator")


def get_content_service(request: Request) -> ContentService:
    return _require_state(request, "content_service", "Content service")


def get_meeting_service(request: Request) -> MeetingService:
    return _require_state(request, "meeting_service", "Meeting service")


def get_analytics_repository(request: Request) -> AnalyticsRepository:
    return _require_state(request, "analytics_repository", "Analytics repository")
