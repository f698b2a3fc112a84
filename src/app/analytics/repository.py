"""Analytics repository -- event records and dashboard aggregates.

dashboard_stats() reads across the meetings, contents and bots tables with
aggregate queries (count/sum grouped per user).
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator, Callable
from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.analytics.models import AnalyticsModel
from src.app.analytics.schemas import AnalyticsRecord, AnalyticsType, DashboardStats
from src.app.bots.models import BotModel
from src.app.content.models import ContentModel
from src.app.content.schemas import ContentStatus
from src.app.core.database import persistence_errors
from src.app.meetings.models import MeetingModel

logger = structlog.get_logger(__name__)


def _model_to_record(model: AnalyticsModel) -> AnalyticsRecord:
    return AnalyticsRecord(
        id=model.id,
        type=AnalyticsType(model.type),
        data=model.data or {},
        user_id=str(model.user_id),
        content_id=model.content_id,
        created_at=model.created_at,
    )


class AnalyticsRepository:
    """Analytics writes and dashboard reads.

    Args:
        session_factory: Async callable that yields AsyncSession instances.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncGenerator[AsyncSession, None]]
    ) -> None:
        self._session_factory = session_factory

    async def create_record(
        self,
        user_id: str,
        type: AnalyticsType,
        data: dict[str, Any],
        content_id: uuid.UUID | None = None,
    ) -> AnalyticsRecord:
        """Persist one analytics event."""
        async for session in self._session_factory():
            async with persistence_errors("analytics.create"):
                model = AnalyticsModel(
                    user_id=uuid.UUID(user_id),
                    type=type.value,
                    data=data,
                    content_id=content_id,
                )
                session.add(model)
                await session.commit()
                await session.refresh(model)
            logger.debug("analytics.recorded", type=type.value, user_id=user_id)
            return _model_to_record(model)

    async def dashboard_stats(self, user_id: str) -> DashboardStats:
        """Totals for the dashboard: meetings, content, published, views, bots per status."""
        owner = uuid.UUID(user_id)
        async for session in self._session_factory():
            async with persistence_errors("analytics.dashboard_stats"):
                total_meetings = await session.scalar(
                    select(func.count(MeetingModel.id)).where(MeetingModel.user_id == owner)
                )
                total_content = await session.scalar(
                    select(func.count(ContentModel.id)).where(ContentModel.user_id == owner)
                )
                published_content = await session.scalar(
                    select(func.count(ContentModel.id)).where(
                        ContentModel.user_id == owner,
                        ContentModel.status == ContentStatus.PUBLISHED.value,
                    )
                )
                total_views = await session.scalar(
                    select(func.coalesce(func.sum(ContentModel.view_count), 0)).where(
                        ContentModel.user_id == owner
                    )
                )
                bot_rows = (
                    await session.execute(
                        select(BotModel.status, func.count(BotModel.id))
                        .where(BotModel.user_id == owner)
                        .group_by(BotModel.status)
                    )
                ).all()
            return DashboardStats(
                total_meetings=total_meetings or 0,
                total_content=total_content or 0,
                published_content=published_content or 0,
                total_views=int(total_views or 0),
                bots_by_status={status: count for status, count in bot_rows},
            )
