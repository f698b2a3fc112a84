"""Bot repository -- async CRUD for locally mirrored Meetstream bots.

All lookups key on the provider bot_id. Every database call runs inside
persistence_errors() so store failures surface as PersistenceError.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.bots.models import BotModel
from src.app.bots.schemas import BotRecord, BotStatus, TranscriptionType
from src.app.core.database import persistence_errors

logger = structlog.get_logger(__name__)


def _model_to_bot(model: BotModel) -> BotRecord:
    """Convert BotModel to BotRecord schema."""
    return BotRecord(
        id=model.id,
        bot_id=model.bot_id,
        user_id=str(model.user_id),
        name=model.name,
        meeting_url=model.meeting_url,
        status=BotStatus(model.status),
        transcript_id=model.transcript_id,
        transcription_type=TranscriptionType(model.transcription_type),
        metadata=model.metadata_data or {},
        created_at=model.created_at,
        updated_at=model.updated_at or model.created_at,
    )


class BotRepository:
    """Async CRUD operations for bot records.

    Args:
        session_factory: Async callable that yields AsyncSession instances.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncGenerator[AsyncSession, None]]
    ) -> None:
        self._session_factory = session_factory

    async def create_bot(
        self,
        user_id: str,
        bot_id: str,
        name: str,
        meeting_url: str,
        status: BotStatus = BotStatus.JOINING,
        transcript_id: str | None = None,
        transcription_type: TranscriptionType = TranscriptionType.POST_MEETING,
        metadata: dict | None = None,
    ) -> BotRecord:
        """Insert the local mirror of a freshly created provider bot."""
        async for session in self._session_factory():
            async with persistence_errors("bot.create"):
                model = BotModel(
                    user_id=uuid.UUID(user_id),
                    bot_id=bot_id,
                    name=name,
                    meeting_url=meeting_url,
                    status=status.value,
                    transcript_id=transcript_id,
                    transcription_type=transcription_type.value,
                    metadata_data=metadata or {},
                )
                session.add(model)
                await session.commit()
                await session.refresh(model)
            return _model_to_bot(model)

    async def get_bot(self, bot_id: str) -> BotRecord | None:
        """Get a bot by its provider bot_id."""
        async for session in self._session_factory():
            async with persistence_errors("bot.get"):
                result = await session.execute(
                    select(BotModel).where(BotModel.bot_id == bot_id)
                )
                model = result.scalar_one_or_none()
            return _model_to_bot(model) if model else None

    async def list_bots(self, user_id: str) -> list[BotRecord]:
        """All bots of a user, newest first."""
        async for session in self._session_factory():
            async with persistence_errors("bot.list"):
                result = await session.execute(
                    select(BotModel)
                    .where(BotModel.user_id == uuid.UUID(user_id))
                    .order_by(BotModel.created_at.desc())
                )
                models = result.scalars().all()
            return [_model_to_bot(m) for m in models]

    async def update_bot(
        self,
        bot_id: str,
        status: BotStatus | None = None,
        transcript_id: str | None = None,
        metadata: dict | None = None,
    ) -> BotRecord | None:
        """Update the mirrored state of a bot. Unset arguments are left alone.

        Returns:
            Updated BotRecord, or None if not found.
        """
        async for session in self._session_factory():
            async with persistence_errors("bot.update"):
                result = await session.execute(
                    select(BotModel).where(BotModel.bot_id == bot_id)
                )
                model = result.scalar_one_or_none()
                if model is None:
                    return None
                if status is not None:
                    model.status = status.value
                if transcript_id is not None:
                    model.transcript_id = transcript_id
                if metadata is not None:
                    model.metadata_data = {**(model.metadata_data or {}), **metadata}
                model.updated_at = datetime.now(timezone.utc)
                await session.commit()
                await session.refresh(model)
            return _model_to_bot(model)

    async def delete_bot(self, bot_id: str) -> bool:
        """Delete a bot by provider bot_id. Returns False when nothing matched."""
        async for session in self._session_factory():
            async with persistence_errors("bot.delete"):
                result = await session.execute(
                    delete(BotModel).where(BotModel.bot_id == bot_id)
                )
                await session.commit()
            return result.rowcount > 0

    async def count_by_status(self, user_id: str) -> dict[str, int]:
        """Bot counts per status for a user. Statuses with no bots are omitted."""
        async for session in self._session_factory():
            async with persistence_errors("bot.count_by_status"):
                result = await session.execute(
                    select(BotModel.status, func.count(BotModel.id))
                    .where(BotModel.user_id == uuid.UUID(user_id))
                    .group_by(BotModel.status)
                )
                rows = result.all()
            return {status: count for status, count in rows}
