"""Meeting repository -- async CRUD for stored meetings.

Uses the session_factory callable pattern. Participants and metadata are
JSON columns. Every database call runs inside persistence_errors() so
store failures surface as PersistenceError.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator, Callable
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.database import persistence_errors
from src.app.meetings.models import MeetingModel
from src.app.meetings.schemas import Meeting, MeetingCreate, MeetingStatus

logger = structlog.get_logger(__name__)


# ── Serialization Helpers ───────────────────────────────────────────────────


def _model_to_meeting(model: MeetingModel) -> Meeting:
    """Convert MeetingModel to Meeting schema."""
    return Meeting(
        id=model.id,
        user_id=str(model.user_id),
        title=model.title,
        description=model.description,
        meeting_id=model.meeting_id,
        transcript=model.transcript,
        duration=model.duration or 0,
        participants=list(model.participants_data or []),
        status=MeetingStatus(model.status),
        metadata=model.metadata_data or {},
        created_at=model.created_at,
        updated_at=model.updated_at or model.created_at,
    )


# ── Repository ──────────────────────────────────────────────────────────────


class MeetingRepository:
    """Async CRUD operations for meetings.

    Args:
        session_factory: Async callable that yields AsyncSession instances.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncGenerator[AsyncSession, None]]
    ) -> None:
        self._session_factory = session_factory

    async def create_meeting(
        self,
        user_id: str,
        data: MeetingCreate,
        status: MeetingStatus,
        metadata: dict[str, Any],
    ) -> Meeting:
        """Create a meeting record.

        Args:
            user_id: Owning user UUID string.
            data: MeetingCreate with transcript and details.
            status: Initial MeetingStatus.
            metadata: Caller metadata merged with derived analysis.

        Returns:
            Meeting with all persisted fields.
        """
        async for session in self._session_factory():
            async with persistence_errors("meeting.create"):
                model = MeetingModel(
                    user_id=uuid.UUID(user_id),
                    title=data.title,
                    description=data.description,
                    meeting_id=data.meeting_id,
                    transcript=data.transcript,
                    duration=data.duration,
                    participants_data=list(data.participants),
                    status=status.value,
                    metadata_data=metadata,
                )
                session.add(model)
                await session.commit()
                await session.refresh(model)
            return _model_to_meeting(model)

    async def list_meetings(self, user_id: str) -> list[Meeting]:
        """All meetings of a user, newest first."""
        async for session in self._session_factory():
            async with persistence_errors("meeting.list"):
                result = await session.execute(
                    select(MeetingModel)
                    .where(MeetingModel.user_id == uuid.UUID(user_id))
                    .order_by(MeetingModel.created_at.desc())
                )
                models = result.scalars().all()
            return [_model_to_meeting(m) for m in models]
