"""Content repository -- async CRUD for generated content records.

Uses the session_factory callable pattern. JSON columns use Pydantic
model_dump(mode="json") for save and model_validate() for load. Every
database call runs inside persistence_errors() so store failures surface
as PersistenceError.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.content.models import ContentModel
from src.app.content.schemas import (
    ContentRecord,
    ContentStatus,
    ContentType,
    GeneratedContent,
    SEOMetadata,
)
from src.app.core.database import persistence_errors

logger = structlog.get_logger(__name__)


# ── Serialization Helpers ───────────────────────────────────────────────────


def _parse_uuid(value: str | uuid.UUID) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError):
        return None


def _model_to_record(model: ContentModel) -> ContentRecord:
    """Convert ContentModel to ContentRecord schema."""
    return ContentRecord(
        id=model.id,
        user_id=str(model.user_id),
        meeting_id=model.meeting_id,
        content_type=ContentType(model.content_type),
        status=ContentStatus(model.status),
        title=model.title,
        content=model.content,
        summary=model.summary or "",
        key_takeaways=model.key_takeaways_data or [],
        tags=model.tags_data or [],
        seo_metadata=SEOMetadata.model_validate(model.seo_data) if model.seo_data else None,
        category=model.category,
        view_count=model.view_count or 0,
        published_at=model.published_at,
        created_at=model.created_at,
        updated_at=model.updated_at or model.created_at,
    )


# ── Repository ──────────────────────────────────────────────────────────────


class ContentRepository:
    """Async CRUD operations for content records.

    Args:
        session_factory: Async callable that yields AsyncSession instances.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncGenerator[AsyncSession, None]]
    ) -> None:
        self._session_factory = session_factory

    async def create_content(
        self,
        user_id: str,
        content_type: ContentType,
        generated: GeneratedContent,
        meeting_id: uuid.UUID | None = None,
    ) -> ContentRecord:
        """Persist generated content as a DRAFT record.

        Args:
            user_id: Owning user UUID string.
            content_type: Requested content type.
            generated: Parsed provider output.
            meeting_id: Source meeting, if any.

        Returns:
            ContentRecord with all persisted fields.
        """
        async for session in self._session_factory():
            async with persistence_errors("content.create"):
                model = ContentModel(
                    user_id=uuid.UUID(user_id),
                    meeting_id=meeting_id,
                    content_type=content_type.value,
                    status=ContentStatus.DRAFT.value,
                    title=generated.title,
                    content=generated.content,
                    summary=generated.summary,
                    key_takeaways_data=list(generated.key_takeaways),
                    tags_data=list(generated.tags),
                    seo_data=generated.seo_metadata.model_dump(mode="json"),
                    category=generated.category,
                    view_count=0,
                )
                session.add(model)
                await session.commit()
                await session.refresh(model)
            return _model_to_record(model)

    async def get_content(self, content_id: str) -> ContentRecord | None:
        """Get a content record by ID without touching its view count."""
        parsed = _parse_uuid(content_id)
        if parsed is None:
            return None
        async for session in self._session_factory():
            async with persistence_errors("content.get"):
                result = await session.execute(
                    select(ContentModel).where(ContentModel.id == parsed)
                )
                model = result.scalar_one_or_none()
            return _model_to_record(model) if model else None

    async def increment_views(self, content_id: str) -> ContentRecord | None:
        """Increment view_count by exactly one and return the updated record.

        The increment is evaluated by the database, so concurrent reads
        each count once.

        Returns:
            Updated ContentRecord, or None if not found.
        """
        parsed = _parse_uuid(content_id)
        if parsed is None:
            return None
        async for session in self._session_factory():
            async with persistence_errors("content.increment_views"):
                result = await session.execute(
                    select(ContentModel).where(ContentModel.id == parsed)
                )
                model = result.scalar_one_or_none()
                if model is None:
                    return None
                model.view_count = ContentModel.view_count + 1
                await session.commit()
                await session.refresh(model)
            return _model_to_record(model)

    async def update_status(
        self,
        content_id: str,
        status: ContentStatus,
        published_at: datetime | None = None,
    ) -> ContentRecord | None:
        """Set a record's status (and publish time when given).

        Returns:
            Updated ContentRecord, or None if not found.
        """
        parsed = _parse_uuid(content_id)
        if parsed is None:
            return None
        async for session in self._session_factory():
            async with persistence_errors("content.update_status"):
                result = await session.execute(
                    select(ContentModel).where(ContentModel.id == parsed)
                )
                model = result.scalar_one_or_none()
                if model is None:
                    return None
                model.status = status.value
                if published_at is not None:
                    model.published_at = published_at
                model.updated_at = datetime.now(timezone.utc)
                await session.commit()
                await session.refresh(model)
            return _model_to_record(model)

    async def list_contents(
        self,
        user_id: str | None = None,
        content_type: ContentType | None = None,
        category: str | None = None,
        status: ContentStatus | None = None,
    ) -> list[ContentRecord]:
        """List content records, newest first, with optional filters."""
        async for session in self._session_factory():
            stmt = select(ContentModel)
            if user_id:
                stmt = stmt.where(ContentModel.user_id == uuid.UUID(user_id))
            if content_type:
                stmt = stmt.where(ContentModel.content_type == content_type.value)
            if category:
                stmt = stmt.where(ContentModel.category == category)
            if status:
                stmt = stmt.where(ContentModel.status == status.value)
            stmt = stmt.order_by(ContentModel.created_at.desc())
            async with persistence_errors("content.list"):
                result = await session.execute(stmt)
                models = result.scalars().all()
            return [_model_to_record(m) for m in models]
