"""Read, list and publish operations on stored content."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog

from src.app.content.schemas import (
    ContentRecord,
    ContentStatus,
    ContentType,
    PublishPlatform,
    PublishResult,
)
from src.app.core.exceptions import NotFoundError, ValidationError

if TYPE_CHECKING:
    from src.app.content.repository import ContentRepository

logger = structlog.get_logger(__name__)

# Compose pages the client redirects to with the content payload
PUBLISH_URLS: dict[PublishPlatform, str] = {
    PublishPlatform.MEDIUM: "https://medium.com/new-story",
    PublishPlatform.DEVTO: "https://dev.to/new",
    PublishPlatform.HASHNODE: "https://hashnode.com/new",
    PublishPlatform.LINKEDIN: "https://www.linkedin.com/sharing/share-offsite/",
}


class ContentService:
    """Content reads (view-counted), listing and publishing.

    Args:
        repository: ContentRepository for record access.
    """

    def __init__(self, repository: ContentRepository) -> None:
        self._repository = repository

    async def read_content(self, content_id: str) -> ContentRecord:
        """Return a record and count the read. Each call adds exactly one view."""
        record = await self._repository.increment_views(content_id)
        if record is None:
            raise NotFoundError(f"Content not found: {content_id}")
        return record

    async def list_contents(
        self,
        user_id: str | None = None,
        content_type: ContentType | None = None,
        category: str | None = None,
        status: ContentStatus | None = None,
    ) -> list[ContentRecord]:
        return await self._repository.list_contents(
            user_id=user_id,
            content_type=content_type,
            category=category,
            status=status,
        )

    async def publish(self, content_id: str, platform: str) -> PublishResult:
        """Mark content PUBLISHED and return the platform compose URL.

        Args:
            content_id: Content UUID string.
            platform: One of medium, devto, hashnode, linkedin.

        Raises:
            ValidationError: Unsupported platform. Status is left unchanged.
            NotFoundError: No such content.
        """
        try:
            target = PublishPlatform((platform or "").strip().lower())
        except ValueError:
            raise ValidationError(f"Unsupported platform: {platform}") from None

        record = await self._repository.update_status(
            content_id,
            ContentStatus.PUBLISHED,
            published_at=datetime.now(timezone.utc),
        )
        if record is None:
            raise NotFoundError(f"Content not found: {content_id}")

        logger.info("content.published", content_id=content_id, platform=target.value)
        return PublishResult(url=PUBLISH_URLS[target], platform=target, content=record)
