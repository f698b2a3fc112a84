"""Shared test fixtures.

Provides:
- In-memory repository doubles for content, bots, meetings and analytics
- A fake LLM service returning canned completions
- Factories for GenerationRequest and BotCreate

No database and no network: every test runs against these doubles.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest

from src.app.analytics.schemas import AnalyticsRecord, AnalyticsType, DashboardStats
from src.app.bots.schemas import BotRecord, BotStatus, TranscriptionType
from src.app.content.schemas import (
    ContentRecord,
    ContentStatus,
    ContentType,
    GeneratedContent,
    GenerationRequest,
)
from src.app.core.exceptions import PersistenceError
from src.app.meetings.schemas import Meeting, MeetingCreate, MeetingStatus

USER_ID = "507f1f77-bcf8-6cd7-9943-9011a0b1c2d3"


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ── Repository Doubles ──────────────────────────────────────────────────────


class InMemoryContentRepository:
    """ContentRepository double keyed by content id string."""

    def __init__(self) -> None:
        self.records: dict[str, ContentRecord] = {}
        self.fail_writes = False

    async def create_content(
        self,
        user_id: str,
        content_type: ContentType,
        generated: GeneratedContent,
        meeting_id: uuid.UUID | None = None,
    ) -> ContentRecord:
        if self.fail_writes:
            raise PersistenceError("Database operation failed: content.create")
        now = _now()
        record = ContentRecord(
            id=uuid.uuid4(),
            user_id=user_id,
            meeting_id=meeting_id,
            content_type=content_type,
            title=generated.title,
            content=generated.content,
            summary=generated.summary,
            key_takeaways=list(generated.key_takeaways),
            tags=list(generated.tags),
            seo_metadata=generated.seo_metadata,
            category=generated.category,
            created_at=now,
            updated_at=now,
        )
        self.records[str(record.id)] = record
        return record

    async def get_content(self, content_id: str) -> ContentRecord | None:
        return self.records.get(content_id)

    async def increment_views(self, content_id: str) -> ContentRecord | None:
        record = self.records.get(content_id)
        if record is None:
            return None
        updated = record.model_copy(update={"view_count": record.view_count + 1})
        self.records[content_id] = updated
        return updated

    async def update_status(
        self,
        content_id: str,
        status: ContentStatus,
        published_at: datetime | None = None,
    ) -> ContentRecord | None:
        record = self.records.get(content_id)
        if record is None:
            return None
        changes: dict[str, Any] = {"status": status, "updated_at": _now()}
        if published_at is not None:
            changes["published_at"] = published_at
        updated = record.model_copy(update=changes)
        self.records[content_id] = updated
        return updated

    async def list_contents(
        self,
        user_id: str | None = None,
        content_type: ContentType | None = None,
        category: str | None = None,
        status: ContentStatus | None = None,
    ) -> list[ContentRecord]:
        return [
            r
            for r in self.records.values()
            if (user_id is None or r.user_id == user_id)
            and (content_type is None or r.content_type == content_type)
            and (category is None or r.category == category)
            and (status is None or r.status == status)
        ]


class InMemoryBotRepository:
    """BotRepository double keyed by provider bot_id."""

    def __init__(self) -> None:
        self.records: dict[str, BotRecord] = {}
        self.fail_writes = False

    async def create_bot(
        self,
        user_id: str,
        bot_id: str,
        name: str,
        meeting_url: str,
        status: BotStatus = BotStatus.JOINING,
        transcript_id: str | None = None,
        transcription_type: TranscriptionType = TranscriptionType.POST_MEETING,
    ) -> BotRecord:
        if self.fail_writes:
            raise PersistenceError("Database operation failed: bot.create")
        now = _now()
        record = BotRecord(
            id=uuid.uuid4(),
            bot_id=bot_id,
            user_id=user_id,
            name=name,
            meeting_url=meeting_url,
            status=status,
            transcript_id=transcript_id,
            transcription_type=transcription_type,
            created_at=now,
            updated_at=now,
        )
        self.records[bot_id] = record
        return record

    async def get_bot(self, bot_id: str) -> BotRecord | None:
        return self.records.get(bot_id)

    async def list_bots(self, user_id: str) -> list[BotRecord]:
        return [r for r in self.records.values() if r.user_id == user_id]

    async def update_bot(
        self,
        bot_id: str,
        status: BotStatus | None = None,
        transcript_id: str | None = None,
        metadata: dict | None = None,
    ) -> BotRecord | None:
        record = self.records.get(bot_id)
        if record is None:
            return None
        changes: dict[str, Any] = {"updated_at": _now()}
        if status is not None:
            changes["status"] = status
        if transcript_id is not None:
            changes["transcript_id"] = transcript_id
        if metadata:
            changes["metadata"] = {**record.metadata, **metadata}
        updated = record.model_copy(update=changes)
        self.records[bot_id] = updated
        return updated

    async def delete_bot(self, bot_id: str) -> bool:
        if self.fail_writes:
            raise PersistenceError("Database operation failed: bot.delete")
        return self.records.pop(bot_id, None) is not None

    async def count_by_status(self, user_id: str) -> dict[str, int]:
        counts: dict[str, int] = {}
        for record in await self.list_bots(user_id):
            counts[record.status.value] = counts.get(record.status.value, 0) + 1
        return counts


class InMemoryMeetingRepository:
    def __init__(self) -> None:
        self.records: list[Meeting] = []

    async def create_meeting(
        self,
        user_id: str,
        data: MeetingCreate,
        status: MeetingStatus,
        metadata: dict[str, Any],
    ) -> Meeting:
        now = _now()
        meeting = Meeting(
            id=uuid.uuid4(),
            user_id=user_id,
            title=data.title,
            description=data.description,
            meeting_id=data.meeting_id,
            transcript=data.transcript,
            duration=data.duration,
            participants=list(data.participants),
            status=status,
            metadata=metadata,
            created_at=now,
            updated_at=now,
        )
        self.records.append(meeting)
        return meeting

    async def list_meetings(self, user_id: str) -> list[Meeting]:
        return [m for m in self.records if m.user_id == user_id]


class InMemoryAnalyticsRepository:
    def __init__(self) -> None:
        self.records: list[AnalyticsRecord] = []
        self.stats = DashboardStats()

    async def create_record(
        self,
        user_id: str,
        type: AnalyticsType,
        data: dict[str, Any],
        content_id: uuid.UUID | None = None,
    ) -> AnalyticsRecord:
        record = AnalyticsRecord(
            id=uuid.uuid4(),
            type=type,
            data=data,
            user_id=user_id,
            content_id=content_id,
            created_at=_now(),
        )
        self.records.append(record)
        return record

    async def dashboard_stats(self, user_id: str) -> DashboardStats:
        return self.stats


# ── Fixtures ────────────────────────────────────────────────────────────────


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def content_repository() -> InMemoryContentRepository:
    return InMemoryContentRepository()


@pytest.fixture
def bot_repository() -> InMemoryBotRepository:
    return InMemoryBotRepository()


@pytest.fixture
def meeting_repository() -> InMemoryMeetingRepository:
    return InMemoryMeetingRepository()


@pytest.fixture
def analytics_repository() -> InMemoryAnalyticsRepository:
    return InMemoryAnalyticsRepository()


@pytest.fixture
def mock_llm():
    """LLMService double whose completion() returns a JSON content body."""
    llm = AsyncMock()
    llm.available = True
    llm.completion = AsyncMock(
        return_value={
            "content": (
                '{"title": "Scaling the Roadmap", "content": "We agreed on the plan. '
                'Launch is in May. Budget is fixed.", "tags": ["roadmap", "planning"]}'
            ),
            "model": "gemini/gemini-1.5-flash",
            "usage": {"prompt_tokens": 120, "completion_tokens": 80, "total_tokens": 200},
        }
    )
    return llm


@pytest.fixture
def make_request():
    """Factory for GenerationRequest with sensible defaults."""

    def _make(**overrides: Any) -> GenerationRequest:
        fields: dict[str, Any] = {
            "transcript": "Alice: We should ship the beta next week.\nBob: Agreed.",
            "content_type": ContentType.ARTICLE,
        }
        fields.update(overrides)
        return GenerationRequest(**fields)

    return _make
