"""Tests for BotManager: validation, local mirroring, deletion ordering,
status refresh and transcript normalization.

The Meetstream client is an AsyncMock; the store is the in-memory double.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.bots.manager import BotManager, normalize_transcript
from src.app.bots.schemas import BotCreate, BotStatus, TranscriptionType
from src.app.core.exceptions import (
    NotFoundError,
    PersistenceError,
    ProviderError,
    ValidationError,
)


@pytest.fixture
def meetstream():
    client = MagicMock()
    client.default_webhook_url = ""
    client.create_bot = AsyncMock(return_value={"bot_id": "bot-123", "status": "Joining"})
    client.get_bot_status = AsyncMock(return_value={"status": "active"})
    client.get_bot = AsyncMock(return_value={"bot_id": "bot-123"})
    client.remove_bot = AsyncMock(return_value=None)
    client.get_transcript = AsyncMock(return_value="Hello everyone.")
    return client


@pytest.fixture
def manager(meetstream, bot_repository):
    return BotManager(client=meetstream, repository=bot_repository)


def _create(**overrides) -> BotCreate:
    fields = {"meeting_url": "https://meet.google.com/abc-defg-hij", "name": "Recorder"}
    fields.update(overrides)
    return BotCreate(**fields)


async def _seed(manager, user_id, bot_id="bot-123"):
    manager._client.create_bot.return_value = {"bot_id": bot_id, "status": "joining"}
    return await manager.create_bot(user_id, _create())


# ── Create ──────────────────────────────────────────────────────────────────


class TestCreate:
    async def test_create_mirrors_provider_bot(self, manager, meetstream, bot_repository, user_id):
        record = await manager.create_bot(user_id, _create())

        assert record.bot_id == "bot-123"
        assert record.status == BotStatus.JOINING
        assert record.transcription_type == TranscriptionType.POST_MEETING
        assert "bot-123" in bot_repository.records
        meetstream.create_bot.assert_awaited_once()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"meeting_url": ""},
            {"meeting_url": "   "},
            {"meeting_url": "meet.google.com/abc"},
            {"name": ""},
            {"name": "  "},
        ],
    )
    async def test_invalid_input_makes_no_provider_call(
        self, manager, meetstream, bot_repository, user_id, overrides
    ):
        with pytest.raises(ValidationError):
            await manager.create_bot(user_id, _create(**overrides))

        meetstream.create_bot.assert_not_awaited()
        assert bot_repository.records == {}

    async def test_realtime_requires_webhook(self, manager, meetstream, user_id):
        with pytest.raises(ValidationError, match="webhook"):
            await manager.create_bot(
                user_id, _create(transcription_type=TranscriptionType.REALTIME)
            )

        meetstream.create_bot.assert_not_awaited()

    async def test_realtime_uses_default_webhook(self, manager, meetstream, user_id):
        meetstream.default_webhook_url = "https://hooks.example.com/t"

        await manager.create_bot(user_id, _create(transcription_type=TranscriptionType.REALTIME))

        assert meetstream.create_bot.await_args.kwargs["webhook_url"] == "https://hooks.example.com/t"

    async def test_provider_failure_stores_nothing(self, manager, meetstream, bot_repository, user_id):
        meetstream.create_bot.side_effect = ProviderError("bad link", provider="meetstream")

        with pytest.raises(ProviderError):
            await manager.create_bot(user_id, _create())

        assert bot_repository.records == {}

    async def test_missing_bot_id_is_provider_error(self, manager, meetstream, user_id):
        meetstream.create_bot.return_value = {"status": "joining"}

        with pytest.raises(ProviderError, match="no bot_id"):
            await manager.create_bot(user_id, _create())

    async def test_local_write_failure_surfaces(self, manager, bot_repository, user_id):
        bot_repository.fail_writes = True

        with pytest.raises(PersistenceError):
            await manager.create_bot(user_id, _create())


# ── Read / Refresh ──────────────────────────────────────────────────────────


class TestRead:
    async def test_get_unknown_bot(self, manager):
        with pytest.raises(NotFoundError):
            await manager.get_bot("missing")

    async def test_refresh_mirrors_status(self, manager, meetstream, user_id):
        await _seed(manager, user_id)
        meetstream.get_bot_status.return_value = {"status": "CONNECTED", "transcript_id": "tr-9"}

        record = await manager.refresh_bot("bot-123")

        assert record.status == BotStatus.ACTIVE
        assert record.transcript_id == "tr-9"
        meetstream.get_bot.assert_not_awaited()

    async def test_refresh_reads_transcript_id_from_detail(self, manager, meetstream, user_id):
        await _seed(manager, user_id)
        meetstream.get_bot_status.return_value = "inactive"
        meetstream.get_bot.return_value = {"bot": {"bot_id": "bot-123", "transcript_id": "tr-42"}}

        record = await manager.refresh_bot("bot-123")

        meetstream.get_bot.assert_awaited_once_with("bot-123")
        assert record.status == BotStatus.INACTIVE
        assert record.transcript_id == "tr-42"

    async def test_refresh_skips_detail_when_transcript_known(self, manager, meetstream, user_id):
        await _seed(manager, user_id)
        meetstream.get_bot_status.return_value = {"status": "active", "transcript_id": "tr-1"}
        await manager.refresh_bot("bot-123")
        meetstream.get_bot_status.return_value = "inactive"

        record = await manager.refresh_bot("bot-123")

        meetstream.get_bot.assert_not_awaited()
        assert record.transcript_id == "tr-1"

    async def test_refresh_unknown_status_defaults_to_joining(self, manager, meetstream, user_id):
        await _seed(manager, user_id)
        meetstream.get_bot_status.return_value = "in_waiting_room"

        record = await manager.refresh_bot("bot-123")

        assert record.status == BotStatus.JOINING

    async def test_stats_by_status(self, manager, user_id):
        await _seed(manager, user_id, "b1")
        await _seed(manager, user_id, "b2")

        stats = await manager.get_bot_stats(user_id)

        assert stats.total == 2
        assert stats.by_status == {"JOINING": 2}


# ── Delete ──────────────────────────────────────────────────────────────────


class TestDelete:
    async def test_delete_removes_provider_then_local(self, manager, meetstream, bot_repository, user_id):
        await _seed(manager, user_id)

        await manager.delete_bot("bot-123")

        meetstream.remove_bot.assert_awaited_once_with("bot-123")
        assert "bot-123" not in bot_repository.records

    async def test_provider_delete_failure_keeps_local_record(
        self, manager, meetstream, bot_repository, user_id
    ):
        await _seed(manager, user_id)
        meetstream.remove_bot.side_effect = ProviderError("upstream 500", provider="meetstream")

        with pytest.raises(ProviderError):
            await manager.delete_bot("bot-123")

        assert "bot-123" in bot_repository.records

    async def test_delete_unknown_bot_skips_provider(self, manager, meetstream):
        with pytest.raises(NotFoundError):
            await manager.delete_bot("missing")

        meetstream.remove_bot.assert_not_awaited()


# ── Transcripts ─────────────────────────────────────────────────────────────


class TestTranscripts:
    def test_plain_string(self):
        transcript = normalize_transcript("b1", "  Hello everyone.  ")

        assert transcript.text == "Hello everyone."
        assert len(transcript.segments) == 1

    def test_speaker_segments(self):
        payload = {
            "transcript": [
                {"speaker": "Alice", "text": "We ship Friday."},
                {"speaker_name": "Bob", "transcript": "Agreed."},
                {"speaker": "Carol", "text": ""},
            ]
        }

        transcript = normalize_transcript("b1", payload)

        assert transcript.text == "Alice: We ship Friday.\nBob: Agreed."
        assert [s.speaker for s in transcript.segments] == ["Alice", "Bob"]

    def test_empty_payload(self):
        assert normalize_transcript("b1", {}).text == ""
        assert normalize_transcript("b1", None).text == ""

    async def test_manager_fetches_and_normalizes(self, manager, meetstream):
        transcript = await manager.get_transcript("bot-123")

        assert transcript.bot_id == "bot-123"
        assert transcript.text == "Hello everyone."
        meetstream.get_transcript.assert_awaited_once_with("bot-123")
