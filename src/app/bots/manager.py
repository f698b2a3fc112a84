"""BotManager for transcription bot lifecycle management.

Creates bots through Meetstream.ai and mirrors each one into a local
BotRecord, refreshes mirrored status, removes bots (provider first, then
the local record) and turns provider transcripts into generation input.

There is no transactional link between the provider and the local store:
- create: if the local write fails after the provider accepted the bot,
  the error is raised and the orphaned provider bot_id is logged
- delete: if provider removal fails, the local record is left intact
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

import structlog

from src.app.bots.schemas import (
    BotCreate,
    BotRecord,
    BotStats,
    BotTranscript,
    TranscriptionType,
    TranscriptSegment,
)
from src.app.bots.status import extract_status, normalize_bot_status
from src.app.core.exceptions import (
    NotFoundError,
    PersistenceError,
    ProviderError,
    ValidationError,
)

if TYPE_CHECKING:
    from src.app.bots.meetstream_client import MeetstreamClient
    from src.app.bots.repository import BotRepository

logger = structlog.get_logger(__name__)

_SEGMENT_TEXT_KEYS = ("text", "transcript", "content", "sentence")
_SEGMENT_SPEAKER_KEYS = ("speaker", "speaker_name", "participant", "name")
_NESTED_TRANSCRIPT_KEYS = ("transcript", "segments", "results", "data", "text")


# ── Transcript Normalization ─────────────────────────────────────────────────


def _segment(item: Any) -> TranscriptSegment | None:
    if isinstance(item, str):
        return TranscriptSegment(text=item.strip()) if item.strip() else None
    if not isinstance(item, dict):
        return None

    text = next((item[k] for k in _SEGMENT_TEXT_KEYS if isinstance(item.get(k), str)), "")
    if not text and isinstance(item.get("words"), list):
        text = " ".join(
            w.get("word", "") if isinstance(w, dict) else str(w) for w in item["words"]
        )
    text = text.strip()
    if not text:
        return None

    speaker = next((item[k] for k in _SEGMENT_SPEAKER_KEYS if item.get(k)), None)
    start = item.get("start") if isinstance(item.get("start"), (int, float)) else None
    end = item.get("end") if isinstance(item.get("end"), (int, float)) else None
    return TranscriptSegment(
        speaker=str(speaker) if speaker is not None else None,
        text=text,
        start=start,
        end=end,
    )


def _segments_from(payload: Any) -> list[TranscriptSegment]:
    if isinstance(payload, str):
        return [TranscriptSegment(text=payload.strip())] if payload.strip() else []
    if isinstance(payload, list):
        return [s for s in (_segment(item) for item in payload) if s is not None]
    if isinstance(payload, dict):
        for key in _NESTED_TRANSCRIPT_KEYS:
            if payload.get(key):
                return _segments_from(payload[key])
    return []


def normalize_transcript(bot_id: str, payload: Any) -> BotTranscript:
    """Turn any provider transcript shape into a BotTranscript.

    Accepts a plain string, an object with a ``transcript`` (or
    ``segments``/``results``/``data``) field, or a list of speaker
    segments. Speaker-attributed segments render as ``Speaker: text``
    lines.
    """
    segments = _segments_from(payload)
    lines = [f"{s.speaker}: {s.text}" if s.speaker else s.text for s in segments]
    return BotTranscript(bot_id=bot_id, text="\n".join(lines), segments=segments, raw=payload)


def _optional_str(value: Any) -> str | None:
    return str(value) if value not in (None, "") else None


def _transcript_id_from(payload: Any) -> str | None:
    """transcript_id at the top level of a provider body or nested under ``bot``."""
    if not isinstance(payload, dict):
        return None
    found = _optional_str(payload.get("transcript_id"))
    if found is None and isinstance(payload.get("bot"), dict):
        found = _optional_str(payload["bot"].get("transcript_id"))
    return found


def _valid_meeting_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


# ── Manager ──────────────────────────────────────────────────────────────────


class BotManager:
    """Manages transcription bots for users.

    Args:
        client: MeetstreamClient for provider calls.
        repository: BotRepository for the local mirror.
    """

    def __init__(self, client: MeetstreamClient, repository: BotRepository) -> None:
        self._client = client
        self._repository = repository

    async def create_bot(self, user_id: str, data: BotCreate) -> BotRecord:
        """Create a bot at the provider and record it locally.

        Args:
            user_id: Owning user UUID string.
            data: BotCreate request.

        Returns:
            The persisted BotRecord.

        Raises:
            ValidationError: Blank or malformed meeting URL, blank name, or
                realtime transcription without a webhook URL. No provider
                call is made.
            ProviderError: Provider rejected the request or returned no bot_id.
            PersistenceError: Local write failed after the provider accepted.
        """
        meeting_url = (data.meeting_url or "").strip()
        name = (data.name or "").strip()
        if not meeting_url:
            raise ValidationError("Meeting URL is required")
        if not _valid_meeting_url(meeting_url):
            raise ValidationError(f"Meeting URL must be an http(s) URL: {meeting_url}")
        if not name:
            raise ValidationError("Bot name is required")
        webhook_url = data.webhook_url or self._client.default_webhook_url
        if data.transcription_type == TranscriptionType.REALTIME and not webhook_url:
            raise ValidationError("A webhook URL is required for realtime transcription")

        response = await self._client.create_bot(
            meeting_url=meeting_url,
            name=name,
            audio_required=data.audio_required,
            transcription_type=data.transcription_type,
            webhook_url=webhook_url or None,
        )
        bot_id = str(response.get("bot_id") or response.get("id") or "")
        if not bot_id:
            raise ProviderError("Meetstream create_bot returned no bot_id", provider="meetstream")

        try:
            record = await self._repository.create_bot(
                user_id=user_id,
                bot_id=bot_id,
                name=name,
                meeting_url=meeting_url,
                status=normalize_bot_status(extract_status(response)),
                transcript_id=_optional_str(response.get("transcript_id")),
                transcription_type=data.transcription_type,
            )
        except PersistenceError:
            logger.error("bot.mirror_failed", bot_id=bot_id, user_id=user_id)
            raise

        logger.info(
            "bot.created",
            bot_id=bot_id,
            user_id=user_id,
            status=record.status.value,
            transcription_type=record.transcription_type.value,
        )
        return record

    async def list_bots(self, user_id: str) -> list[BotRecord]:
        return await self._repository.list_bots(user_id)

    async def get_bot(self, bot_id: str) -> BotRecord:
        """Local read of a bot by provider bot_id."""
        record = await self._repository.get_bot(bot_id)
        if record is None:
            raise NotFoundError(f"Bot not found: {bot_id}")
        return record

    async def refresh_bot(self, bot_id: str) -> BotRecord:
        """Fetch the provider's current status and mirror it locally.

        The status endpoint often omits the transcript id; the bot detail
        is read in that case so a finished bot records where its transcript
        lives.
        """
        current = await self.get_bot(bot_id)
        payload = await self._client.get_bot_status(bot_id)
        status = normalize_bot_status(extract_status(payload))
        transcript_id = _transcript_id_from(payload)
        if transcript_id is None and current.transcript_id is None:
            transcript_id = _transcript_id_from(await self._client.get_bot(bot_id))

        updated = await self._repository.update_bot(
            bot_id, status=status, transcript_id=transcript_id
        )
        if updated is None:
            raise NotFoundError(f"Bot not found: {bot_id}")
        if updated.status != current.status:
            logger.info(
                "bot.status_changed",
                bot_id=bot_id,
                previous=current.status.value,
                status=updated.status.value,
            )
        return updated

    async def delete_bot(self, bot_id: str) -> None:
        """Remove a bot from the provider, then delete the local record.

        Raises:
            NotFoundError: No local record for bot_id. No provider call is made.
            ProviderError: Provider removal failed. The local record is kept.
            PersistenceError: Local delete failed after provider removal.
        """
        await self.get_bot(bot_id)
        await self._client.remove_bot(bot_id)
        try:
            await self._repository.delete_bot(bot_id)
        except PersistenceError:
            logger.error("bot.local_delete_failed", bot_id=bot_id)
            raise
        logger.info("bot.deleted", bot_id=bot_id)

    async def get_transcript(self, bot_id: str) -> BotTranscript:
        """Fetch the provider transcript and normalize it to plain text."""
        payload = await self._client.get_transcript(bot_id)
        transcript = normalize_transcript(bot_id, payload)
        logger.info(
            "bot.transcript_fetched",
            bot_id=bot_id,
            segment_count=len(transcript.segments),
            char_count=len(transcript.text),
        )
        return transcript

    async def get_bot_stats(self, user_id: str) -> BotStats:
        by_status = await self._repository.count_by_status(user_id)
        return BotStats(total=sum(by_status.values()), by_status=by_status)
