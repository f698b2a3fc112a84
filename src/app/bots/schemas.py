"""Pydantic v2 schemas for transcription bots."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# ── Enums ────────────────────────────────────────────────────────────────────


class BotStatus(str, Enum):
    """Locally mirrored bot state. CONNECTED/DISCONNECTED exist for stored
    data only; provider statuses are normalized onto ACTIVE/INACTIVE."""

    JOINING = "JOINING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    CONNECTED = "CONNECTED"
    DISCONNECTED = "DISCONNECTED"
    ERROR = "ERROR"


class TranscriptionType(str, Enum):
    REALTIME = "REALTIME"
    POST_MEETING = "POST_MEETING"


# ── Requests ─────────────────────────────────────────────────────────────────


class BotCreate(BaseModel):
    """Request to send a bot into a meeting.

    Fields are lenient here; BotManager rejects a blank URL or name with
    ValidationError before any provider call.
    """

    meeting_url: str = ""
    name: str = ""
    audio_required: bool = True
    transcription_type: TranscriptionType = TranscriptionType.POST_MEETING
    webhook_url: str | None = None


# ── Records ──────────────────────────────────────────────────────────────────


class BotRecord(BaseModel):
    """Local mirror of a provider bot."""

    id: uuid.UUID
    bot_id: str
    user_id: str
    name: str
    meeting_url: str
    status: BotStatus = BotStatus.JOINING
    transcript_id: str | None = None
    transcription_type: TranscriptionType = TranscriptionType.POST_MEETING
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class TranscriptSegment(BaseModel):
    speaker: str | None = None
    text: str
    start: float | None = None
    end: float | None = None


class BotTranscript(BaseModel):
    """Provider transcript normalized into generation input.

    ``text`` is the full transcript as plain text; ``segments`` keeps the
    per-speaker entries when the provider returned them.
    """

    bot_id: str
    text: str = ""
    segments: list[TranscriptSegment] = Field(default_factory=list)
    raw: Any = None


class BotStats(BaseModel):
    total: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
