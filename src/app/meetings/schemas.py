"""Pydantic v2 schemas for meetings.

A meeting is a stored transcript with the topics, action items and
formatted duration derived from it at creation time.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class MeetingStatus(str, Enum):
    """Processing state of a stored meeting."""

    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class MeetingCreate(BaseModel):
    """Request to store a meeting transcript.

    title, meeting_id and transcript are checked by MeetingService, which
    rejects blanks with ValidationError.
    """

    title: str = ""
    description: str | None = None
    meeting_id: str = Field(default="", description="External meeting identifier")
    transcript: str = ""
    duration: int = Field(default=0, ge=0, description="Duration in seconds")
    participants: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class TranscriptAnalysis(BaseModel):
    topics: list[str] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list)
    duration_formatted: str = "0m"
    word_count: int = 0


class Meeting(BaseModel):
    """Stored meeting."""

    id: uuid.UUID
    user_id: str
    title: str
    description: str | None = None
    meeting_id: str
    transcript: str
    duration: int = 0
    participants: list[str] = Field(default_factory=list)
    status: MeetingStatus = MeetingStatus.PROCESSING
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime
