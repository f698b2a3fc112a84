"""Pydantic v2 schemas for the content generation domain.

Defines the generation request (immutable, per user action), the parsed
GeneratedContent the parser produces, and the persisted ContentRecord.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ── Enums ────────────────────────────────────────────────────────────────────


class ContentType(str, Enum):
    """Kind of publishable content produced from a transcript."""

    ARTICLE = "ARTICLE"
    BLOG_POST = "BLOG_POST"
    SOCIAL_MEDIA = "SOCIAL_MEDIA"
    NEWSLETTER = "NEWSLETTER"
    WHITEPAPER = "WHITEPAPER"
    CASE_STUDY = "CASE_STUDY"


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    ACADEMIC = "academic"
    CONVERSATIONAL = "conversational"


class Length(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class ContentStatus(str, Enum):
    """Lifecycle of a content record. Only publish moves it forward."""

    DRAFT = "DRAFT"
    REVIEW = "REVIEW"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class PublishPlatform(str, Enum):
    MEDIUM = "medium"
    DEVTO = "devto"
    HASHNODE = "hashnode"
    LINKEDIN = "linkedin"


# ── Generation ───────────────────────────────────────────────────────────────


class GenerationRequest(BaseModel):
    """One user request to turn a transcript into content.

    Immutable. A blank transcript is accepted here and rejected by the
    generator before any provider call.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    transcript: str
    content_type: ContentType = Field(default=ContentType.ARTICLE, alias="type")
    tone: Tone = Tone.PROFESSIONAL
    length: Length = Length.MEDIUM
    title: str | None = None
    category: str | None = None
    tags: tuple[str, ...] = ()
    meeting_id: uuid.UUID | None = None


class SEOMetadata(BaseModel):
    meta_title: str
    meta_description: str
    keywords: list[str] = Field(default_factory=list)


class GeneratedContent(BaseModel):
    """Structured content extracted from a provider response."""

    title: str
    content: str
    summary: str
    key_takeaways: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    seo_metadata: SEOMetadata
    category: str


class ContentVariation(BaseModel):
    """One (type, tone, length) combination for variation generation."""

    content_type: ContentType = Field(alias="type")
    tone: Tone = Tone.PROFESSIONAL
    length: Length = Length.MEDIUM

    model_config = ConfigDict(populate_by_name=True)


class VariationsRequest(BaseModel):
    transcript: str
    variations: list[ContentVariation] = Field(min_length=1)


class OutlineRequest(BaseModel):
    transcript: str
    content_type: ContentType = Field(default=ContentType.ARTICLE, alias="type")

    model_config = ConfigDict(populate_by_name=True)


class InsightsRequest(BaseModel):
    transcript: str


# ── Persisted Record ─────────────────────────────────────────────────────────


class ContentRecord(BaseModel):
    """Generated content as stored. Status starts at DRAFT."""

    id: uuid.UUID
    user_id: str
    meeting_id: uuid.UUID | None = None
    content_type: ContentType
    status: ContentStatus = ContentStatus.DRAFT
    title: str
    content: str
    summary: str = ""
    key_takeaways: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    seo_metadata: SEOMetadata | None = None
    category: str = "General"
    view_count: int = Field(default=0, ge=0)
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class PublishRequest(BaseModel):
    platform: str


class PublishResult(BaseModel):
    """Platform compose URL plus the payload the client hands off to it."""

    url: str
    platform: PublishPlatform
    content: ContentRecord
