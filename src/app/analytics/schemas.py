"""Pydantic v2 schemas for analytics records and dashboard counters."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AnalyticsType(str, Enum):
    CONTENT_VIEW = "CONTENT_VIEW"
    CONTENT_ENGAGEMENT = "CONTENT_ENGAGEMENT"
    GENERATION_SUCCESS = "GENERATION_SUCCESS"
    POPULAR_TOPICS = "POPULAR_TOPICS"
    REAL_TIME_STATS = "REAL_TIME_STATS"


class AnalyticsRecord(BaseModel):
    id: uuid.UUID
    type: AnalyticsType
    data: dict[str, Any] = Field(default_factory=dict)
    user_id: str
    content_id: uuid.UUID | None = None
    created_at: datetime


class DashboardStats(BaseModel):
    """Counters shown on the dashboard for one user."""

    total_meetings: int = 0
    total_content: int = 0
    published_content: int = 0
    total_views: int = 0
    bots_by_status: dict[str, int] = Field(default_factory=dict)
