"""Meeting persistence model.

MeetingModel stores the transcript plus derived metadata (topics, action
items, formatted duration) as JSON. Participants are a JSON list of names.
No foreign key constraints (application-level referential integrity via
repository).
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func, text
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.app.core.database import Base


class MeetingModel(Base):
    """Meeting transcript submitted for content generation."""

    __tablename__ = "meetings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    meeting_id: Mapped[str] = mapped_column(String(300), nullable=False)
    transcript: Mapped[str] = mapped_column(Text, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, default=0, server_default=text("0"))
    participants_data: Mapped[list] = mapped_column(
        JSON, default=list, server_default=text("'[]'::json")
    )
    status: Mapped[str] = mapped_column(
        String(50),
        default="PROCESSING",
        server_default=text("'PROCESSING'"),
    )
    metadata_data: Mapped[dict] = mapped_column(
        "metadata", JSON, default=dict, server_default=text("'{}'::json")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
    )
