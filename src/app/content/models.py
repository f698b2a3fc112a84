"""Content persistence model.

ContentModel stores one generated content record. Tags, key takeaways and
SEO metadata are JSON columns round-tripped through the Pydantic schemas.
user_id and meeting_id are application-level references (no FK constraints).
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text, func, text
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.app.core.database import Base


class ContentModel(Base):
    """Generated article, post or newsletter derived from a transcript."""

    __tablename__ = "contents"
    __table_args__ = (
        CheckConstraint("view_count >= 0", name="ck_contents_view_count_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        server_default=text("gen_random_uuid()"),
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    meeting_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    content_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        default="DRAFT",
        server_default=text("'DRAFT'"),
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, default="", server_default=text("''"))
    key_takeaways_data: Mapped[list] = mapped_column(
        JSON, default=list, server_default=text("'[]'::json")
    )
    tags_data: Mapped[list] = mapped_column(
        JSON, default=list, server_default=text("'[]'::json")
    )
    seo_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    category: Mapped[str] = mapped_column(
        String(200),
        default="General",
        server_default=text("'General'"),
    )
    view_count: Mapped[int] = mapped_column(Integer, default=0, server_default=text("0"))
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
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
