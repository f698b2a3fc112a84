"""Initial schema: users, contents, bots, meetings, analytics.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSON

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        _id_column(),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("role", sa.String(50), server_default=sa.text("'USER'")),
        *_timestamps(),
    )

    op.create_table(
        "contents",
        _id_column(),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("meeting_id", UUID(as_uuid=True), nullable=True),
        sa.Column("content_type", sa.String(50), nullable=False),
        sa.Column("status", sa.String(50), server_default=sa.text("'DRAFT'")),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("summary", sa.Text(), server_default=sa.text("''")),
        sa.Column("key_takeaways_data", JSON(), server_default=sa.text("'[]'::json")),
        sa.Column("tags_data", JSON(), server_default=sa.text("'[]'::json")),
        sa.Column("seo_data", JSON(), nullable=True),
        sa.Column("category", sa.String(200), server_default=sa.text("'General'")),
        sa.Column("view_count", sa.Integer(), server_default=sa.text("0")),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("view_count >= 0", name="ck_contents_view_count_non_negative"),
    )
    op.create_index("ix_contents_user_id", "contents", ["user_id"])

    op.create_table(
        "bots",
        _id_column(),
        sa.Column("bot_id", sa.String(200), nullable=False, unique=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("meeting_url", sa.String(1000), nullable=False),
        sa.Column("status", sa.String(50), server_default=sa.text("'JOINING'")),
        sa.Column("transcript_id", sa.String(200), nullable=True),
        sa.Column("transcription_type", sa.String(50), server_default=sa.text("'POST_MEETING'")),
        sa.Column("metadata", JSON(), server_default=sa.text("'{}'::json")),
        *_timestamps(),
    )
    op.create_index("ix_bots_user_id", "bots", ["user_id"])

    op.create_table(
        "meetings",
        _id_column(),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("meeting_id", sa.String(300), nullable=False),
        sa.Column("transcript", sa.Text(), nullable=False),
        sa.Column("duration", sa.Integer(), server_default=sa.text("0")),
        sa.Column("participants_data", JSON(), server_default=sa.text("'[]'::json")),
        sa.Column("status", sa.String(50), server_default=sa.text("'PROCESSING'")),
        sa.Column("metadata", JSON(), server_default=sa.text("'{}'::json")),
        *_timestamps(),
    )
    op.create_index("ix_meetings_user_id", "meetings", ["user_id"])

    op.create_table(
        "analytics",
        _id_column(),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("data", JSON(), server_default=sa.text("'{}'::json")),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("content_id", UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_analytics_user_id", "analytics", ["user_id"])


def downgrade() -> None:
    op.drop_table("analytics")
    op.drop_table("meetings")
    op.drop_table("bots")
    op.drop_table("contents")
    op.drop_table("users")
