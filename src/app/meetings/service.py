"""MeetingService -- store a transcript with derived analysis.

create_meeting() validates the request, analyzes the transcript (topics,
action items, formatted duration, word count), persists the meeting as
COMPLETED and writes one REAL_TIME_STATS analytics record. The two writes
are independent; a failed analytics write leaves the meeting stored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from src.app.analytics.schemas import AnalyticsType
from src.app.core.exceptions import ValidationError
from src.app.meetings.analysis import analyze_transcript
from src.app.meetings.schemas import Meeting, MeetingCreate, MeetingStatus

if TYPE_CHECKING:
    from src.app.analytics.repository import AnalyticsRepository
    from src.app.meetings.repository import MeetingRepository

logger = structlog.get_logger(__name__)


class MeetingService:
    """Meeting creation and listing.

    Args:
        repository: MeetingRepository for meeting records.
        analytics: AnalyticsRepository for the per-meeting stats record.
    """

    def __init__(self, repository: MeetingRepository, analytics: AnalyticsRepository) -> None:
        self._repository = repository
        self._analytics = analytics

    async def create_meeting(self, user_id: str, data: MeetingCreate) -> Meeting:
        """Store a meeting and its stats record.

        Raises:
            ValidationError: Blank title, meeting id or transcript.
            PersistenceError: Either write failed.
        """
        if not data.title.strip() or not data.meeting_id.strip() or not data.transcript.strip():
            raise ValidationError("Title, meeting ID, and transcript are required")

        analysis = analyze_transcript(data.transcript, data.duration)
        metadata = {
            **data.metadata,
            "topics": analysis.topics,
            "actionItems": analysis.action_items,
            "durationFormatted": analysis.duration_formatted,
        }

        meeting = await self._repository.create_meeting(
            user_id, data, status=MeetingStatus.COMPLETED, metadata=metadata
        )
        await self._analytics.create_record(
            user_id,
            AnalyticsType.REAL_TIME_STATS,
            {
                "meetingId": str(meeting.id),
                "duration": data.duration,
                "participants": len(data.participants),
                "topics": analysis.topics,
                "actionItems": analysis.action_items,
                "wordCount": analysis.word_count,
            },
        )

        logger.info(
            "meeting.created",
            meeting_id=str(meeting.id),
            external_meeting_id=data.meeting_id,
            topic_count=len(analysis.topics),
            action_item_count=len(analysis.action_items),
        )
        return meeting

    async def list_meetings(self, user_id: str) -> list[Meeting]:
        return await self._repository.list_meetings(user_id)
