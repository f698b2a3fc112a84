"""REST endpoints for stored meetings."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from src.app.api.deps import get_current_user_id, get_meeting_service
from src.app.meetings.schemas import MeetingCreate
from src.app.meetings.service import MeetingService
from src.app.schemas.common import ApiResponse, ok

router = APIRouter(prefix="/api/v1/meetings", tags=["meetings"])


@router.get("", response_model=ApiResponse)
async def list_meetings(
    user_id: str = Depends(get_current_user_id),
    service: MeetingService = Depends(get_meeting_service),
) -> ApiResponse:
    meetings = await service.list_meetings(user_id)
    return ok([m.model_dump(mode="json") for m in meetings])


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_meeting(
    body: MeetingCreate,
    user_id: str = Depends(get_current_user_id),
    service: MeetingService = Depends(get_meeting_service),
) -> ApiResponse:
    """Store a transcript, derive topics and action items, record stats."""
    meeting = await service.create_meeting(user_id, body)
    return ok(meeting.model_dump(mode="json"), message="Meeting created")
