"""REST endpoints for the transcription bot lifecycle.

Every endpoint acts for the default user and returns the response envelope.
/stats is declared before /{bot_id} so it is not captured as a bot id.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from src.app.api.deps import get_bot_manager, get_current_user_id
from src.app.bots.manager import BotManager
from src.app.bots.schemas import BotCreate
from src.app.schemas.common import ApiResponse, ok

router = APIRouter(prefix="/api/v1/bots", tags=["bots"])


@router.get("", response_model=ApiResponse)
async def list_bots(
    user_id: str = Depends(get_current_user_id),
    manager: BotManager = Depends(get_bot_manager),
) -> ApiResponse:
    bots = await manager.list_bots(user_id)
    return ok([b.model_dump(mode="json") for b in bots])


@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_bot(
    body: BotCreate,
    user_id: str = Depends(get_current_user_id),
    manager: BotManager = Depends(get_bot_manager),
) -> ApiResponse:
    """Send a bot into a meeting and mirror it locally."""
    record = await manager.create_bot(user_id, body)
    return ok(record.model_dump(mode="json"), message="Bot created")


@router.get("/stats", response_model=ApiResponse)
async def bot_stats(
    user_id: str = Depends(get_current_user_id),
    manager: BotManager = Depends(get_bot_manager),
) -> ApiResponse:
    stats = await manager.get_bot_stats(user_id)
    return ok(stats.model_dump(mode="json"))


@router.get("/{bot_id}", response_model=ApiResponse)
async def get_bot(
    bot_id: str,
    refresh: bool = Query(default=False, description="Mirror the provider's current status"),
    manager: BotManager = Depends(get_bot_manager),
) -> ApiResponse:
    record = await manager.refresh_bot(bot_id) if refresh else await manager.get_bot(bot_id)
    return ok(record.model_dump(mode="json"))


@router.delete("/{bot_id}", response_model=ApiResponse)
async def delete_bot(
    bot_id: str,
    manager: BotManager = Depends(get_bot_manager),
) -> ApiResponse:
    await manager.delete_bot(bot_id)
    return ok(message="Bot deleted")


@router.get("/{bot_id}/transcript", response_model=ApiResponse)
async def get_transcript(
    bot_id: str,
    manager: BotManager = Depends(get_bot_manager),
) -> ApiResponse:
    transcript = await manager.get_transcript(bot_id)
    return ok(transcript.model_dump(mode="json", exclude={"raw"}))
