"""Provider status string -> BotStatus.

normalize_bot_status() is total: case and surrounding whitespace are
ignored, and anything unrecognized (including None) maps to JOINING.
"""

from __future__ import annotations

from typing import Any

from src.app.bots.schemas import BotStatus

DEFAULT_STATUS = BotStatus.JOINING

_STATUS_MAP: dict[str, BotStatus] = {
    "active": BotStatus.ACTIVE,
    "connected": BotStatus.ACTIVE,
    "joining": BotStatus.JOINING,
    "inactive": BotStatus.INACTIVE,
    "disconnected": BotStatus.INACTIVE,
    "error": BotStatus.ERROR,
}


def normalize_bot_status(raw: Any) -> BotStatus:
    if not isinstance(raw, str):
        return DEFAULT_STATUS
    return _STATUS_MAP.get(raw.strip().lower(), DEFAULT_STATUS)


def extract_status(payload: Any) -> Any:
    """Pull the status field out of a provider response body.

    Meetstream returns either a bare string or an object carrying
    ``status`` (sometimes nested under ``bot``).
    """
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        if "status" in payload:
            return payload["status"]
        bot = payload.get("bot")
        if isinstance(bot, dict):
            return bot.get("status")
    return None
