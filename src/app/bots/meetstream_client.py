"""Async HTTP client wrapper for the Meetstream.ai REST API.

Provides MeetstreamClient covering the bot lifecycle: create, detail,
status, removal and transcript retrieval, plus a health probe and
the realtime websocket URLs.

Each call opens a fresh httpx.AsyncClient with a fixed timeout and is not
retried. Every failure (HTTP status, transport error, timeout) is raised as
ProviderError carrying the upstream message.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.app.bots.schemas import TranscriptionType
from src.app.core.exceptions import ProviderError
from src.app.core.monitoring import track_provider_call

logger = structlog.get_logger(__name__)

PROVIDER = "meetstream"
SOURCE_TAG = "content-rebirth"
DEEPGRAM_MODEL = "nova-3"
DEEPGRAM_LANGUAGE = "en"


def _error_message(response: httpx.Response) -> str:
    """Best human-readable message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict):
        for key in ("detail", "message", "error"):
            if body.get(key):
                return str(body[key])
    return str(body)[:200]


class MeetstreamClient:
    """Async client for the Meetstream.ai REST API.

    Args:
        api_key: Meetstream.ai API token. Calls fail with ProviderError
            before any request when empty.
        base_url: API root (default: https://api.meetstream.ai).
        timeout: Per-call timeout in seconds.
        deepgram_api_key: Forwarded to Meetstream for transcription when set.
        bot_message: Message the bot posts when it joins.
        default_webhook_url: Realtime transcript webhook used when a create
            request carries none.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.meetstream.ai",
        timeout: float = 30.0,
        deepgram_api_key: str = "",
        bot_message: str = "Content Rebirth Bot",
        default_webhook_url: str = "",
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._deepgram_api_key = deepgram_api_key
        self._bot_message = bot_message
        self.default_webhook_url = default_webhook_url
        self._headers = {
            "Authorization": f"Token {api_key}",
            "Content-Type": "application/json",
        }

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _client(self) -> httpx.AsyncClient:
        """Create a new httpx client with the configured timeout."""
        return httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout,
        )

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: dict | None = None,
    ) -> Any:
        """Perform one call and decode the body.

        Returns:
            Decoded JSON, raw text for non-JSON bodies, or {} when empty.

        Raises:
            ProviderError: Missing API key, HTTP error status, transport
                failure or timeout.
        """
        if not self._api_key:
            raise ProviderError("MEETSTREAM_API_KEY is required", provider=PROVIDER)

        url = f"{self._base_url}{path}"
        async with track_provider_call(operation):
            try:
                async with self._client() as client:
                    response = await client.request(method, url, json=json)
                    response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                message = _error_message(exc.response)
                logger.error(
                    "meetstream.request_failed",
                    operation=operation,
                    status_code=status,
                    error=message,
                )
                raise ProviderError(
                    f"Meetstream {operation} failed ({status}): {message}",
                    provider=PROVIDER,
                    upstream_status=status,
                ) from exc
            except httpx.TimeoutException as exc:
                logger.error("meetstream.request_timeout", operation=operation, timeout=self._timeout)
                raise ProviderError(
                    f"Meetstream {operation} timed out after {self._timeout}s",
                    provider=PROVIDER,
                ) from exc
            except httpx.HTTPError as exc:
                logger.error("meetstream.transport_error", operation=operation, error=str(exc))
                raise ProviderError(
                    f"Meetstream {operation} failed: {exc}",
                    provider=PROVIDER,
                ) from exc

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return response.text

    def build_create_payload(
        self,
        meeting_url: str,
        name: str,
        audio_required: bool = True,
        transcription_type: TranscriptionType = TranscriptionType.POST_MEETING,
        webhook_url: str | None = None,
    ) -> dict:
        """Body for POST /api/v1/bots/create_bot."""
        live_transcription: dict[str, str] = {}
        if transcription_type == TranscriptionType.REALTIME:
            live_transcription["webhook_url"] = webhook_url or self.default_webhook_url

        payload: dict[str, Any] = {
            "meeting_link": meeting_url,
            "bot_name": name,
            "bot_message": self._bot_message,
            "audio_required": audio_required,
            "video_required": False,
            "live_audio_required": {},
            "live_transcription_required": live_transcription,
            "custom_attributes": {
                "transcription_type": transcription_type.value.lower(),
                "source": SOURCE_TAG,
            },
            "callback_url": "",
        }
        if self._deepgram_api_key:
            payload["transcription"] = {
                "deepgram": {
                    "model": DEEPGRAM_MODEL,
                    "language": DEEPGRAM_LANGUAGE,
                    "api_key": self._deepgram_api_key,
                },
            }
        return payload

    async def create_bot(
        self,
        meeting_url: str,
        name: str,
        audio_required: bool = True,
        transcription_type: TranscriptionType = TranscriptionType.POST_MEETING,
        webhook_url: str | None = None,
    ) -> dict:
        """Send a bot into a meeting.

        Returns:
            Provider response with bot_id, status and (sometimes) transcript_id.
        """
        payload = self.build_create_payload(
            meeting_url, name, audio_required, transcription_type, webhook_url
        )
        data = await self._request("create_bot", "POST", "/api/v1/bots/create_bot", json=payload)
        if not isinstance(data, dict):
            raise ProviderError("Meetstream create_bot returned no bot payload", provider=PROVIDER)
        logger.info(
            "meetstream.bot_created",
            bot_id=data.get("bot_id"),
            transcription_type=transcription_type.value,
        )
        return data

    async def get_bot(self, bot_id: str) -> dict:
        """GET /api/v1/bots/{bot_id}/detail."""
        data = await self._request("get_bot", "GET", f"/api/v1/bots/{bot_id}/detail")
        return data if isinstance(data, dict) else {"detail": data}

    async def get_bot_status(self, bot_id: str) -> Any:
        """GET /api/v1/bots/{bot_id}/status. Body is a string or an object."""
        data = await self._request("get_bot_status", "GET", f"/api/v1/bots/{bot_id}/status")
        logger.debug("meetstream.bot_status", bot_id=bot_id, status=data)
        return data

    async def remove_bot(self, bot_id: str) -> None:
        """Remove the bot from its meeting. The API exposes this as a GET."""
        await self._request("remove_bot", "GET", f"/api/v1/bots/{bot_id}/remove_bot")
        logger.info("meetstream.bot_removed", bot_id=bot_id)

    async def get_transcript(self, bot_id: str) -> Any:
        """GET /api/v1/bots/{bot_id}/get_transcript.

        Returns:
            A plain string, an object with a ``transcript`` field, or a
            list of speaker segments, as the provider sends it.
        """
        data = await self._request("get_transcript", "GET", f"/api/v1/bots/{bot_id}/get_transcript")
        logger.info("meetstream.transcript_retrieved", bot_id=bot_id)
        return data

    async def health_check(self) -> bool:
        """True when the API answers /health with 200. Never raises."""
        if not self._api_key:
            return False
        try:
            await self._request("health_check", "GET", "/health")
        except ProviderError:
            return False
        return True

    def realtime_audio_url(self, bot_id: str) -> str:
        return f"{self._base_url.replace('https', 'wss', 1)}/api/v1/bots/{bot_id}/audio/stream"

    def realtime_transcript_url(self, bot_id: str) -> str:
        return f"{self._base_url.replace('https', 'wss', 1)}/api/v1/bots/{bot_id}/transcript/stream"
