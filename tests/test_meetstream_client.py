"""Unit tests for the Meetstream.ai HTTP client.

httpx.AsyncClient.request is patched, so no network is touched. Covers
request construction, payload shape, and mapping of every failure mode to
ProviderError.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from src.app.bots.meetstream_client import MeetstreamClient
from src.app.bots.schemas import TranscriptionType
from src.app.core.exceptions import ProviderError

BASE = "https://api.meetstream.ai"


def _response(status: int, method: str = "GET", **kwargs) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request(method, BASE), **kwargs)


@pytest.fixture
def client():
    return MeetstreamClient(api_key="test-key", base_url=BASE, timeout=5.0)


# ── Payload ─────────────────────────────────────────────────────────────────


class TestCreatePayload:
    def test_post_meeting_payload(self, client):
        payload = client.build_create_payload("https://meet.google.com/abc", "Recorder")

        assert payload["meeting_link"] == "https://meet.google.com/abc"
        assert payload["bot_name"] == "Recorder"
        assert payload["audio_required"] is True
        assert payload["live_transcription_required"] == {}
        assert payload["custom_attributes"] == {
            "transcription_type": "post_meeting",
            "source": "content-rebirth",
        }
        assert "transcription" not in payload

    def test_realtime_payload_carries_webhook(self, client):
        payload = client.build_create_payload(
            "https://zoom.us/j/1",
            "Live",
            transcription_type=TranscriptionType.REALTIME,
            webhook_url="https://hooks.example.com/t",
        )

        assert payload["live_transcription_required"] == {"webhook_url": "https://hooks.example.com/t"}
        assert payload["custom_attributes"]["transcription_type"] == "realtime"

    def test_deepgram_forwarded_when_configured(self):
        client = MeetstreamClient(api_key="k", deepgram_api_key="dg-key")
        payload = client.build_create_payload("https://meet.google.com/abc", "Recorder")

        assert payload["transcription"]["deepgram"] == {
            "model": "nova-3",
            "language": "en",
            "api_key": "dg-key",
        }


# ── Requests ────────────────────────────────────────────────────────────────


class TestRequests:
    async def test_create_bot_posts_payload(self, client):
        mock_request = AsyncMock(
            return_value=_response(200, "POST", json={"bot_id": "bot-1", "status": "joining"})
        )
        with patch("httpx.AsyncClient.request", mock_request):
            data = await client.create_bot("https://meet.google.com/abc", "Recorder")

        assert data == {"bot_id": "bot-1", "status": "joining"}
        args, kwargs = mock_request.await_args
        assert args == ("POST", f"{BASE}/api/v1/bots/create_bot")
        assert kwargs["json"]["bot_name"] == "Recorder"

    async def test_remove_bot_uses_get(self, client):
        mock_request = AsyncMock(return_value=_response(200, json={"ok": True}))
        with patch("httpx.AsyncClient.request", mock_request):
            await client.remove_bot("bot-1")

        assert mock_request.await_args.args == ("GET", f"{BASE}/api/v1/bots/bot-1/remove_bot")

    async def test_status_text_body(self, client):
        mock_request = AsyncMock(return_value=_response(200, text="Active"))
        with patch("httpx.AsyncClient.request", mock_request):
            status = await client.get_bot_status("bot-1")

        assert status == "Active"

    async def test_empty_body_is_empty_dict(self, client):
        mock_request = AsyncMock(return_value=_response(200))
        with patch("httpx.AsyncClient.request", mock_request):
            data = await client.get_transcript("bot-1")

        assert data == {}


# ── Failures ────────────────────────────────────────────────────────────────


class TestFailures:
    async def test_missing_api_key_fails_before_request(self):
        client = MeetstreamClient(api_key="")
        mock_request = AsyncMock()
        with patch("httpx.AsyncClient.request", mock_request):
            with pytest.raises(ProviderError, match="MEETSTREAM_API_KEY"):
                await client.get_bot("bot-1")

        mock_request.assert_not_awaited()

    async def test_http_error_carries_upstream_message(self, client):
        mock_request = AsyncMock(
            return_value=_response(400, "POST", json={"detail": "Invalid meeting link"})
        )
        with patch("httpx.AsyncClient.request", mock_request):
            with pytest.raises(ProviderError, match="Invalid meeting link") as exc_info:
                await client.create_bot("https://meet.google.com/abc", "Recorder")

        assert exc_info.value.upstream_status == 400
        assert exc_info.value.provider == "meetstream"
        assert mock_request.await_count == 1

    async def test_timeout_is_provider_error(self, client):
        mock_request = AsyncMock(side_effect=httpx.ReadTimeout("timed out"))
        with patch("httpx.AsyncClient.request", mock_request):
            with pytest.raises(ProviderError, match="timed out"):
                await client.get_bot("bot-1")

        assert mock_request.await_count == 1

    async def test_transport_error_is_provider_error(self, client):
        mock_request = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
        with patch("httpx.AsyncClient.request", mock_request):
            with pytest.raises(ProviderError, match="connection refused"):
                await client.get_transcript("bot-1")

    async def test_health_check_never_raises(self, client):
        mock_request = AsyncMock(return_value=_response(503, text="down"))
        with patch("httpx.AsyncClient.request", mock_request):
            assert await client.health_check() is False


def test_realtime_urls(client):
    assert client.realtime_audio_url("b1") == "wss://api.meetstream.ai/api/v1/bots/b1/audio/stream"
    assert client.realtime_transcript_url("b1").endswith("/bots/b1/transcript/stream")
