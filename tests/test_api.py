"""HTTP surface tests.

Builds a FastAPI app with the v1 routers and envelope handlers, wires real
services over the in-memory doubles onto app.state, and drives it through
httpx ASGITransport. No lifespan, database or network.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.app.analytics.schemas import DashboardStats
from src.app.api.errors import register_exception_handlers
from src.app.api.v1.router import router as v1_router
from src.app.bots.manager import BotManager
from src.app.content.generator import ContentGenerator
from src.app.content.service import ContentService
from src.app.core.exceptions import ProviderError
from src.app.meetings.service import MeetingService


@pytest.fixture
def meetstream():
    client = MagicMock()
    client.default_webhook_url = ""
    client.configured = True
    client.create_bot = AsyncMock(return_value={"bot_id": "bot-1", "status": "joining"})
    client.remove_bot = AsyncMock(return_value=None)
    client.get_bot_status = AsyncMock(return_value="active")
    client.get_bot = AsyncMock(return_value={"bot_id": "bot-1", "transcript_id": "tr-1"})
    client.get_transcript = AsyncMock(return_value={"transcript": "Hello team."})
    return client


@pytest.fixture
def app(
    mock_llm,
    meetstream,
    content_repository,
    bot_repository,
    meeting_repository,
    analytics_repository,
):
    application = FastAPI()
    register_exception_handlers(application)
    application.include_router(v1_router)

    application.state.llm_service = mock_llm
    application.state.meetstream_client = meetstream
    application.state.bot_manager = BotManager(client=meetstream, repository=bot_repository)
    application.state.content_generator = ContentGenerator(
        llm_service=mock_llm, repository=content_repository
    )
    application.state.content_service = ContentService(repository=content_repository)
    application.state.meeting_service = MeetingService(
        repository=meeting_repository, analytics=analytics_repository
    )
    application.state.analytics_repository = analytics_repository
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ── Health ──────────────────────────────────────────────────────────────────


async def test_liveness(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# ── Content ─────────────────────────────────────────────────────────────────


async def test_generate_content(client, content_repository):
    response = await client.post(
        "/api/v1/content/generate",
        json={"transcript": "Alice: ship it.", "type": "BLOG_POST", "tone": "casual"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["error"] is None
    assert body["data"]["title"] == "Scaling the Roadmap"
    assert body["data"]["content_type"] == "BLOG_POST"
    assert body["data"]["status"] == "DRAFT"
    assert len(content_repository.records) == 1


async def test_blank_transcript_is_400_envelope(client, mock_llm, content_repository):
    response = await client.post("/api/v1/content/generate", json={"transcript": " "})

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "data": None,
        "error": "Validation failed",
        "message": "Transcript is required",
    }
    mock_llm.completion.assert_not_awaited()
    assert content_repository.records == {}


async def test_provider_failure_is_502(client, mock_llm):
    mock_llm.completion.side_effect = RuntimeError("upstream overloaded")

    response = await client.post("/api/v1/content/generate", json={"transcript": "hi"})

    assert response.status_code == 502
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "upstream overloaded"


async def test_missing_body_field_is_422(client):
    response = await client.post("/api/v1/content/generate", json={"type": "ARTICLE"})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert "transcript" in body["message"]


async def test_read_counts_views_and_publish(client):
    created = (
        await client.post("/api/v1/content/generate", json={"transcript": "Alice: hi."})
    ).json()["data"]

    first = await client.get(f"/api/v1/content/{created['id']}")
    second = await client.get(f"/api/v1/content/{created['id']}")
    assert first.json()["data"]["view_count"] == 1
    assert second.json()["data"]["view_count"] == 2

    published = await client.post(
        f"/api/v1/content/{created['id']}/publish", json={"platform": "medium"}
    )
    assert published.status_code == 200
    assert published.json()["data"]["url"] == "https://medium.com/new-story"
    assert published.json()["data"]["content"]["status"] == "PUBLISHED"

    listed = await client.get("/api/v1/content", params={"status": "PUBLISHED"})
    assert [c["id"] for c in listed.json()["data"]] == [created["id"]]


async def test_publish_unsupported_platform(client):
    created = (
        await client.post("/api/v1/content/generate", json={"transcript": "Alice: hi."})
    ).json()["data"]

    response = await client.post(
        f"/api/v1/content/{created['id']}/publish", json={"platform": "myspace"}
    )

    assert response.status_code == 400


async def test_unknown_content_is_404(client):
    response = await client.get("/api/v1/content/not-a-real-id")

    assert response.status_code == 404
    assert response.json()["success"] is False


async def test_outline(client, mock_llm):
    mock_llm.completion.return_value = {"content": '["Intro", "Body"]', "model": "m", "usage": {}}

    response = await client.post(
        "/api/v1/content/outline", json={"transcript": "Alice: hi.", "type": "NEWSLETTER"}
    )

    assert response.json()["data"] == {"outline": ["Intro", "Body"]}


# ── Bots ────────────────────────────────────────────────────────────────────


async def test_bot_lifecycle(client, meetstream):
    created = await client.post(
        "/api/v1/bots",
        json={"meeting_url": "https://meet.google.com/abc", "name": "Recorder"},
    )
    assert created.status_code == 201
    assert created.json()["data"]["bot_id"] == "bot-1"

    listed = await client.get("/api/v1/bots")
    assert [b["bot_id"] for b in listed.json()["data"]] == ["bot-1"]

    stats = await client.get("/api/v1/bots/stats")
    assert stats.json()["data"] == {"total": 1, "by_status": {"JOINING": 1}}

    refreshed = await client.get("/api/v1/bots/bot-1", params={"refresh": "true"})
    assert refreshed.json()["data"]["status"] == "ACTIVE"
    assert refreshed.json()["data"]["transcript_id"] == "tr-1"

    transcript = await client.get("/api/v1/bots/bot-1/transcript")
    assert transcript.json()["data"]["text"] == "Hello team."

    deleted = await client.delete("/api/v1/bots/bot-1")
    assert deleted.status_code == 200
    meetstream.remove_bot.assert_awaited_once_with("bot-1")

    missing = await client.get("/api/v1/bots/bot-1")
    assert missing.status_code == 404


async def test_create_bot_without_name_is_400(client, meetstream):
    response = await client.post(
        "/api/v1/bots", json={"meeting_url": "https://meet.google.com/abc"}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Bot name is required"
    meetstream.create_bot.assert_not_awaited()


async def test_failed_provider_delete_keeps_bot(client, meetstream, bot_repository):
    await client.post(
        "/api/v1/bots",
        json={"meeting_url": "https://meet.google.com/abc", "name": "Recorder"},
    )
    meetstream.remove_bot.side_effect = ProviderError("boom", provider="meetstream")

    response = await client.delete("/api/v1/bots/bot-1")

    assert response.status_code == 502
    assert "bot-1" in bot_repository.records


# ── Meetings / Dashboard ────────────────────────────────────────────────────


async def test_create_and_list_meetings(client, analytics_repository):
    response = await client.post(
        "/api/v1/meetings",
        json={
            "title": "Planning",
            "meeting_id": "m-1",
            "transcript": "We need to fix the budget.",
            "duration": 600,
        },
    )

    assert response.status_code == 201
    assert response.json()["data"]["metadata"]["topics"] == ["budget"]
    assert len(analytics_repository.records) == 1

    listed = await client.get("/api/v1/meetings")
    assert len(listed.json()["data"]) == 1


async def test_dashboard_stats(client, analytics_repository):
    analytics_repository.stats = DashboardStats(total_meetings=2, total_views=7)

    response = await client.get("/api/v1/dashboard/stats")

    assert response.json()["data"]["total_meetings"] == 2
    assert response.json()["data"]["total_views"] == 7


async def test_uninitialized_service_is_503(app, client):
    app.state.bot_manager = None

    response = await client.get("/api/v1/bots")

    assert response.status_code == 503
    assert response.json() == {
        "success": False,
        "data": None,
        "error": "Bot manager not initialized",
        "message": None,
    }
