"""FastAPI application factory.

Creates the app with logging middleware, metrics middleware, CORS, Sentry,
envelope exception handlers, lifespan wiring of repositories and services
onto app.state, and the v1 API router.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import Response

from src.app.analytics.repository import AnalyticsRepository
from src.app.api.errors import register_exception_handlers
from src.app.api.middleware.logging import LoggingMiddleware, configure_structlog
from src.app.api.v1.router import router as v1_router
from src.app.bots.manager import BotManager
from src.app.bots.meetstream_client import MeetstreamClient
from src.app.bots.repository import BotRepository
from src.app.config import get_settings
from src.app.content.generator import ContentGenerator
from src.app.content.repository import ContentRepository
from src.app.content.service import ContentService
from src.app.core.database import close_db, get_session, init_db
from src.app.core.exceptions import PersistenceError
from src.app.core.monitoring import MetricsMiddleware, get_metrics_response, init_sentry
from src.app.meetings.repository import MeetingRepository
from src.app.meetings.service import MeetingService
from src.app.services.llm import get_llm_service
from src.app.users.repository import UserRepository


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init DB, Sentry and services on startup, close on shutdown."""
    log = structlog.get_logger(__name__)
    settings = get_settings()
    configure_structlog()
    await init_db()

    # Initialize Sentry if DSN is configured
    if settings.SENTRY_DSN:
        init_sentry(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT.value,
            default_user_id=settings.DEFAULT_USER_ID,
        )

    # ── Repositories ─────────────────────────────────────────────────────
    user_repository = UserRepository(session_factory=get_session)
    content_repository = ContentRepository(session_factory=get_session)
    bot_repository = BotRepository(session_factory=get_session)
    meeting_repository = MeetingRepository(session_factory=get_session)
    analytics_repository = AnalyticsRepository(session_factory=get_session)
    app.state.user_repository = user_repository
    app.state.analytics_repository = analytics_repository

    # Single-user mode: the default user owns every record
    try:
        await user_repository.ensure_user(
            settings.DEFAULT_USER_ID,
            email=settings.DEFAULT_USER_EMAIL,
            name=settings.DEFAULT_USER_NAME,
        )
    except PersistenceError:
        log.warning("startup.default_user_failed", user_id=settings.DEFAULT_USER_ID)

    # ── Providers ────────────────────────────────────────────────────────
    llm_service = get_llm_service()
    if not llm_service.available:
        log.warning("startup.llm_not_configured")
    app.state.llm_service = llm_service

    meetstream_client = MeetstreamClient(
        api_key=settings.MEETSTREAM_API_KEY,
        base_url=settings.MEETSTREAM_BASE_URL,
        timeout=settings.MEETSTREAM_TIMEOUT,
        deepgram_api_key=settings.DEEPGRAM_API_KEY,
        bot_message=settings.MEETSTREAM_BOT_MESSAGE,
        default_webhook_url=settings.MEETSTREAM_WEBHOOK_URL,
    )
    if not meetstream_client.configured:
        log.warning("startup.meetstream_not_configured")
    app.state.meetstream_client = meetstream_client

    # ── Services ─────────────────────────────────────────────────────────
    app.state.bot_manager = BotManager(client=meetstream_client, repository=bot_repository)
    app.state.content_generator = ContentGenerator(
        llm_service=llm_service, repository=content_repository
    )
    app.state.content_service = ContentService(repository=content_repository)
    app.state.meeting_service = MeetingService(
        repository=meeting_repository, analytics=analytics_repository
    )

    log.info(
        "startup.complete",
        environment=settings.ENVIRONMENT.value,
        llm_available=llm_service.available,
        meetstream_configured=meetstream_client.configured,
    )

    yield

    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Content Rebirth API",
        version="0.1.0",
        description="Meeting transcription bots and AI content generation from transcripts",
        lifespan=lifespan,
    )

    # Middleware is added in reverse order (last added = outermost)

    # CORS middleware
    if settings.CORS_ALLOWED_ORIGINS == "*":
        origins = ["*"]
    else:
        origins = [o.strip() for o in settings.CORS_ALLOWED_ORIGINS.split(",")]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Logging middleware (logs every request with timing)
    app.add_middleware(LoggingMiddleware)

    # Metrics middleware (outermost -- records Prometheus metrics for all requests)
    app.add_middleware(MetricsMiddleware)

    register_exception_handlers(app)

    # Include v1 API router (health, bots, content, meetings, dashboard)
    app.include_router(v1_router)

    # Prometheus metrics endpoint (infrastructure route, outside v1 router)
    @app.get("/metrics", include_in_schema=False)
    async def metrics(request: Request) -> Response:
        """Prometheus metrics endpoint."""
        return get_metrics_response()

    return app


# Module-level app for uvicorn
app = create_app()
