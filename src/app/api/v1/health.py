"""Health check endpoints.

Provides liveness (/health) and readiness (/health/ready). Readiness checks
the database and reports whether LLM keys and Meetstream are configured.
Only the database is critical; missing provider keys leave the service up
with those features failing per request.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from src.app.config import get_settings
from src.app.core.database import get_engine

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic liveness check. No external dependencies are checked."""
    settings = get_settings()
    return {"status": "ok", "environment": settings.ENVIRONMENT.value}


async def _check_dependencies(request: Request) -> dict:
    """Check database connectivity and provider configuration."""
    checks: dict = {"database": "ok", "llm": "ok", "meetstream": "ok"}

    try:
        engine = get_engine()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        checks["database"] = "error"
        checks["database_error"] = str(e)

    llm_service = getattr(request.app.state, "llm_service", None)
    if llm_service is None or not llm_service.available:
        checks["llm"] = "no_keys"

    meetstream = getattr(request.app.state, "meetstream_client", None)
    if meetstream is None or not meetstream.configured:
        checks["meetstream"] = "not_configured"

    return checks


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness check: 200 when the database answers, 503 otherwise."""
    checks = await _check_dependencies(request)
    healthy = checks["database"] == "ok"

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if healthy else "degraded",
            "checks": checks,
        },
    )
