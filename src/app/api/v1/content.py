"""REST endpoints for content generation, reading and publishing.

Generation endpoints call the LLM; /generate also persists the result as a
DRAFT record. Reading a record counts one view.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from src.app.api.deps import get_content_generator, get_content_service, get_current_user_id
from src.app.content.generator import ContentGenerator
from src.app.content.schemas import (
    ContentStatus,
    ContentType,
    GenerationRequest,
    InsightsRequest,
    OutlineRequest,
    PublishRequest,
    VariationsRequest,
)
from src.app.content.service import ContentService
from src.app.schemas.common import ApiResponse, ok

router = APIRouter(prefix="/api/v1/content", tags=["content"])


# ── Generation ───────────────────────────────────────────────────────────────


@router.post("/generate", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def generate_content(
    body: GenerationRequest,
    user_id: str = Depends(get_current_user_id),
    generator: ContentGenerator = Depends(get_content_generator),
) -> ApiResponse:
    """Generate content from a transcript and store it as a draft."""
    record = await generator.generate(body, user_id)
    return ok(record.model_dump(mode="json"), message="Content generated successfully")


@router.post("/variations", response_model=ApiResponse)
async def generate_variations(
    body: VariationsRequest,
    generator: ContentGenerator = Depends(get_content_generator),
) -> ApiResponse:
    results = await generator.generate_variations(body.transcript, body.variations)
    return ok([r.model_dump(mode="json") for r in results])


@router.post("/outline", response_model=ApiResponse)
async def generate_outline(
    body: OutlineRequest,
    generator: ContentGenerator = Depends(get_content_generator),
) -> ApiResponse:
    outline = await generator.generate_outline(body.transcript, body.content_type)
    return ok({"outline": outline})


@router.post("/insights", response_model=ApiResponse)
async def extract_insights(
    body: InsightsRequest,
    generator: ContentGenerator = Depends(get_content_generator),
) -> ApiResponse:
    insights = await generator.extract_insights(body.transcript)
    return ok({"insights": insights})


# ── Records ──────────────────────────────────────────────────────────────────


@router.get("", response_model=ApiResponse)
async def list_content(
    content_type: ContentType | None = Query(default=None, alias="type"),
    category: str | None = Query(default=None),
    content_status: ContentStatus | None = Query(default=None, alias="status"),
    user_id: str = Depends(get_current_user_id),
    service: ContentService = Depends(get_content_service),
) -> ApiResponse:
    records = await service.list_contents(
        user_id=user_id,
        content_type=content_type,
        category=category,
        status=content_status,
    )
    return ok([r.model_dump(mode="json") for r in records])


@router.get("/{content_id}", response_model=ApiResponse)
async def read_content(
    content_id: str,
    service: ContentService = Depends(get_content_service),
) -> ApiResponse:
    record = await service.read_content(content_id)
    return ok(record.model_dump(mode="json"))


@router.post("/{content_id}/publish", response_model=ApiResponse)
async def publish_content(
    content_id: str,
    body: PublishRequest,
    service: ContentService = Depends(get_content_service),
) -> ApiResponse:
    """Mark content published and return the platform compose URL."""
    result = await service.publish(content_id, body.platform)
    return ok(result.model_dump(mode="json"), message=f"Ready to publish to {result.platform.value}")
