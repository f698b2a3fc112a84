"""ContentGenerator -- transcript to persisted content.

Pipeline for one request: validate -> build prompt -> one provider call with
the length-derived token budget -> parse -> persist as DRAFT. No retries; a
failed call persists nothing.

Error discipline:
- Blank transcript: ValidationError before any provider call
- Provider exception or empty reply: ProviderError with the upstream message
- Store failure: PersistenceError (raised by the repository)

Exports:
    ContentGenerator: Generation service used by the content API.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from src.app.content.parser import parse_generated_content, parse_string_list
from src.app.content.prompts import (
    CONTENT_SYSTEM_PROMPT,
    INSIGHTS_MAX_TOKENS,
    INSIGHTS_SYSTEM_PROMPT,
    OUTLINE_MAX_TOKENS,
    OUTLINE_SYSTEM_PROMPT,
    build_insights_prompt,
    build_outline_prompt,
    build_prompt,
    max_output_tokens,
)
from src.app.content.schemas import (
    ContentRecord,
    ContentType,
    ContentVariation,
    GeneratedContent,
    GenerationRequest,
)
from src.app.core.exceptions import (
    ContentRebirthError,
    PersistenceError,
    ProviderError,
    ValidationError,
)
from src.app.core.monitoring import content_generated_total

if TYPE_CHECKING:
    from src.app.content.repository import ContentRepository
    from src.app.services.llm import LLMService

logger = structlog.get_logger(__name__)

OUTLINE_TEMPERATURE = 0.5
INSIGHTS_TEMPERATURE = 0.3


def _require_transcript(transcript: str | None) -> str:
    if not transcript or not transcript.strip():
        raise ValidationError("Transcript is required")
    return transcript


class ContentGenerator:
    """Turns meeting transcripts into structured, persisted content.

    Args:
        llm_service: LLMService (or any object with an async completion()).
        repository: ContentRepository used to persist generated records.
    """

    def __init__(self, llm_service: LLMService, repository: ContentRepository) -> None:
        self._llm = llm_service
        self._repository = repository

    async def _complete(
        self,
        system_prompt: str,
        prompt: str,
        max_tokens: int,
        temperature: float | None = None,
    ) -> str:
        """Single provider round trip. Returns non-empty text or raises ProviderError."""
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]
        try:
            response = await self._llm.completion(
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except ContentRebirthError:
            raise
        except Exception as exc:
            logger.error("content.provider_failed", error=str(exc), error_type=type(exc).__name__)
            raise ProviderError(str(exc) or type(exc).__name__, provider="llm") from exc

        text = (response.get("content") or "").strip()
        if not text:
            logger.warning("content.provider_empty", model=response.get("model"))
            raise ProviderError("No content generated", provider="llm")
        return text

    async def generate_content(self, request: GenerationRequest) -> GeneratedContent:
        """Generate and parse content without persisting it."""
        _require_transcript(request.transcript)

        raw = await self._complete(
            CONTENT_SYSTEM_PROMPT,
            build_prompt(request),
            max_output_tokens(request.length),
        )
        return parse_generated_content(raw, request)

    async def generate(self, request: GenerationRequest, user_id: str) -> ContentRecord:
        """Generate content for a request and persist it as a DRAFT record.

        Args:
            request: GenerationRequest from the caller.
            user_id: Owning user UUID string.

        Returns:
            The persisted ContentRecord.

        Raises:
            ValidationError: Blank transcript. Nothing is called or stored.
            ProviderError: Provider failed or returned no text.
            PersistenceError: The record could not be stored.
        """
        content_type = request.content_type.value
        try:
            generated = await self.generate_content(request)
        except ContentRebirthError as exc:
            content_generated_total.labels(content_type=content_type, status=type(exc).__name__).inc()
            raise

        try:
            record = await self._repository.create_content(
                user_id=user_id,
                content_type=request.content_type,
                generated=generated,
                meeting_id=request.meeting_id,
            )
        except PersistenceError:
            content_generated_total.labels(content_type=content_type, status="PersistenceError").inc()
            logger.error("content.persist_failed", user_id=user_id, content_type=content_type)
            raise

        content_generated_total.labels(content_type=content_type, status="success").inc()
        logger.info(
            "content.generated",
            content_id=str(record.id),
            content_type=content_type,
            user_id=user_id,
            tag_count=len(record.tags),
        )
        return record

    async def generate_variations(
        self, transcript: str, variations: list[ContentVariation]
    ) -> list[GeneratedContent]:
        """One independent generation per variation, run concurrently. Nothing is stored."""
        _require_transcript(transcript)
        requests = [
            GenerationRequest(
                transcript=transcript,
                content_type=v.content_type,
                tone=v.tone,
                length=v.length,
            )
            for v in variations
        ]
        gathered = await asyncio.gather(
            *(self.generate_content(r) for r in requests),
            return_exceptions=True,
        )

        failures = [item for item in gathered if isinstance(item, BaseException)]
        if failures:
            logger.warning(
                "content.variations_failed",
                requested=len(requests),
                failed=len(failures),
                errors=[str(f) for f in failures],
            )
            raise failures[0]

        logger.info("content.variations_generated", count=len(gathered))
        return list(gathered)

    async def generate_outline(self, transcript: str, content_type: ContentType) -> list[str]:
        _require_transcript(transcript)
        raw = await self._complete(
            OUTLINE_SYSTEM_PROMPT,
            build_outline_prompt(transcript, content_type),
            OUTLINE_MAX_TOKENS,
            OUTLINE_TEMPERATURE,
        )
        return parse_string_list(raw)

    async def extract_insights(self, transcript: str) -> list[str]:
        _require_transcript(transcript)
        raw = await self._complete(
            INSIGHTS_SYSTEM_PROMPT,
            build_insights_prompt(transcript),
            INSIGHTS_MAX_TOKENS,
            INSIGHTS_TEMPERATURE,
        )
        return parse_string_list(raw)
