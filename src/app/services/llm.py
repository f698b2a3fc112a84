"""LLM provider abstraction via LiteLLM Router.

Provides an LLM service with:
- Gemini as the primary content model
- OpenAI as fallback when Gemini is unavailable or not configured
- Fixed per-call timeout, retries from settings (0 by default)
- Prometheus metrics for every call
"""

from __future__ import annotations

import structlog
from litellm import Router

from src.app.config import get_settings
from src.app.core.monitoring import track_llm_call

logger = structlog.get_logger(__name__)

CONTENT_MODEL_GROUP = "content"
FALLBACK_MODEL_GROUP = "content-fallback"


class LLMService:
    """LLM provider abstraction with LiteLLM Router.

    Configures Gemini as the primary model group with OpenAI as fallback.
    When only one key is configured, that provider serves the primary group.
    """

    def __init__(self) -> None:
        settings = get_settings()

        model_list = []
        fallbacks = []

        if settings.GEMINI_API_KEY:
            model_list.append({
                "model_name": CONTENT_MODEL_GROUP,
                "litellm_params": {
                    "model": settings.GEMINI_MODEL,
                    "api_key": settings.GEMINI_API_KEY,
                },
            })

        if settings.OPENAI_API_KEY:
            # OpenAI serves as fallback group when Gemini is primary
            group = FALLBACK_MODEL_GROUP if model_list else CONTENT_MODEL_GROUP
            model_list.append({
                "model_name": group,
                "litellm_params": {
                    "model": settings.OPENAI_MODEL,
                    "api_key": settings.OPENAI_API_KEY,
                },
            })
            if group == FALLBACK_MODEL_GROUP:
                fallbacks.append({CONTENT_MODEL_GROUP: [FALLBACK_MODEL_GROUP]})

        self.temperature = settings.LLM_TEMPERATURE

        if not model_list:
            logger.warning("llm.unavailable", reason="no API keys configured")
            self.router = None
            return

        self.router = Router(
            model_list=model_list,
            fallbacks=fallbacks,
            num_retries=settings.LLM_MAX_RETRIES,
            timeout=settings.LLM_TIMEOUT,
        )

    @property
    def available(self) -> bool:
        return self.router is not None

    async def completion(
        self,
        messages: list[dict],
        model: str = CONTENT_MODEL_GROUP,
        max_tokens: int = 2000,
        temperature: float | None = None,
        metadata: dict | None = None,
    ) -> dict:
        """Execute a completion call through the LiteLLM Router.

        Args:
            messages: List of message dicts with 'role' and 'content'.
            model: Model group name.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature; settings default when None.
            metadata: Additional metadata to include in the call.

        Returns:
            Dict with content, model, and usage.

        Raises:
            RuntimeError: If no LLM API keys are configured.
        """
        if not self.router:
            raise RuntimeError("No LLM API keys configured")

        async with track_llm_call(model) as tracker:
            response = await self.router.acompletion(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=self.temperature if temperature is None else temperature,
                metadata=metadata or {},
            )

            usage = {}
            if hasattr(response, "usage") and response.usage:
                usage = {
                    "prompt_tokens": response.usage.prompt_tokens,
                    "completion_tokens": response.usage.completion_tokens,
                    "total_tokens": response.usage.total_tokens,
                }
                tracker["prompt_tokens"] = usage["prompt_tokens"]
                tracker["completion_tokens"] = usage["completion_tokens"]

        return {
            "content": response.choices[0].message.content,
            "model": response.model,
            "usage": usage,
        }


# ── Singleton ─────────────────────────────────────────────────────────────────

_llm_service: LLMService | None = None


def get_llm_service() -> LLMService:
    """Get or create the LLM service singleton."""
    global _llm_service
    if _llm_service is None:
        _llm_service = LLMService()
    return _llm_service
