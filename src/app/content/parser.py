"""Best-effort extraction of structured content from provider text.

parse_generated_content() never raises. It runs an ordered tuple of
extraction strategies, each returning a partial result or None, keeps the
first success, then fills every missing field from the request or from
synthesized defaults:

1. _extract_json: first parseable JSON object in the text
2. _extract_markers: TITLE: / CONTENT: / KEY_TAKEAWAYS: / TAGS: sections

Exports:
    parse_generated_content: Raw provider text -> GeneratedContent.
    summarize: First two sentences of a body.
    synthesize_seo: SEO metadata derived from a title.
    parse_string_list: JSON array or bullet lines -> list of strings.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from src.app.content.schemas import GenerationRequest, GeneratedContent, SEOMetadata

DEFAULT_TITLE = "Generated Content"
DEFAULT_CATEGORY = "General"
META_TITLE_LIMIT = 60
SEO_BASE_KEYWORDS = ("meeting insights", "business discussion", "key takeaways")

# Markers may carry markdown decoration: "**TITLE:**", "## CONTENT:", "TAGS: a, b"
_MARKER_RE = re.compile(
    r"^[\s#>*_]*(TITLE|CONTENT|KEY_TAKEAWAYS|TAGS)\s*(?:\*\*|__)?\s*:\s*(?:\*\*|__)?(.*)$"
)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_BULLET_RE = re.compile(r"^[-•]\s*")


@dataclass
class _Extracted:
    """Fields a strategy managed to pull out. Empty means not found."""

    title: str = ""
    content: str = ""
    summary: str = ""
    key_takeaways: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    seo: dict[str, Any] = field(default_factory=dict)
    category: str = ""


# ── Helpers ──────────────────────────────────────────────────────────────────


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return "\n\n".join(_text(v) for v in value if _text(v))
    return str(value).strip()


def _string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return value.split(",")
    if isinstance(value, (list, tuple)):
        return [_text(v) for v in value]
    return []


def _clean(items: Iterable[str]) -> list[str]:
    """Strip entries, drop blanks, de-duplicate keeping first occurrence."""
    seen: set[str] = set()
    cleaned: list[str] = []
    for item in items:
        value = item.strip()
        if value and value not in seen:
            seen.add(value)
            cleaned.append(value)
    return cleaned


def _first_line(raw: str) -> str:
    for line in raw.splitlines():
        if _MARKER_RE.match(line):
            continue
        candidate = line.strip().lstrip("#").strip()
        if candidate:
            return candidate
    return ""


def summarize(text: str) -> str:
    """First two sentences, joined with '. ' and closed with a period."""
    sentences = [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]
    if not sentences:
        return ""
    return ". ".join(sentences[:2]) + "."


def synthesize_seo(title: str) -> SEOMetadata:
    meta_title = title
    if len(title) > META_TITLE_LIMIT:
        meta_title = title[: META_TITLE_LIMIT - 3] + "..."
    return SEOMetadata(
        meta_title=meta_title,
        meta_description=(
            "Discover insights and key takeaways from this comprehensive discussion. "
            f"Learn more about {title.lower()}."
        ),
        keywords=[*SEO_BASE_KEYWORDS, title.lower()],
    )


# ── Strategies ───────────────────────────────────────────────────────────────


def _from_mapping(data: dict[str, Any]) -> _Extracted:
    seo = data.get("seoData") or data.get("seo_metadata") or data.get("seo")
    return _Extracted(
        title=_text(data.get("title")),
        content=_text(data.get("content")),
        summary=_text(data.get("summary")),
        key_takeaways=_string_list(
            data.get("key_takeaways") or data.get("keyTakeaways")
        ),
        tags=_string_list(data.get("tags")),
        seo=seo if isinstance(seo, dict) else {},
        category=_text(data.get("category")),
    )


def _extract_json(raw: str) -> _Extracted | None:
    """Decode the first JSON object carrying a title or content field."""
    decoder = json.JSONDecoder()
    for match in re.finditer(r"\{", raw):
        try:
            obj, _ = decoder.raw_decode(raw, match.start())
        except (ValueError, RecursionError):
            continue
        if isinstance(obj, dict) and (obj.get("title") or obj.get("content")):
            return _from_mapping(obj)
    return None


def _extract_markers(raw: str) -> _Extracted | None:
    """Collect lines under each section marker until the next marker."""
    sections: dict[str, list[str]] = {}
    current: str | None = None
    for line in raw.splitlines():
        match = _MARKER_RE.match(line)
        if match:
            current = match.group(1)
            sections.setdefault(current, [])
            inline = match.group(2).strip()
            if inline:
                sections[current].append(inline)
            continue
        if current is not None:
            sections[current].append(line.rstrip())

    if not sections:
        return None

    title_lines = [line.strip() for line in sections.get("TITLE", []) if line.strip()]
    takeaways = [
        _BULLET_RE.sub("", line.strip()) for line in sections.get("KEY_TAKEAWAYS", [])
    ]
    tags = ",".join(sections.get("TAGS", [])).split(",")
    return _Extracted(
        title=title_lines[0] if title_lines else "",
        content="\n".join(sections.get("CONTENT", [])).strip(),
        key_takeaways=takeaways,
        tags=tags,
    )


_STRATEGIES: tuple[Callable[[str], _Extracted | None], ...] = (
    _extract_json,
    _extract_markers,
)


# ── Public API ───────────────────────────────────────────────────────────────


def parse_generated_content(raw: str, request: GenerationRequest) -> GeneratedContent:
    """Turn raw provider text into GeneratedContent.

    Total: any input, including an empty string, yields a result with a
    non-empty title and non-empty content.

    Args:
        raw: Text returned by the provider.
        request: Originating request, used as fallback for title, tags
            and category.

    Returns:
        GeneratedContent with every field populated.
    """
    raw = raw or ""
    extracted = next(
        (result for result in (strategy(raw) for strategy in _STRATEGIES) if result),
        _Extracted(),
    )

    title = extracted.title or (request.title or "").strip() or _first_line(raw) or DEFAULT_TITLE
    content = extracted.content or raw.strip() or title
    summary = extracted.summary or summarize(content)

    fallback_seo = synthesize_seo(title)
    seo = SEOMetadata(
        meta_title=_text(extracted.seo.get("metaTitle") or extracted.seo.get("meta_title"))
        or fallback_seo.meta_title,
        meta_description=_text(
            extracted.seo.get("metaDescription") or extracted.seo.get("meta_description")
        )
        or fallback_seo.meta_description,
        keywords=_clean(_string_list(extracted.seo.get("keywords"))) or fallback_seo.keywords,
    )

    return GeneratedContent(
        title=title,
        content=content,
        summary=summary,
        key_takeaways=_clean(extracted.key_takeaways),
        tags=_clean(extracted.tags) or _clean(request.tags),
        seo_metadata=seo,
        category=extracted.category or (request.category or "").strip() or DEFAULT_CATEGORY,
    )


_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")
_LIST_MARKER_RE = re.compile(r"^[-*•\d.\s]+")


def parse_string_list(raw: str) -> list[str]:
    """Read a JSON array of strings, else one entry per line.

    Code fences around the array are ignored. In the line fallback, leading
    bullets and numbering ("- ", "* ", "1. ") are stripped and blank lines
    dropped.
    """
    cleaned = _FENCE_CLOSE_RE.sub("", _FENCE_OPEN_RE.sub("", (raw or "").strip()).strip())
    try:
        decoded = json.loads(cleaned)
    except (ValueError, RecursionError):
        decoded = None
    if isinstance(decoded, list):
        return [item for item in (_text(v) for v in decoded) if item]
    return [
        item
        for item in (_LIST_MARKER_RE.sub("", line).strip() for line in cleaned.splitlines())
        if item
    ]
