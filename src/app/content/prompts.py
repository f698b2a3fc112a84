"""Prompt templates for transcript-to-content generation.

Pure and deterministic: every builder takes plain inputs and returns a
string, no I/O. The generator passes these prompts to
``LLMService.completion()`` alongside ``CONTENT_SYSTEM_PROMPT``.

Exports:
    CONTENT_SYSTEM_PROMPT: System message for full content generation.
    OUTLINE_SYSTEM_PROMPT: System message for outline generation.
    INSIGHTS_SYSTEM_PROMPT: System message for insight extraction.
    CONTENT_TYPE_DIRECTIVES, TONE_DIRECTIVES, LENGTH_DIRECTIVES: Lookup tables.
    build_prompt: Full generation prompt for a GenerationRequest.
    max_output_tokens: Token budget for a requested length.
    build_outline_prompt: Prompt asking for a JSON array of outline points.
    build_insights_prompt: Prompt asking for a JSON array of insights.
"""

from __future__ import annotations

import json

from src.app.content.schemas import ContentType, GenerationRequest, Length, Tone


# ── System Prompts ───────────────────────────────────────────────────────────


CONTENT_SYSTEM_PROMPT: str = """\
You are an expert content creator who transforms meeting transcripts into \
engaging, well-structured content. You understand the context and can create \
various types of content while maintaining the original meaning and insights.\
"""

OUTLINE_SYSTEM_PROMPT: str = (
    "You are an expert content strategist who creates outlines for various content types."
)

INSIGHTS_SYSTEM_PROMPT: str = (
    "You are an expert analyst who extracts key insights and actionable points "
    "from meeting transcripts."
)


# ── Directive Tables ─────────────────────────────────────────────────────────


CONTENT_TYPE_DIRECTIVES: dict[ContentType, str] = {
    ContentType.ARTICLE: (
        "Create a comprehensive article with clear sections, headings, and a logical flow. "
        "Include an introduction, main points, and conclusion."
    ),
    ContentType.BLOG_POST: (
        "Create an engaging blog post with a friendly voice, clear headings, and actionable "
        "insights. Make it shareable and easy to read."
    ),
    ContentType.SOCIAL_MEDIA: (
        "Create multiple social media posts (Twitter, LinkedIn, Instagram) with engaging hooks, "
        "hashtags, and call-to-actions. Keep each post concise and impactful."
    ),
    ContentType.NEWSLETTER: (
        "Create a newsletter format with a compelling subject line, introduction, key "
        "highlights, and a call-to-action. Make it scannable and informative."
    ),
    ContentType.WHITEPAPER: (
        "Create a professional whitepaper with executive summary, detailed analysis, data "
        "insights, and recommendations. Use formal language and structure."
    ),
    ContentType.CASE_STUDY: (
        "Create a case study with problem statement, solution approach, implementation "
        "details, results, and key learnings. Include metrics and outcomes."
    ),
}

TONE_DIRECTIVES: dict[Tone, str] = {
    Tone.PROFESSIONAL: (
        "Use formal, business-appropriate language with industry terminology. "
        "Maintain a professional and authoritative tone."
    ),
    Tone.CASUAL: (
        "Use relaxed, friendly language. Write as if speaking to a colleague. "
        "Include relatable examples and informal expressions."
    ),
    Tone.ACADEMIC: (
        "Use scholarly language with proper citations and references. "
        "Maintain an analytical and research-based approach."
    ),
    Tone.CONVERSATIONAL: (
        "Use natural, flowing language that feels like a friendly conversation. "
        "Include questions and engaging elements."
    ),
}

LENGTH_DIRECTIVES: dict[Length, str] = {
    Length.SHORT: "Keep the content concise and focused. Aim for 300-500 words.",
    Length.MEDIUM: "Create comprehensive content with good detail. Aim for 800-1200 words.",
    Length.LONG: (
        "Create detailed, in-depth content with extensive coverage. Aim for 1500-2500 words."
    ),
}

MAX_OUTPUT_TOKENS: dict[Length, int] = {
    Length.SHORT: 1000,
    Length.MEDIUM: 2000,
    Length.LONG: 4000,
}

OUTLINE_MAX_TOKENS = 500
INSIGHTS_MAX_TOKENS = 500


# -- Output Shape (embedded in the prompt so the reply is parseable) ----------


_OUTPUT_SHAPE: dict = {
    "title": "Engaging title for the content",
    "content": "The main content body",
    "summary": "A brief summary of the key points",
    "key_takeaways": ["3-5 key points from the content"],
    "seoData": {
        "metaTitle": "SEO-optimized title (50-60 characters)",
        "metaDescription": "SEO-optimized description (150-160 characters)",
        "keywords": ["keyword1", "keyword2", "keyword3"],
    },
    "tags": ["tag1", "tag2", "tag3"],
    "category": "content category",
}


# ── Builders ─────────────────────────────────────────────────────────────────


def _type_label(content_type: ContentType) -> str:
    return content_type.value.lower().replace("_", " ")


def max_output_tokens(length: Length) -> int:
    """Token budget the provider may spend for a requested length."""
    return MAX_OUTPUT_TOKENS[length]


def build_prompt(request: GenerationRequest) -> str:
    """Build the full generation prompt for one request.

    Sections, in order: role preamble, content-type directive, tone
    directive, length directive, optional Title/Category/Tags lines, the
    transcript verbatim, and the JSON output shape.

    Args:
        request: GenerationRequest; the transcript is not validated here.

    Returns:
        Prompt string for the user message.
    """
    sections = [
        f"Please transform the following meeting transcript into "
        f"{_type_label(request.content_type)} content.",
        CONTENT_TYPE_DIRECTIVES[request.content_type],
        TONE_DIRECTIVES[request.tone],
        LENGTH_DIRECTIVES[request.length],
    ]

    hints = []
    if request.title:
        hints.append(f"Title: {request.title}")
    if request.category:
        hints.append(f"Category: {request.category}")
    if request.tags:
        hints.append(f"Tags: {', '.join(request.tags)}")
    if hints:
        sections.append("\n".join(hints))

    sections.append(f"Meeting Transcript:\n{request.transcript}")
    sections.append(
        "Please generate the content in the following JSON format:\n"
        f"{json.dumps(_OUTPUT_SHAPE, indent=2)}"
    )
    sections.append(
        "Focus on:\n"
        "- Extracting key insights and actionable points\n"
        "- Maintaining the original context and meaning\n"
        "- Creating engaging, readable content\n"
        "- Including relevant keywords naturally"
    )
    return "\n\n".join(sections)


def build_outline_prompt(transcript: str, content_type: ContentType) -> str:
    return (
        f"Create a detailed outline for a {_type_label(content_type)} based on this "
        "meeting transcript. Return only the outline points as a JSON array of strings:"
        f"\n\n{transcript}"
    )


def build_insights_prompt(transcript: str) -> str:
    return (
        "Extract the top 5-7 key insights and actionable points from this meeting "
        f"transcript. Return as a JSON array of strings:\n\n{transcript}"
    )
