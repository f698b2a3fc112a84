"""Keyword and pattern analysis of meeting transcripts.

Pure functions, no I/O:
- extract_topics: up to five topics from a fixed keyword list, most mentioned first
- extract_action_items: sentences matching commitment / task / assignment patterns
- format_duration: seconds -> "1h 5m" / "12m"
"""

from __future__ import annotations

import re

from src.app.meetings.schemas import TranscriptAnalysis

TOPIC_KEYWORDS: tuple[str, ...] = (
    "product",
    "development",
    "marketing",
    "sales",
    "finance",
    "hr",
    "operations",
    "technology",
    "strategy",
    "planning",
    "review",
    "budget",
    "timeline",
    "goals",
)
MAX_TOPICS = 5

_ACTION_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"(?:need to|have to|should|must|will)\s+(.+?)(?:\.|$)", re.IGNORECASE | re.MULTILINE),
    re.compile(r"(?:action item|todo|task):\s*(.+?)(?:\.|$)", re.IGNORECASE | re.MULTILINE),
    re.compile(r"(?:assign|delegate)\s+(.+?)\s+to\s+(.+?)(?:\.|$)", re.IGNORECASE | re.MULTILINE),
)


def extract_topics(transcript: str) -> list[str]:
    """Rank keyword topics by the number of words containing them.

    Ties keep keyword-list order.
    """
    words = transcript.lower().split()
    counts = {
        topic: sum(1 for word in words if topic in word) for topic in TOPIC_KEYWORDS
    }
    ranked = sorted(
        (topic for topic, count in counts.items() if count > 0),
        key=lambda topic: counts[topic],
        reverse=True,
    )
    return ranked[:MAX_TOPICS]


def extract_action_items(transcript: str) -> list[str]:
    """Matched action phrases, de-duplicated in first-seen order."""
    items: list[str] = []
    for pattern in _ACTION_PATTERNS:
        for match in pattern.finditer(transcript):
            item = match.group(0).strip()
            if item and item not in items:
                items.append(item)
    return items


def format_duration(duration_seconds: int) -> str:
    hours, remainder = divmod(max(int(duration_seconds), 0), 3600)
    minutes = remainder // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def analyze_transcript(transcript: str, duration_seconds: int) -> TranscriptAnalysis:
    return TranscriptAnalysis(
        topics=extract_topics(transcript),
        action_items=extract_action_items(transcript),
        duration_formatted=format_duration(duration_seconds),
        word_count=len(transcript.split()),
    )
