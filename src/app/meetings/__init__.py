"""Meetings -- stored transcripts with derived topics and action items.

Provides the meeting schemas and model, MeetingRepository, the pure
transcript analysis helpers, and MeetingService, which also writes the
per-meeting analytics record.
"""
