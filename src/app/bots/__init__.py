"""Transcription bots -- Meetstream.ai bot lifecycle mirrored into the store.

Provides MeetstreamClient for the Meetstream.ai REST API, a total status
normalizer, and BotManager for create, refresh, delete and transcript
retrieval.
"""
