"""Content generation -- transcript to structured, publishable content.

Provides the prompt builder, the best-effort parser for provider output,
ContentGenerator for the generate-and-persist pipeline, and ContentService
for view-counted reads and publishing.
"""
