"""App catalog backend: submission, moderation and release ingestion."""

__version__ = "0.4.0"
