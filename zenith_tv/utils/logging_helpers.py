"""
Structured logging helpers for consistent log formatting.

Provides utilities for structured, clean logging of ingestion runs.
"""
import logging
from datetime import datetime, timezone


def log_source_processing(
    logger: logging.Logger,
    idx: int,
    total: int,
    url: str,
    language: str
) -> None:
    """
    Log source processing header.

    Args:
        logger: Logger instance
        idx: Current source index (1-based)
        total: Total number of sources
        url: Source URL being processed (already sanitized)
        language: Language tag applied to the source's channels
    """
    logger.info(f"Processing source {idx}/{total} [{language}]: {url}")


def log_ingest_start(logger: logging.Logger) -> None:
    """Log playlist ingestion start."""
    logger.info(f"Playlist ingestion started at {datetime.now(timezone.utc).isoformat()}")


def log_ingest_end(logger: logging.Logger) -> None:
    """Log playlist ingestion end."""
    logger.info(f"Playlist ingestion completed at {datetime.now(timezone.utc).isoformat()}")


def log_merge_summary(
    logger: logging.Logger,
    channels_count: int,
    duplicates_count: int
) -> None:
    """
    Log merge operation summary.

    Args:
        logger: Logger instance
        channels_count: Number of channels in the merged catalog
        duplicates_count: Number of duplicate channels dropped
    """
    logger.info(f"Merge summary - Channels: {channels_count}, Duplicates dropped: {duplicates_count}")
