"""
Playlist Ingestion Service

Fetches every configured playlist source concurrently, parses the ones that
arrived and merges them into a single deduplicated channel catalog.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Sequence

import httpx

from zenith_tv.models import Channel, PlaylistSource
from zenith_tv.services.playlist_parser import parse_playlist
from zenith_tv.utils.data_merging import merge_channels
from zenith_tv.utils.http_fetch import fetch_text, sanitize_url_for_logging
from zenith_tv.utils.logging_helpers import (
    log_ingest_end,
    log_ingest_start,
    log_merge_summary,
    log_source_processing,
)


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 30.0


class IngestionError(RuntimeError):
    """Raised when no playlist source could be loaded"""

    def __init__(self, message: str, sources: Sequence[SourceSummary] = ()) -> None:
        super().__init__(message)
        self.sources = list(sources)


@dataclass(slots=True)
class SourceSummary:
    index: int
    source_url: str
    sanitized_url: str
    language: str
    started_at: datetime
    completed_at: datetime
    status: Literal["success", "failed"]
    channels_parsed: int = 0
    error: str | None = None
    channels: list[Channel] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        return max(0.0, (self.completed_at - self.started_at).total_seconds())

    def to_dict(self) -> dict:
        payload = {
            "source_index": self.index,
            "source_url": self.sanitized_url,
            "language": self.language,
            "status": self.status,
            "channels_parsed": self.channels_parsed,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
            "duration_seconds": self.duration_seconds,
        }
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass(slots=True)
class IngestionResult:
    channels: tuple[Channel, ...]
    sources: list[SourceSummary]
    duplicates_dropped: int
    started_at: datetime
    completed_at: datetime

    @property
    def sources_succeeded(self) -> int:
        return sum(1 for summary in self.sources if summary.status == "success")

    @property
    def sources_failed(self) -> int:
        return sum(1 for summary in self.sources if summary.status == "failed")

    def to_dict(self) -> dict:
        return {
            "status": "success",
            "timestamp": self.completed_at.isoformat(),
            "channels_total": len(self.channels),
            "duplicates_dropped": self.duplicates_dropped,
            "sources_processed": len(self.sources),
            "sources_succeeded": self.sources_succeeded,
            "sources_failed": self.sources_failed,
            "source_details": [summary.to_dict() for summary in self.sources],
            "started_at": self.started_at.isoformat(),
        }


class PlaylistIngestor:
    """Coordinates fetch, parse and merge stages for one ingestion run."""

    def __init__(
        self,
        sources: Sequence[PlaylistSource],
        *,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.sources = list(sources)
        self.total_sources = len(self.sources)
        self._timeout = timeout
        self._client = client

    async def run(self) -> IngestionResult:
        """
        Run one ingestion.

        Returns:
            The merged catalog with per-source summaries

        Raises:
            IngestionError: If no sources are configured or every source failed
        """
        log_ingest_start(logger)
        started_at = datetime.now(timezone.utc)

        if not self.sources:
            logger.warning("No playlist sources configured - nothing to ingest")
            raise IngestionError("No playlist sources configured")

        summaries = await self._collect_sources()

        if not any(summary.status == "success" for summary in summaries):
            details = "; ".join(
                f"{summary.sanitized_url}: {summary.error}" for summary in summaries
            )
            logger.error("All %s playlist sources failed: %s", len(summaries), details)
            raise IngestionError(
                f"All {len(summaries)} playlist sources failed",
                summaries,
            )

        channels, duplicates = self._merge_sources(summaries)
        log_ingest_end(logger)

        return IngestionResult(
            channels=channels,
            sources=summaries,
            duplicates_dropped=duplicates,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
        )

    async def _collect_sources(self) -> list[SourceSummary]:
        if self._client is not None:
            return await self._gather(self._client)

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._gather(client)

    async def _gather(self, client: httpx.AsyncClient) -> list[SourceSummary]:
        tasks = [
            asyncio.create_task(self._process_source(client, index, source))
            for index, source in enumerate(self.sources, start=1)
        ]

        summaries = await asyncio.gather(*tasks)
        summaries.sort(key=lambda summary: summary.index)
        return summaries

    async def _process_source(
        self,
        client: httpx.AsyncClient,
        index: int,
        source: PlaylistSource,
    ) -> SourceSummary:
        sanitized_url = sanitize_url_for_logging(source.url)
        started_at = datetime.now(timezone.utc)
        log_source_processing(logger, index, self.total_sources, sanitized_url, source.language)

        try:
            document = await fetch_text(client, source.url, timeout=self._timeout)
            channels = parse_playlist(document, source.language)
        except httpx.HTTPError as exc:
            logger.error(
                "[Source %s] Failed to fetch %s: %s",
                index,
                sanitized_url,
                exc,
            )
            return self._failed_summary(index, source, sanitized_url, started_at, exc)
        except Exception as exc:
            logger.error(
                "[Source %s] Failed to process %s: %s",
                index,
                sanitized_url,
                exc,
                exc_info=True,
            )
            return self._failed_summary(index, source, sanitized_url, started_at, exc)

        completed_at = datetime.now(timezone.utc)
        logger.info(
            "[Source %s/%s] Parsed %s channels from %s",
            index,
            self.total_sources,
            len(channels),
            sanitized_url,
        )
        logger.debug(
            "[Source %s] Channel IDs (first 5): %s",
            index,
            [channel.id for channel in channels[:5]],
        )

        return SourceSummary(
            index=index,
            source_url=source.url,
            sanitized_url=sanitized_url,
            language=source.language,
            started_at=started_at,
            completed_at=completed_at,
            status="success",
            channels_parsed=len(channels),
            channels=channels,
        )

    @staticmethod
    def _failed_summary(
        index: int,
        source: PlaylistSource,
        sanitized_url: str,
        started_at: datetime,
        exc: Exception,
    ) -> SourceSummary:
        return SourceSummary(
            index=index,
            source_url=source.url,
            sanitized_url=sanitized_url,
            language=source.language,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            status="failed",
            error=str(exc) or type(exc).__name__,
        )

    def _merge_sources(self, summaries: list[SourceSummary]) -> tuple[tuple[Channel, ...], int]:
        merged: dict[str, Channel] = {}
        total_dropped = 0

        for summary in summaries:
            if summary.status != "success":
                continue
            merged, dropped = merge_channels(merged, summary.channels)
            total_dropped += dropped
            if dropped:
                logger.info(
                    "[Source %s] Dropped %s channel(s) already present in the catalog",
                    summary.index,
                    dropped,
                )
            summary.channels.clear()

        log_merge_summary(logger, len(merged), total_dropped)
        return tuple(merged.values()), total_dropped


async def ingest(
    sources: Sequence[PlaylistSource],
    *,
    timeout: float = DEFAULT_TIMEOUT_SEC,
    client: httpx.AsyncClient | None = None,
) -> tuple[Channel, ...]:
    """
    Fetch, parse and merge all sources into a catalog.

    Raises:
        IngestionError: If every source failed
    """
    result = await PlaylistIngestor(sources, timeout=timeout, client=client).run()
    return result.channels
