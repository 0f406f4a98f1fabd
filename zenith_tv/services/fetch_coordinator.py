"""
Ingestion Coordination

Ensures at most one playlist ingestion runs at a time.
"""
import asyncio
import logging
from typing import Awaitable, Callable, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


class IngestInProgress(RuntimeError):
    """Raised when an ingestion is requested while another one is running"""


class FetchCoordinator:
    """
    Coordinates ingestion runs to prevent concurrent executions.

    A request arriving while a run is active is rejected instead of queued.
    """

    def __init__(self):
        """Initialize the fetch coordinator with a lock."""
        self._fetch_lock = asyncio.Lock()

    async def execute(self, fetch_func: Callable[[], Awaitable[T]]) -> T:
        """
        Execute an ingestion with concurrency protection.

        Args:
            fetch_func: Async function to execute

        Returns:
            Result from fetch_func

        Raises:
            IngestInProgress: If another ingestion is already running
            Any exception raised by fetch_func
        """
        if self._fetch_lock.locked():
            logger.warning("Playlist ingestion already in progress, skipping this request")
            raise IngestInProgress("Playlist ingestion already in progress")

        async with self._fetch_lock:
            return await fetch_func()

    def is_fetching(self) -> bool:
        """
        Check if an ingestion is currently in progress.

        Returns:
            True if ingestion is running, False otherwise
        """
        return self._fetch_lock.locked()
