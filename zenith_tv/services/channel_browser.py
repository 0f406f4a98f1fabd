"""
Channel Browser

Application layer holding the published catalog, the current filter state
and the selected channel. All mutation happens on the event loop thread;
the catalog and the filter state are immutable values swapped in whole, so
every view is computed from a consistent pair.
"""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence

from zenith_tv.models import Channel, PlaylistSource
from zenith_tv.services.fetch_coordinator import FetchCoordinator
from zenith_tv.services.filter_service import FilterState, FilterView, compute_view
from zenith_tv.services.ingest_service import IngestionError, IngestionResult, PlaylistIngestor
from zenith_tv.services.preference_store import PreferenceStore


logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load channels. Please try again later."

IngestFunc = Callable[[Sequence[PlaylistSource]], Awaitable[IngestionResult]]


class ChannelBrowser:
    """Owns catalog and filter state for one viewer"""

    def __init__(
        self,
        sources: Sequence[PlaylistSource],
        store: PreferenceStore,
        *,
        timeout: float = 30.0,
        ingest_func: IngestFunc | None = None,
        coordinator: FetchCoordinator | None = None,
    ) -> None:
        self.sources = list(sources)
        self.store = store
        self._timeout = timeout
        self._ingest_func = ingest_func or self._default_ingest
        self._coordinator = coordinator or FetchCoordinator()

        self.catalog: tuple[Channel, ...] = ()
        self.state = FilterState()
        self.selected_channel_id: str | None = None
        self.loading = False
        self.error: str | None = None
        self.last_result: IngestionResult | None = None

    async def _default_ingest(self, sources: Sequence[PlaylistSource]) -> IngestionResult:
        return await PlaylistIngestor(sources, timeout=self._timeout).run()

    def restore_preferences(self) -> FilterState:
        """Load persisted preferences into the filter state. Call once at startup."""
        self.state = FilterState.from_preferences(self.store.load())
        logger.info(
            "Restored preferences: language=%s, categories=%s, favorites=%s",
            self.state.selected_language,
            len(self.state.selected_categories),
            len(self.state.favorites),
        )
        return self.state

    async def refresh(self) -> IngestionResult:
        """
        Re-run ingestion from scratch and publish the new catalog.

        Raises:
            IngestInProgress: If a refresh is already running
            IngestionError: If every source failed; the previous catalog stays
        """
        return await self._coordinator.execute(self._refresh)

    async def _refresh(self) -> IngestionResult:
        self.loading = True
        try:
            result = await self._ingest_func(self.sources)
        except IngestionError as exc:
            self.error = LOAD_FAILED_MESSAGE
            logger.error("Channel catalog load failed: %s", exc)
            raise
        finally:
            self.loading = False

        self.catalog = result.channels
        self.last_result = result
        self.error = None
        self._ensure_selection()
        logger.info(
            "Published catalog with %s channels (%s/%s sources)",
            len(self.catalog),
            result.sources_succeeded,
            len(result.sources),
        )
        return result

    def _ensure_selection(self) -> None:
        if self.selected_channel_id is not None and self.find_channel(self.selected_channel_id):
            return
        self.selected_channel_id = self.catalog[0].id if self.catalog else None

    def is_refreshing(self) -> bool:
        return self._coordinator.is_fetching()

    def view(self) -> FilterView:
        return compute_view(self.catalog, self.state)

    def find_channel(self, channel_id: str) -> Channel | None:
        for channel in self.catalog:
            if channel.id == channel_id:
                return channel
        return None

    @property
    def selected_channel(self) -> Channel | None:
        if self.selected_channel_id is None:
            return None
        return self.find_channel(self.selected_channel_id)

    def select_channel(self, channel_id: str) -> Channel:
        """
        Raises:
            KeyError: If the channel is not in the current catalog
        """
        channel = self.find_channel(channel_id)
        if channel is None:
            raise KeyError(channel_id)
        self.selected_channel_id = channel.id
        return channel

    def change_language(self, language: str) -> FilterView:
        return self._apply(self.state.with_language(language))

    def toggle_category(self, category: str) -> FilterView:
        return self._apply(self.state.toggle_category(category))

    def clear_categories(self) -> FilterView:
        return self._apply(self.state.clear_categories())

    def set_search(self, query: str) -> FilterView:
        return self._apply(self.state.with_search(query))

    def toggle_favorite(self, channel_id: str) -> FilterView:
        return self._apply(self.state.toggle_favorite(channel_id))

    def toggle_show_favorites(self) -> FilterView:
        return self._apply(self.state.toggle_show_favorites())

    def _apply(self, new_state: FilterState) -> FilterView:
        changed = new_state != self.state
        self.state = new_state
        if changed:
            self.store.save(new_state.to_preferences())
        return self.view()
