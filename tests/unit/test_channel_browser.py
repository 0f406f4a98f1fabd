"""Channel browser unit tests.

Covers:
- catalog publication and first-channel selection
- total failure keeping the previous catalog
- preference restore and persistence on every change
- refusal of overlapping refreshes
"""
import asyncio
import json

import httpx
import pytest

from tests.conftest import ENGLISH_URL, HINDI_URL
from zenith_tv.services.channel_browser import LOAD_FAILED_MESSAGE, ChannelBrowser
from zenith_tv.services.fetch_coordinator import IngestInProgress
from zenith_tv.services.ingest_service import IngestionError
from zenith_tv.services.preference_store import DEFAULT_PREFERENCES_KEY, InMemorySlot, PreferenceStore

pytestmark = pytest.mark.anyio


def _failing_routes():
    return {
        HINDI_URL: httpx.ConnectError("down"),
        ENGLISH_URL: httpx.ConnectError("down"),
    }


class TestRefresh:

    async def test_publishes_catalog_and_selects_first_channel(self, make_browser, healthy_routes):
        browser = make_browser(healthy_routes)

        result = await browser.refresh()

        assert len(browser.catalog) == 4
        assert browser.catalog == result.channels
        assert browser.selected_channel_id == "aaj.in"
        assert browser.error is None
        assert browser.loading is False

    async def test_total_failure_sets_error_and_leaves_catalog_empty(self, make_browser):
        browser = make_browser(_failing_routes())

        with pytest.raises(IngestionError):
            await browser.refresh()

        assert browser.catalog == ()
        assert browser.error == LOAD_FAILED_MESSAGE
        assert browser.selected_channel is None
        assert browser.loading is False

    async def test_failed_retry_keeps_previous_catalog(self, make_browser, healthy_routes):
        browser = make_browser(healthy_routes)
        await browser.refresh()
        previous = browser.catalog

        failing = make_browser(_failing_routes())
        browser._ingest_func = failing._ingest_func

        with pytest.raises(IngestionError):
            await browser.refresh()

        assert browser.catalog is previous
        assert browser.error == LOAD_FAILED_MESSAGE

    async def test_retry_after_failure_clears_error(self, make_browser, healthy_routes):
        browser = make_browser(_failing_routes())
        with pytest.raises(IngestionError):
            await browser.refresh()

        browser._ingest_func = make_browser(healthy_routes)._ingest_func
        await browser.refresh()

        assert browser.error is None
        assert len(browser.catalog) == 4

    async def test_selection_survives_refresh_when_channel_remains(self, make_browser, healthy_routes):
        browser = make_browser(healthy_routes)
        await browser.refresh()
        browser.select_channel("bbc.uk")

        await browser.refresh()

        assert browser.selected_channel_id == "bbc.uk"

    async def test_overlapping_refresh_is_rejected(self, sources, store):
        release = asyncio.Event()

        async def slow_ingest(configured):
            await release.wait()
            raise IngestionError("never mind")

        browser = ChannelBrowser(sources, store, ingest_func=slow_ingest)
        first = asyncio.create_task(browser.refresh())
        await asyncio.sleep(0)

        assert browser.is_refreshing()
        with pytest.raises(IngestInProgress):
            await browser.refresh()

        release.set()
        with pytest.raises(IngestionError):
            await first


class TestFiltersAndPreferences:

    async def test_restore_happens_before_catalog(self, sources):
        document = json.dumps({
            "selectedLanguage": "Hindi",
            "selectedCategories": ["News"],
            "favorites": ["bbc.uk"],
        })
        store = PreferenceStore(InMemorySlot({DEFAULT_PREFERENCES_KEY: document}))
        browser = ChannelBrowser(sources, store)

        state = browser.restore_preferences()

        assert browser.catalog == ()
        assert state.selected_language == "Hindi"
        assert state.selected_categories == ("News",)
        assert state.favorites == ("bbc.uk",)

    async def test_restored_filters_apply_to_loaded_catalog(self, make_browser, healthy_routes, slot):
        slot.set(DEFAULT_PREFERENCES_KEY, json.dumps({"selectedLanguage": "English"}))
        browser = make_browser(healthy_routes)
        browser.restore_preferences()

        await browser.refresh()

        assert [channel.id for channel in browser.view().visible] == ["bbc.uk"]

    async def test_language_change_persists_and_resets(self, make_browser, healthy_routes, slot):
        browser = make_browser(healthy_routes)
        await browser.refresh()
        browser.toggle_category("News")
        browser.toggle_show_favorites()

        view = browser.change_language("Hindi")

        stored = json.loads(slot.get(DEFAULT_PREFERENCES_KEY))
        assert stored["selectedLanguage"] == "Hindi"
        assert stored["selectedCategories"] == []
        assert stored["showFavorites"] is False
        assert view.categories == ["Music", "News", "Sports"]
        assert [channel.id for channel in view.visible] == ["aaj.in", "dup-1", "star.in"]

    async def test_every_change_is_saved(self, make_browser, healthy_routes, slot):
        browser = make_browser(healthy_routes)
        await browser.refresh()

        browser.set_search("bbc")
        assert json.loads(slot.get(DEFAULT_PREFERENCES_KEY))["searchQuery"] == "bbc"

        browser.toggle_favorite("bbc.uk")
        assert json.loads(slot.get(DEFAULT_PREFERENCES_KEY))["favorites"] == ["bbc.uk"]

        browser.toggle_category("News")
        browser.clear_categories()
        assert json.loads(slot.get(DEFAULT_PREFERENCES_KEY))["selectedCategories"] == []

    async def test_unchanged_state_is_not_rewritten(self, make_browser, healthy_routes, slot):
        browser = make_browser(healthy_routes)
        await browser.refresh()

        browser.clear_categories()

        assert slot.get(DEFAULT_PREFERENCES_KEY) is None

    async def test_favorites_view_crosses_languages(self, make_browser, healthy_routes):
        browser = make_browser(healthy_routes)
        await browser.refresh()
        browser.change_language("Hindi")
        browser.toggle_favorite("bbc.uk")

        view = browser.toggle_show_favorites()

        assert [channel.id for channel in view.visible] == ["bbc.uk"]

    async def test_select_unknown_channel_raises(self, make_browser, healthy_routes):
        browser = make_browser(healthy_routes)
        await browser.refresh()

        with pytest.raises(KeyError):
            browser.select_channel("missing")
