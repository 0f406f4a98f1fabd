from typing import Annotated
import logging

from fastapi import APIRouter, Depends, HTTPException

from zenith_tv.dependencies import get_browser
from zenith_tv.schemas import (
    Channel,
    ChannelViewResponse,
    LanguageRequest,
    RefreshResponse,
    SearchRequest,
)
from zenith_tv.services.channel_browser import ChannelBrowser
from zenith_tv.services.fetch_coordinator import IngestInProgress
from zenith_tv.services.ingest_service import IngestionError


logger = logging.getLogger(__name__)

main_router = APIRouter()

Browser = Annotated[ChannelBrowser, Depends(get_browser)]


@main_router.get("/")
async def root(browser: Browser) -> dict:
    """Root endpoint with service information"""
    return {
        "service": "Zenith TV",
        "version": "0.1.0",
        "sources": len(browser.sources),
        "endpoints": {
            "refresh": "/refresh - Re-fetch all playlists (POST)",
            "channels": "/channels - Visible channels under the current filters",
            "filters": "/filters/... - Change language, categories or search",
            "favorites": "/favorites/... - Toggle favorites and the favorites view",
            "health": "/health - Health check"
        }
    }


@main_router.get("/health")
async def health_check(browser: Browser) -> dict:
    """Health check endpoint"""
    return {
        "status": "ok",
        "channels": len(browser.catalog),
        "refreshing": browser.is_refreshing(),
        "last_error": browser.error,
    }


@main_router.post("/refresh", response_model=RefreshResponse)
async def trigger_refresh(browser: Browser) -> dict:
    """
    Re-fetch every playlist source and publish a new catalog

    Fails with 503 only when every source failed; the previous catalog stays.
    """
    logger.info("Manual playlist refresh triggered via API")
    try:
        result = await browser.refresh()
    except IngestInProgress as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except IngestionError as exc:
        raise HTTPException(status_code=503, detail=browser.error or str(exc))

    return result.to_dict()


@main_router.get("/channels", response_model=ChannelViewResponse)
async def list_channels(browser: Browser) -> ChannelViewResponse:
    """Visible channels plus the language and category option lists"""
    return ChannelViewResponse.from_browser(browser)


@main_router.post("/channels/{channel_id}/select", response_model=Channel)
async def select_channel(channel_id: str, browser: Browser) -> Channel:
    try:
        channel = browser.select_channel(channel_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown channel: {channel_id}")
    return Channel.from_record(channel)


@main_router.put("/filters/language", response_model=ChannelViewResponse)
async def change_language(request: LanguageRequest, browser: Browser) -> ChannelViewResponse:
    """Switch language; clears the category selection and the favorites view"""
    browser.change_language(request.language)
    return ChannelViewResponse.from_browser(browser)


@main_router.put("/filters/search", response_model=ChannelViewResponse)
async def change_search(request: SearchRequest, browser: Browser) -> ChannelViewResponse:
    browser.set_search(request.query)
    return ChannelViewResponse.from_browser(browser)


@main_router.post("/filters/categories/{category}/toggle", response_model=ChannelViewResponse)
async def toggle_category(category: str, browser: Browser) -> ChannelViewResponse:
    browser.toggle_category(category)
    return ChannelViewResponse.from_browser(browser)


@main_router.delete("/filters/categories", response_model=ChannelViewResponse)
async def clear_categories(browser: Browser) -> ChannelViewResponse:
    browser.clear_categories()
    return ChannelViewResponse.from_browser(browser)


@main_router.post("/favorites/view/toggle", response_model=ChannelViewResponse)
async def toggle_favorites_view(browser: Browser) -> ChannelViewResponse:
    browser.toggle_show_favorites()
    return ChannelViewResponse.from_browser(browser)


@main_router.post("/favorites/{channel_id}/toggle", response_model=ChannelViewResponse)
async def toggle_favorite(channel_id: str, browser: Browser) -> ChannelViewResponse:
    browser.toggle_favorite(channel_id)
    return ChannelViewResponse.from_browser(browser)
