"""
Dependency Wiring

Builds the process-wide ChannelBrowser from settings and hands it to the
API routes. Tests replace it through FastAPI dependency overrides.
"""
import logging

from zenith_tv.config import settings
from zenith_tv.services.channel_browser import ChannelBrowser
from zenith_tv.services.preference_store import JsonFileSlot, PreferenceStore


logger = logging.getLogger(__name__)

# Global singleton instance
_browser: ChannelBrowser | None = None


def build_browser() -> ChannelBrowser:
    """Create a ChannelBrowser wired to the configured sources and preference file."""
    store = PreferenceStore(JsonFileSlot(settings.preferences_path), key=settings.preferences_key)
    logger.debug(f"Building channel browser with {len(settings.playlist_sources)} sources")
    return ChannelBrowser(
        settings.playlist_sources,
        store,
        timeout=settings.fetch_timeout_sec,
    )


def get_browser() -> ChannelBrowser:
    """
    Get or create the global channel browser singleton.

    Returns:
        The global ChannelBrowser instance
    """
    global _browser
    if _browser is None:
        _browser = build_browser()
    return _browser


def reset_browser() -> None:
    """
    Reset the channel browser (mainly for testing).

    WARNING: Only use this in test environments!
    """
    global _browser
    _browser = None
