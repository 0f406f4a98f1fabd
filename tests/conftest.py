"""
pytest configuration and shared fixtures.

Network access is faked with httpx.MockTransport; preferences live in an
in-memory slot unless a test asks for a file.
"""
from collections.abc import Callable

import httpx
import pytest

from zenith_tv.models import Channel, PlaylistSource
from zenith_tv.services.channel_browser import ChannelBrowser
from zenith_tv.services.ingest_service import PlaylistIngestor
from zenith_tv.services.preference_store import InMemorySlot, PreferenceStore


HINDI_URL = "https://playlists.test/hin.m3u"
ENGLISH_URL = "https://playlists.test/eng.m3u"

HINDI_PLAYLIST = """#EXTM3U
#EXTINF:-1 tvg-id="aaj.in" tvg-logo="https://logos.test/aaj.png" group-title="News",Aaj Tak
https://streams.test/aaj/index.m3u8
#EXTINF:-1 tvg-id="dup-1" group-title="Music",Shared Channel
https://streams.test/shared-hin.m3u8
#EXTINF:-1 tvg-id="star.in" group-title="Sports",Star Sports
https://streams.test/star.m3u8
"""

ENGLISH_PLAYLIST = """#EXTM3U
#EXTINF:-1 tvg-id="bbc.uk" tvg-logo="https://logos.test/bbc.png" group-title="News",BBC News
https://streams.test/bbc.m3u8
#EXTINF:-1 tvg-id="dup-1" group-title="Entertainment",Shared Channel English
https://streams.test/shared-eng.m3u8
"""


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def sources() -> list[PlaylistSource]:
    return [
        PlaylistSource(url=HINDI_URL, language="Hindi"),
        PlaylistSource(url=ENGLISH_URL, language="English"),
    ]


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport serving url -> body, or url -> status/exception."""

    def factory(routes: dict[str, object]) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            target = routes.get(str(request.url))
            if target is None:
                return httpx.Response(404, text="not found")
            if isinstance(target, Exception):
                raise target
            if isinstance(target, int):
                return httpx.Response(target, text="error")
            return httpx.Response(200, text=str(target))

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def healthy_routes() -> dict[str, object]:
    return {HINDI_URL: HINDI_PLAYLIST, ENGLISH_URL: ENGLISH_PLAYLIST}


@pytest.fixture
def slot() -> InMemorySlot:
    return InMemorySlot()


@pytest.fixture
def store(slot: InMemorySlot) -> PreferenceStore:
    return PreferenceStore(slot)


@pytest.fixture
def make_browser(sources, store, make_transport):
    """Build a ChannelBrowser whose ingestion goes through a MockTransport."""

    def factory(routes: dict[str, object]) -> ChannelBrowser:
        transport = make_transport(routes)

        async def ingest_func(configured):
            async with httpx.AsyncClient(transport=transport) as client:
                return await PlaylistIngestor(configured, client=client).run()

        return ChannelBrowser(sources, store, ingest_func=ingest_func)

    return factory


@pytest.fixture
def catalog() -> tuple[Channel, ...]:
    return (
        Channel(id="a", name="Aaj Tak", logo="L", group="News", language="Hindi", url="http://s/a"),
        Channel(id="b", name="BBC News", logo="L", group="News", language="English", url="http://s/b"),
        Channel(id="c", name="Star Sports", logo="L", group="Sports", language="Hindi", url="http://s/c"),
    )
