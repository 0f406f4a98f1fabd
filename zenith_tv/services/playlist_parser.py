import hashlib
import logging
import re

from zenith_tv.models import Channel

logger = logging.getLogger(__name__)

EXTINF_PREFIX = "#EXTINF"
STREAM_PREFIX = "http"

DEFAULT_LOGO = "https://picsum.photos/200/200?blur=2"
DEFAULT_GROUP = "General"
DEFAULT_NAME = "Unknown Channel"

TVG_ID_RE = re.compile(r'tvg-id="([^"]+)"')
TVG_LOGO_RE = re.compile(r'tvg-logo="([^"]+)"')
GROUP_TITLE_RE = re.compile(r'group-title="([^"]+)"')


def parse_playlist(document: str, language_tag: str) -> list[Channel]:
    """
    Parse an #EXTINF playlist document into channels

    Each metadata line opens a pending entry which is completed by the next
    stream URL line. Entries without a URL are dropped, unknown lines are
    skipped, nothing here raises on malformed input.

    Args:
        document: Raw playlist text
        language_tag: Language assigned to every channel of this document

    Returns:
        Channels in document order
    """
    channels: list[Channel] = []
    pending: dict[str, str] | None = None
    dropped = 0

    for raw_line in document.splitlines():
        line = raw_line.strip()

        if line.startswith(EXTINF_PREFIX):
            if pending is not None:
                dropped += 1
            pending = _parse_extinf(line, language_tag)
        elif line.startswith(STREAM_PREFIX):
            if pending is not None and pending["name"]:
                channels.append(_complete_entry(pending, line))
            pending = None

    if pending is not None:
        dropped += 1
    if dropped:
        logger.debug("Dropped %s [%s] entries without stream URL", dropped, language_tag)

    return channels


def _parse_extinf(line: str, language_tag: str) -> dict[str, str]:
    """Extract the pending entry fields from a metadata line"""
    name = line.rsplit(",", 1)[-1].strip() if "," in line else ""

    return {
        "id": _match(TVG_ID_RE, line),
        "logo": _match(TVG_LOGO_RE, line) or DEFAULT_LOGO,
        "group": _match(GROUP_TITLE_RE, line) or DEFAULT_GROUP,
        "name": name or DEFAULT_NAME,
        "language": language_tag,
    }


def _complete_entry(pending: dict[str, str], url: str) -> Channel:
    channel_id = pending["id"] or synthesize_channel_id(
        pending["name"], pending["group"], pending["language"], url
    )
    return Channel(
        id=channel_id,
        name=pending["name"],
        logo=pending["logo"],
        group=pending["group"],
        language=pending["language"],
        url=url,
    )


def _match(pattern: re.Pattern[str], line: str) -> str:
    match = pattern.search(line)
    return match.group(1) if match else ""


def synthesize_channel_id(name: str, group: str, language: str, url: str) -> str:
    """
    Build a stable id for an entry that carries no tvg-id

    Same content gives the same id on every run.
    """
    digest = hashlib.sha1(f"{language}|{group}|{name}|{url}".encode("utf-8")).hexdigest()
    return f"gen-{digest[:12]}"
