"""
HTTP fetch utilities

This module fetches playlist documents as text. No retries: a failed fetch is
reported to the caller, which decides what a failure means.
"""
import logging

import httpx


logger = logging.getLogger(__name__)


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    timeout: float | None = None,
) -> str:
    """
    Download a text document from URL

    Args:
        client: Shared async HTTP client
        url: URL to download from
        timeout: Per-request timeout in seconds (None uses the client default)

    Returns:
        Decoded response body

    Raises:
        httpx.HTTPStatusError: If the server answers with a non-success status
        httpx.HTTPError: On transport failures (timeouts, connection errors)
    """
    request_timeout = timeout if timeout is not None else client.timeout
    response = await client.get(url, timeout=request_timeout, follow_redirects=True)
    response.raise_for_status()

    size_kb = len(response.content) / 1024
    logger.debug(f"Downloaded {size_kb:.1f} KB (HTTP {response.status_code})")

    return response.text


def sanitize_url_for_logging(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    if "://" not in url:
        return url
    try:
        protocol, rest = url.split("://", 1)
        if "@" in rest.split("/", 1)[0]:
            rest = rest.split("@", 1)[1]
            return f"{protocol}://***:***@{rest}"
        return url
    except (ValueError, IndexError):
        return url
