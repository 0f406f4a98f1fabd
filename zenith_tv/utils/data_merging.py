"""
Data merging utilities

This module handles merging of channels from multiple playlist sources.
"""
import logging
from collections.abc import MutableMapping, Sequence

from zenith_tv.models import Channel

logger = logging.getLogger(__name__)


def merge_channels(
    existing_channels: MutableMapping[str, Channel],
    new_channels: Sequence[Channel]
) -> tuple[MutableMapping[str, Channel], int]:
    """
    Merge new channels into an ordered channel dictionary.

    The first channel seen for an id is kept as-is; later channels with the
    same id are dropped, whichever source they came from. Dict insertion order
    is the catalog order.

    Args:
        existing_channels: Ordered dictionary of channels merged so far (id -> Channel)
        new_channels: Channels of the next source, in document order

    Returns:
        Tuple of (updated_channels_dict, count_of_duplicates_dropped)
    """
    dropped = 0

    for channel in new_channels:
        if channel.id in existing_channels:
            dropped += 1
            logger.debug(
                "Skipping duplicate channel %s (%s, %s)",
                channel.id,
                channel.name,
                channel.language,
            )
            continue
        existing_channels[channel.id] = channel

    return existing_channels, dropped
