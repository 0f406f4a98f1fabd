"""
Services package for Zenith TV

This package contains all business logic and service layer components.
"""
from zenith_tv.services.channel_browser import ChannelBrowser
from zenith_tv.services.filter_service import FilterState, FilterView, compute_view
from zenith_tv.services.ingest_service import IngestionError, PlaylistIngestor, ingest
from zenith_tv.services.playlist_parser import parse_playlist
from zenith_tv.services.preference_store import PreferenceStore, Preferences

__all__ = [
    'ChannelBrowser',
    'FilterState',
    'FilterView',
    'compute_view',
    'IngestionError',
    'PlaylistIngestor',
    'ingest',
    'parse_playlist',
    'PreferenceStore',
    'Preferences',
]
