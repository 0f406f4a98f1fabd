"""
Domain records for Zenith TV

Channels and playlist sources are immutable once created.
"""
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PlaylistSource:
    """One remote playlist document and the language its channels are tagged with."""
    url: str
    language: str


@dataclass(frozen=True, slots=True)
class Channel:
    """A single playable channel parsed from a playlist entry."""
    id: str
    name: str
    logo: str
    group: str
    language: str
    url: str

    def __repr__(self) -> str:
        return f"<Channel(id={self.id}, name={self.name}, language={self.language})>"


__all__ = ["Channel", "PlaylistSource"]
