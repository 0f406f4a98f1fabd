from pathlib import Path
from typing import Annotated
import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from zenith_tv.models import PlaylistSource


logger = logging.getLogger(__name__)

DEFAULT_PLAYLIST_SOURCES = [
    PlaylistSource(url="https://iptv-org.github.io/iptv/languages/hin.m3u", language="Hindi"),
    PlaylistSource(url="https://iptv-org.github.io/iptv/languages/ben.m3u", language="Bengali"),
    PlaylistSource(url="https://iptv-org.github.io/iptv/languages/eng.m3u", language="English"),
]


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    playlist_sources: Annotated[list[PlaylistSource], NoDecode] = list(DEFAULT_PLAYLIST_SOURCES)
    preferences_path: str = "./data/preferences.json"
    preferences_key: str = "zenith_prefs_v1"
    fetch_timeout_sec: float = 30.0
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("playlist_sources", mode="before")
    @classmethod
    def parse_playlist_sources(cls, value):
        """Parse comma-separated `url|Language` pairs or a list."""
        if value is None:
            return []
        if isinstance(value, str):
            if not value.strip():
                return []
            sources = []
            for item in value.split(","):
                item = item.strip()
                if not item:
                    continue
                url, sep, language = item.partition("|")
                if not sep:
                    raise ValueError(f"Playlist source must look like 'url|Language': {item}")
                sources.append({"url": url.strip(), "language": language.strip()})
            return sources
        if isinstance(value, list):
            return value
        return []

    @field_validator("playlist_sources", mode="after")
    @classmethod
    def validate_playlist_sources(cls, value: list[PlaylistSource]) -> list[PlaylistSource]:
        """Validate source URLs are HTTP/HTTPS and languages are set."""
        for source in value:
            if not source.url.lower().startswith(("http://", "https://")):
                raise ValueError(f"Playlist source URL must be HTTP/HTTPS: {source.url}")
            if not source.language.strip():
                raise ValueError(f"Playlist source has no language: {source.url}")
        return value

    @field_validator("preferences_path")
    @classmethod
    def validate_preferences_path(cls, value: str) -> str:
        """Validate preferences path is accessible."""
        path = Path(value)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            return value
        except (OSError, PermissionError) as exc:
            raise ValueError(f"Cannot access preferences path '{value}': {exc}") from exc

    @field_validator("preferences_key")
    @classmethod
    def validate_preferences_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("preferences_key must not be empty")
        return value

    @field_validator("fetch_timeout_sec")
    @classmethod
    def validate_fetch_timeout(cls, value: float) -> float:
        """Validate per-request HTTP timeout (seconds)."""
        if value <= 0:
            raise ValueError("fetch_timeout_sec must be > 0")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @model_validator(mode="after")
    def validate_source_configuration(self):
        """Validate cross-field configuration."""
        if not self.playlist_sources:
            logger.warning(
                "No playlist sources configured - ingestion will not retrieve any channels"
            )
        return self

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Playlist Sources: %s configured", len(self.playlist_sources))
        for source in self.playlist_sources:
            logger.info("    %s -> %s", source.language, source.url)
        logger.info("  Preferences: %s (key: %s)", self.preferences_path, self.preferences_key)
        logger.info("  Fetch Timeout: %ss", self.fetch_timeout_sec)
        logger.info("  Log Level: %s", self.log_level)


settings = CustomSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
