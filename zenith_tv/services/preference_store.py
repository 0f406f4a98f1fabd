"""
Preference Store

Persists the user-chosen part of the filter state to a single key-value slot.
Storage failures never reach the caller: loading falls back to defaults and
saving drops the write.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel


logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES_KEY = "zenith_prefs_v1"


class Preferences(BaseModel):
    """Persisted projection of the filter state"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    selected_language: str = Field(default="All", description="'All' or an exact language tag")
    selected_categories: list[str] = Field(default_factory=list)
    search_query: str = ""
    favorites: list[str] = Field(default_factory=list, description="Favorited channel ids")
    show_favorites: bool = False

    @field_validator("selected_language")
    @classmethod
    def validate_selected_language(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("selected_language must not be empty")
        return v


class KeyValueSlot(Protocol):
    """Minimal key-value storage the preference store writes through"""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemorySlot:
    """Process-local slot, contents vanish with the process"""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileSlot:
    """
    Slot backed by a JSON object file on disk

    The file maps keys to string values. Writes go through a temporary file
    and an atomic rename, so a crash never leaves a half-written document.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def get(self, key: str) -> str | None:
        data = self._read()
        value = data.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except ValueError:
            logger.warning(f"Overwriting unreadable preferences file {self.path}")
            data = {}
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Preferences file {self.path} does not hold a JSON object")
        return data


class PreferenceStore:
    """Loads and saves Preferences under one key of a KeyValueSlot"""

    def __init__(self, slot: KeyValueSlot, key: str = DEFAULT_PREFERENCES_KEY) -> None:
        self.slot = slot
        self.key = key

    def load(self) -> Preferences:
        """
        Read preferences, merging stored values over defaults field by field.

        A missing or invalid field falls back to its own default without
        affecting the others. Unreadable storage gives all defaults.
        """
        try:
            raw_value = self.slot.get(self.key)
        except (OSError, ValueError) as exc:
            logger.warning(f"Failed to read preferences from storage: {exc}")
            return Preferences()

        if raw_value is None:
            logger.debug("No stored preferences, using defaults")
            return Preferences()

        try:
            raw = json.loads(raw_value)
        except ValueError as exc:
            logger.warning(f"Stored preferences are not valid JSON, using defaults: {exc}")
            return Preferences()

        if not isinstance(raw, dict):
            logger.warning("Stored preferences are not a JSON object, using defaults")
            return Preferences()

        values: dict[str, Any] = {}
        for name, field in Preferences.model_fields.items():
            alias = field.alias or name
            if alias not in raw:
                continue
            try:
                candidate = Preferences.model_validate({alias: raw[alias]}, strict=True)
            except ValidationError as exc:
                logger.warning(
                    "Ignoring invalid stored preference %s: %s",
                    alias,
                    exc.errors()[0].get("msg"),
                )
                continue
            values[name] = getattr(candidate, name)

        return Preferences(**values)

    def save(self, preferences: Preferences) -> None:
        """Overwrite the stored preferences; failures are logged and dropped."""
        try:
            self.slot.set(self.key, preferences.model_dump_json(by_alias=True))
        except (OSError, TypeError, ValueError) as exc:
            logger.warning(f"Failed to save preferences: {exc}")
