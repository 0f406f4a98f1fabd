"""
Channel Filter Service

Pure derivations over a catalog and a filter state snapshot. Nothing here
caches or subscribes: callers decide when to recompute.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from zenith_tv.models import Channel
from zenith_tv.services.preference_store import Preferences

ALL_LANGUAGES = "All"


@dataclass(frozen=True, slots=True)
class FilterState:
    """User-controlled filter inputs. Transitions return new instances."""
    selected_language: str = ALL_LANGUAGES
    selected_categories: tuple[str, ...] = ()
    search_query: str = ""
    favorites: tuple[str, ...] = ()
    show_favorites: bool = False

    def with_language(self, language: str) -> FilterState:
        """Switch language; category selection and favorites view are reset."""
        return replace(
            self,
            selected_language=language,
            selected_categories=(),
            show_favorites=False,
        )

    def toggle_category(self, category: str) -> FilterState:
        if category in self.selected_categories:
            categories = tuple(c for c in self.selected_categories if c != category)
        else:
            categories = (*self.selected_categories, category)
        return replace(self, selected_categories=categories)

    def clear_categories(self) -> FilterState:
        return replace(self, selected_categories=())

    def with_search(self, query: str) -> FilterState:
        return replace(self, search_query=query)

    def toggle_favorite(self, channel_id: str) -> FilterState:
        if channel_id in self.favorites:
            favorites = tuple(f for f in self.favorites if f != channel_id)
        else:
            favorites = (*self.favorites, channel_id)
        return replace(self, favorites=favorites)

    def toggle_show_favorites(self) -> FilterState:
        return replace(self, show_favorites=not self.show_favorites)

    def to_preferences(self) -> Preferences:
        return Preferences(
            selected_language=self.selected_language,
            selected_categories=list(self.selected_categories),
            search_query=self.search_query,
            favorites=list(self.favorites),
            show_favorites=self.show_favorites,
        )

    @classmethod
    def from_preferences(cls, preferences: Preferences) -> FilterState:
        return cls(
            selected_language=preferences.selected_language,
            selected_categories=tuple(dict.fromkeys(preferences.selected_categories)),
            search_query=preferences.search_query,
            favorites=tuple(dict.fromkeys(preferences.favorites)),
            show_favorites=preferences.show_favorites,
        )


@dataclass(frozen=True, slots=True)
class FilterView:
    """Everything derived from one (catalog, filter state) snapshot."""
    languages: list[str]
    categories: list[str]
    visible: list[Channel]


def compute_languages(catalog: Sequence[Channel]) -> list[str]:
    """Distinct catalog languages, sorted, with "All" first."""
    return [ALL_LANGUAGES, *sorted({channel.language for channel in catalog})]


def compute_categories(catalog: Sequence[Channel], language: str) -> list[str]:
    """
    Distinct groups of the channels matching the language criterion, sorted.

    Category and search selections are not applied here.
    """
    return sorted({channel.group for channel in _by_language(catalog, language)})


def compute_visible(catalog: Sequence[Channel], state: FilterState) -> list[Channel]:
    """
    Apply the filter stages in order, preserving catalog order

    1. favorites view (language ignored) or language
    2. category membership
    3. case-insensitive search over name and group
    """
    if state.show_favorites:
        favorites = set(state.favorites)
        channels = [channel for channel in catalog if channel.id in favorites]
    else:
        channels = _by_language(catalog, state.selected_language)

    if state.selected_categories:
        categories = set(state.selected_categories)
        channels = [channel for channel in channels if channel.group in categories]

    if state.search_query:
        query = state.search_query.lower()
        channels = [
            channel for channel in channels
            if query in channel.name.lower() or query in channel.group.lower()
        ]

    return channels


def compute_view(catalog: Sequence[Channel], state: FilterState) -> FilterView:
    return FilterView(
        languages=compute_languages(catalog),
        categories=compute_categories(catalog, state.selected_language),
        visible=compute_visible(catalog, state),
    )


def _by_language(catalog: Sequence[Channel], language: str) -> list[Channel]:
    if language == ALL_LANGUAGES:
        return list(catalog)
    return [channel for channel in catalog if channel.language == language]
