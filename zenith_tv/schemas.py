from pydantic import BaseModel, Field, field_validator

from zenith_tv.models import Channel as ChannelRecord
from zenith_tv.services.channel_browser import ChannelBrowser


class Channel(BaseModel):
    """Channel data model"""
    id: str = Field(..., description="Stable channel id (tvg-id or synthesized)")
    name: str = Field(..., description="Display name of the channel")
    logo: str = Field(..., description="URL to channel logo")
    group: str = Field(..., description="Category the channel belongs to")
    language: str = Field(..., description="Language tag of the source playlist")
    url: str = Field(..., description="Stream address")

    @classmethod
    def from_record(cls, channel: ChannelRecord) -> "Channel":
        return cls(
            id=channel.id,
            name=channel.name,
            logo=channel.logo,
            group=channel.group,
            language=channel.language,
            url=channel.url,
        )


class LanguageRequest(BaseModel):
    """Language filter change"""
    language: str = Field(..., min_length=1, description="'All' or an exact language tag")

    @field_validator('language')
    @classmethod
    def validate_language(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("language must not be blank")
        return v


class SearchRequest(BaseModel):
    """Search text change"""
    query: str = Field("", description="Case-insensitive substring matched against name and group")


class FilterStateResponse(BaseModel):
    """Current filter inputs"""
    selected_language: str
    selected_categories: list[str]
    search_query: str
    favorites: list[str]
    show_favorites: bool


class ChannelViewResponse(BaseModel):
    """Channels visible under the current filters plus the option lists"""
    loading: bool
    error: str | None = Field(None, description="Set when the last catalog load failed")
    total_channels: int
    visible_count: int
    languages: list[str]
    categories: list[str]
    filters: FilterStateResponse
    selected_channel: Channel | None
    channels: list[Channel]

    @classmethod
    def from_browser(cls, browser: ChannelBrowser) -> "ChannelViewResponse":
        view = browser.view()
        state = browser.state
        selected = browser.selected_channel
        return cls(
            loading=browser.loading,
            error=browser.error,
            total_channels=len(browser.catalog),
            visible_count=len(view.visible),
            languages=view.languages,
            categories=view.categories,
            filters=FilterStateResponse(
                selected_language=state.selected_language,
                selected_categories=list(state.selected_categories),
                search_query=state.search_query,
                favorites=list(state.favorites),
                show_favorites=state.show_favorites,
            ),
            selected_channel=Channel.from_record(selected) if selected else None,
            channels=[Channel.from_record(channel) for channel in view.visible],
        )


class SourceDetail(BaseModel):
    """Outcome of one playlist source"""
    source_index: int
    source_url: str
    language: str
    status: str
    channels_parsed: int
    started_at: str
    completed_at: str
    duration_seconds: float
    error: str | None = None


class RefreshResponse(BaseModel):
    """Ingestion run summary"""
    status: str
    timestamp: str
    channels_total: int
    duplicates_dropped: int
    sources_processed: int
    sources_succeeded: int
    sources_failed: int
    source_details: list[SourceDetail]
    started_at: str
