"""Pydantic models exposed by the catalog API."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CatalogKind(str, Enum):
    """Entity kind; each kind has its own backing table."""

    MOVIE = "movie"
    SERIES = "series"

    @classmethod
    def from_label(cls, label: str | None) -> "CatalogKind":
        """Resolve a loose label: ``movie``/``movies`` or empty is a movie, anything else a series."""

        if not label or label.strip().lower() in {"movie", "movies"}:
            return cls.MOVIE
        return cls.SERIES


class QueueHealthStatus(BaseModel):
    """Represents Redis queue connectivity status."""

    status: Literal["ok", "error"] = Field(default="ok")
    detail: str | None = Field(
        default=None, description="Optional diagnostic message when the queue is unavailable."
    )


class HealthStatus(BaseModel):
    """Service health payload."""

    status: Literal["ok"] = Field(default="ok")
    version: str = Field(default="0.1.0", description="Semantic version of the API service.")
    queue: QueueHealthStatus = Field(
        default_factory=QueueHealthStatus,
        description="Health information for the notification queue.",
    )


class DownloadLinkModel(BaseModel):
    """Download link descriptor; unknown keys are kept so the list round-trips."""

    model_config = ConfigDict(extra="allow")

    url: str = Field(..., description="Direct or hosted download URL.")
    quality: str | None = Field(default=None, description="Human-readable quality, e.g. 1080p.")


class _CatalogItemModel(BaseModel):
    """Fields shared by movies and web series."""

    id: int
    title: str
    original_title: str | None = None
    poster_url: str | None = None
    backdrop_url: str | None = None
    description: str | None = None
    overview: str | None = None
    year: int | None = None
    genres: list[str] = Field(default_factory=list)
    rating: float | None = Field(default=None, ge=0, le=10)
    vote_count: int | None = None
    popularity: float | None = None
    tagline: str | None = None
    imdb_id: str | None = None
    tmdb_id: int | None = None
    status: str = "published"
    download_links: list[DownloadLinkModel] = Field(default_factory=list)
    upload_date: datetime
    updated_date: datetime


class MovieModel(_CatalogItemModel):
    """Movie record as returned by the API."""

    release_date: str | None = None
    runtime: int | None = None
    trailer_url: str | None = None
    type: Literal["movie"] = "movie"


class EpisodeModel(BaseModel):
    """Episode belonging to a web series."""

    id: int
    series_id: int
    season_number: int
    episode_number: int
    title: str | None = None
    description: str | None = None
    air_date: str | None = None
    runtime: int | None = None
    poster_url: str | None = None
    download_links: list[DownloadLinkModel] = Field(default_factory=list)


class EpisodeCreate(BaseModel):
    """Payload accepted when adding an episode to a series."""

    season_number: int = Field(default=1, ge=0)
    episode_number: int = Field(default=1, ge=0)
    title: str | None = None
    description: str | None = None
    air_date: str | None = None
    runtime: int | None = Field(default=None, ge=0)
    poster_url: str | None = None
    download_links: list[DownloadLinkModel] = Field(default_factory=list)


class SeriesModel(_CatalogItemModel):
    """Web series record as returned by listings."""

    first_air_date: str | None = None
    last_air_date: str | None = None
    number_of_seasons: int | None = None
    number_of_episodes: int | None = None


class SeriesDetailModel(SeriesModel):
    """Web series with its episodes ordered by season then episode."""

    episodes: list[EpisodeModel] = Field(default_factory=list)


class CatalogQuery(BaseModel):
    """Filters shared by the movie and series listings."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)
    search: str | None = None
    genre: str | None = None
    year: int | None = None
    sort: str = "upload_date"


class PaginationModel(BaseModel):
    """Pagination block attached to listing responses."""

    page: int
    limit: int
    total: int
    pages: int


class MovieListModel(BaseModel):
    """Paginated movie listing."""

    movies: list[MovieModel]
    pagination: PaginationModel


class SeriesListModel(BaseModel):
    """Paginated web series listing."""

    series: list[SeriesModel]
    pagination: PaginationModel


class SettingEntryModel(BaseModel):
    """Value and description of a single site setting."""

    value: str | None = None
    description: str | None = None


class SettingUpdate(BaseModel):
    """Payload used to update one setting."""

    key: str = Field(..., min_length=1)
    value: str | bool | int | float | None = None


class LoginRequest(BaseModel):
    """Admin credentials."""

    email: str
    password: str


class AuthStatusModel(BaseModel):
    """Whether the current session is privileged."""

    model_config = ConfigDict(populate_by_name=True)

    logged_in: bool = Field(alias="loggedIn")


class MessageModel(BaseModel):
    """Generic success acknowledgement."""

    success: bool = True
    message: str


class UploadRequest(BaseModel):
    """Minimal record submitted by an admin; the rest comes from TMDB."""

    title: str | None = None
    type: str = Field(default="movie", description="movie, or anything else for a web series.")
    download_links: list[DownloadLinkModel] = Field(default_factory=list)
    trailer_url: str | None = None
    poster_url: str | None = None
    backdrop_url: str | None = None


class EnrichedMetadata(BaseModel):
    """Partial record resolved from TMDB; unset fields are left alone on merge."""

    original_title: str | None = None
    poster_url: str | None = None
    backdrop_url: str | None = None
    description: str | None = None
    overview: str | None = None
    release_date: str | None = None
    first_air_date: str | None = None
    last_air_date: str | None = None
    year: int | None = None
    runtime: int | None = None
    number_of_seasons: int | None = None
    number_of_episodes: int | None = None
    genres: list[str] | None = None
    rating: float | None = None
    vote_count: int | None = None
    popularity: float | None = None
    tagline: str | None = None
    imdb_id: str | None = None
    tmdb_id: int | None = None

    def is_empty(self) -> bool:
        """Return True when no field was resolved."""

        return not self.model_dump(exclude_none=True)


class UploadResult(BaseModel):
    """Response returned after a successful upload."""

    success: bool = True
    id: int
    message: str
    data: MovieModel | SeriesModel
