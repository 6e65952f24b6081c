"""Database models for the catalog store."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Timezone-aware current time used for upload and update stamps."""

    return datetime.now(timezone.utc)


class MovieRecord(SQLModel, table=True):
    """Persisted movie row; genres and download links are stored as text."""

    __tablename__ = "movies"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    original_title: str | None = Field(default=None)
    poster_url: str | None = Field(default=None)
    backdrop_url: str | None = Field(default=None)
    description: str | None = Field(default=None)
    overview: str | None = Field(default=None)
    release_date: str | None = Field(default=None)
    year: int | None = Field(default=None, index=True)
    runtime: int | None = Field(default=None)
    genres: str | None = Field(default=None)
    rating: float | None = Field(default=None)
    vote_count: int | None = Field(default=None)
    popularity: float | None = Field(default=None)
    tagline: str | None = Field(default=None)
    imdb_id: str | None = Field(default=None)
    tmdb_id: int | None = Field(default=None, index=True)
    download_links: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    trailer_url: str | None = Field(default=None)
    type: str = Field(default="movie", index=True)
    status: str = Field(default="published")
    upload_date: datetime = Field(default_factory=utc_now, nullable=False, index=True)
    updated_date: datetime = Field(default_factory=utc_now, nullable=False)


class SeriesRecord(SQLModel, table=True):
    """Persisted web series row."""

    __tablename__ = "web_series"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    original_title: str | None = Field(default=None)
    poster_url: str | None = Field(default=None)
    backdrop_url: str | None = Field(default=None)
    description: str | None = Field(default=None)
    overview: str | None = Field(default=None)
    first_air_date: str | None = Field(default=None)
    year: int | None = Field(default=None, index=True)
    last_air_date: str | None = Field(default=None)
    number_of_seasons: int | None = Field(default=None)
    number_of_episodes: int | None = Field(default=None)
    genres: str | None = Field(default=None)
    rating: float | None = Field(default=None)
    vote_count: int | None = Field(default=None)
    popularity: float | None = Field(default=None)
    tagline: str | None = Field(default=None)
    imdb_id: str | None = Field(default=None)
    tmdb_id: int | None = Field(default=None, index=True)
    download_links: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    status: str = Field(default="published")
    upload_date: datetime = Field(default_factory=utc_now, nullable=False, index=True)
    updated_date: datetime = Field(default_factory=utc_now, nullable=False)


class EpisodeRecord(SQLModel, table=True):
    """Single episode owned by a web series."""

    __tablename__ = "episodes"

    id: int | None = Field(default=None, primary_key=True)
    series_id: int = Field(foreign_key="web_series.id", index=True)
    season_number: int = Field(default=1)
    episode_number: int = Field(default=1)
    title: str | None = Field(default=None)
    description: str | None = Field(default=None)
    air_date: str | None = Field(default=None)
    runtime: int | None = Field(default=None)
    poster_url: str | None = Field(default=None)
    download_links: str | None = Field(default=None, sa_column=Column(Text, nullable=True))


class SettingRecord(SQLModel, table=True):
    """Key/value site setting with a human readable description."""

    __tablename__ = "settings"

    key: str = Field(primary_key=True)
    value: str | None = Field(default=None)
    description: str | None = Field(default=None)
