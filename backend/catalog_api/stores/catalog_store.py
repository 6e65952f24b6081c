"""Catalog store: filtered listings, lookups and writes for movies and series."""
from __future__ import annotations

import logging
import math

from threading import Lock
from typing import Any, Sequence, Union

from sqlalchemy import func, or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..codecs import dump_links, join_genres, load_links, split_genres
from ..errors import StorageError
from ..models import EpisodeRecord, MovieRecord, SeriesRecord, utc_now
from ..schemas import (
    CatalogKind,
    CatalogQuery,
    EpisodeCreate,
    EpisodeModel,
    MovieListModel,
    MovieModel,
    PaginationModel,
    SeriesDetailModel,
    SeriesListModel,
    SeriesModel,
)

logger = logging.getLogger(__name__)

CatalogRecord = Union[MovieRecord, SeriesRecord]

RECORD_TYPES: dict[CatalogKind, type[MovieRecord] | type[SeriesRecord]] = {
    CatalogKind.MOVIE: MovieRecord,
    CatalogKind.SERIES: SeriesRecord,
}

_LABELS = {CatalogKind.MOVIE: "movies", CatalogKind.SERIES: "web series"}

_COMMON_SORT_FIELDS = (
    "upload_date",
    "updated_date",
    "title",
    "year",
    "rating",
    "vote_count",
    "popularity",
)
SORT_FIELDS: dict[CatalogKind, frozenset[str]] = {
    CatalogKind.MOVIE: frozenset(_COMMON_SORT_FIELDS + ("release_date", "runtime")),
    CatalogKind.SERIES: frozenset(_COMMON_SORT_FIELDS + ("first_air_date",)),
}
DEFAULT_SORT = "upload_date"


def _like_pattern(term: str) -> str:
    """Build a case-folded ``%term%`` pattern with LIKE wildcards escaped."""

    escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class CatalogStore:
    """Read and write access to the movies, web_series and episodes tables."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._lock = Lock()

    # ------------------------------------------------------------------
    # Listings

    def list_movies(self, query: CatalogQuery) -> MovieListModel:
        """Return one page of movies matching the filters, newest first."""

        records, pagination = self._list(CatalogKind.MOVIE, query)
        return MovieListModel(
            movies=[movie_to_model(record) for record in records],
            pagination=pagination,
        )

    def list_series(self, query: CatalogQuery) -> SeriesListModel:
        """Return one page of web series matching the filters; ``year`` is ignored."""

        records, pagination = self._list(CatalogKind.SERIES, query)
        return SeriesListModel(
            series=[series_to_model(record) for record in records],
            pagination=pagination,
        )

    def _conditions(self, kind: CatalogKind, query: CatalogQuery) -> list[Any]:
        record_type = RECORD_TYPES[kind]
        conditions: list[Any] = []
        if kind is CatalogKind.MOVIE:
            conditions.append(MovieRecord.type == "movie")
        if query.search:
            pattern = _like_pattern(query.search)
            conditions.append(
                or_(
                    func.lower(record_type.title).like(pattern, escape="\\"),
                    func.lower(record_type.description).like(pattern, escape="\\"),
                )
            )
        if query.genre:
            # Substring match on the joined string, so "Com" matches "Comedy".
            conditions.append(
                func.lower(record_type.genres).like(_like_pattern(query.genre), escape="\\")
            )
        if query.year is not None and kind is CatalogKind.MOVIE:
            conditions.append(MovieRecord.year == query.year)
        return conditions

    def _list(
        self, kind: CatalogKind, query: CatalogQuery
    ) -> tuple[Sequence[CatalogRecord], PaginationModel]:
        record_type = RECORD_TYPES[kind]
        conditions = self._conditions(kind, query)

        count_statement = select(func.count()).select_from(record_type)
        items_statement = select(record_type)
        for condition in conditions:
            count_statement = count_statement.where(condition)
            items_statement = items_statement.where(condition)

        sort = query.sort if query.sort in SORT_FIELDS[kind] else DEFAULT_SORT
        items_statement = (
            items_statement.order_by(getattr(record_type, sort).desc(), record_type.id.desc())
            .offset((query.page - 1) * query.limit)
            .limit(query.limit)
        )

        try:
            with Session(self._engine) as session:
                records = session.exec(items_statement).all()
                total = session.exec(count_statement).one()
        except SQLAlchemyError as exc:
            logger.exception("Error fetching %s", _LABELS[kind])
            raise StorageError(f"Error fetching {_LABELS[kind]}") from exc

        pagination = PaginationModel(
            page=query.page,
            limit=query.limit,
            total=total,
            pages=math.ceil(total / query.limit),
        )
        return records, pagination

    # ------------------------------------------------------------------
    # Single records

    def get_movie(self, movie_id: int) -> MovieModel | None:
        """Return a movie by id, or None when absent."""

        try:
            with Session(self._engine) as session:
                record = session.get(MovieRecord, movie_id)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching movie %s", movie_id)
            raise StorageError("Error fetching movie") from exc
        if record is None or record.type != "movie":
            return None
        return movie_to_model(record)

    def get_series(self, series_id: int) -> SeriesDetailModel | None:
        """Return a web series with its episodes ordered by season and episode."""

        try:
            with Session(self._engine) as session:
                record = session.get(SeriesRecord, series_id)
                if record is None:
                    return None
                episodes = session.exec(self._episodes_statement(series_id)).all()
        except SQLAlchemyError as exc:
            logger.exception("Error fetching web series %s", series_id)
            raise StorageError("Error fetching web series") from exc

        base = series_to_model(record)
        return SeriesDetailModel(
            **base.model_dump(),
            episodes=[episode_to_model(episode) for episode in episodes],
        )

    def list_episodes(self, series_id: int, season: int | None = None) -> list[EpisodeModel]:
        """Return episodes for a series, optionally restricted to one season."""

        statement = self._episodes_statement(series_id)
        if season is not None:
            statement = statement.where(EpisodeRecord.season_number == season)
        try:
            with Session(self._engine) as session:
                records = session.exec(statement).all()
        except SQLAlchemyError as exc:
            logger.exception("Error fetching episodes for series %s", series_id)
            raise StorageError("Error fetching episodes") from exc
        return [episode_to_model(record) for record in records]

    @staticmethod
    def _episodes_statement(series_id: int):
        return (
            select(EpisodeRecord)
            .where(EpisodeRecord.series_id == series_id)
            .order_by(
                EpisodeRecord.season_number.asc(),
                EpisodeRecord.episode_number.asc(),
                EpisodeRecord.id.asc(),
            )
        )

    # ------------------------------------------------------------------
    # Facets

    def list_genres(self, kind: CatalogKind) -> list[str]:
        """Return the distinct, alphabetically sorted genre names for a kind."""

        record_type = RECORD_TYPES[kind]
        statement = (
            select(record_type.genres)
            .where(record_type.genres.is_not(None))
            .where(record_type.genres != "")
            .distinct()
        )
        try:
            with Session(self._engine) as session:
                rows = session.exec(statement).all()
        except SQLAlchemyError as exc:
            logger.exception("Error fetching genres for %s", _LABELS[kind])
            raise StorageError("Error fetching genres") from exc

        genres: set[str] = set()
        for value in rows:
            genres.update(split_genres(value))
        return sorted(genres)

    def list_years(self, kind: CatalogKind) -> list[int]:
        """Return the distinct release years for a kind, newest first."""

        record_type = RECORD_TYPES[kind]
        statement = (
            select(record_type.year)
            .where(record_type.year.is_not(None))
            .distinct()
            .order_by(record_type.year.desc())
        )
        try:
            with Session(self._engine) as session:
                return list(session.exec(statement).all())
        except SQLAlchemyError as exc:
            logger.exception("Error fetching years for %s", _LABELS[kind])
            raise StorageError("Error fetching years") from exc

    def count(self, kind: CatalogKind) -> int:
        """Return the number of stored records of a kind."""

        record_type = RECORD_TYPES[kind]
        try:
            with Session(self._engine) as session:
                return session.exec(select(func.count()).select_from(record_type)).one()
        except SQLAlchemyError as exc:
            logger.exception("Error counting %s", _LABELS[kind])
            raise StorageError(f"Error counting {_LABELS[kind]}") from exc

    # ------------------------------------------------------------------
    # Writes

    def create(self, kind: CatalogKind, data: dict[str, Any]) -> MovieModel | SeriesModel:
        """Insert one record; keys the target table lacks are ignored."""

        record_type = RECORD_TYPES[kind]
        columns = set(record_type.model_fields) - {"id", "upload_date", "updated_date"}
        values = {key: value for key, value in data.items() if key in columns}
        values["genres"] = join_genres(data.get("genres"))
        values["download_links"] = dump_links(data.get("download_links"))
        if kind is CatalogKind.MOVIE:
            values["type"] = "movie"

        record = record_type(**values)
        try:
            with self._lock, Session(self._engine) as session:
                session.add(record)
                session.commit()
                session.refresh(record)
        except SQLAlchemyError as exc:
            logger.exception("Database insertion error for %s", _LABELS[kind])
            raise StorageError("Database insertion failed") from exc

        if isinstance(record, MovieRecord):
            return movie_to_model(record)
        return series_to_model(record)

    def add_episode(self, series_id: int, payload: EpisodeCreate) -> EpisodeModel | None:
        """Append an episode to an existing series; None when the series is absent."""

        try:
            with self._lock, Session(self._engine) as session:
                series = session.get(SeriesRecord, series_id)
                if series is None:
                    return None
                record = EpisodeRecord(
                    series_id=series_id,
                    **payload.model_dump(exclude={"download_links"}),
                    download_links=dump_links(payload.download_links),
                )
                series.updated_date = utc_now()
                session.add(record)
                session.add(series)
                session.commit()
                session.refresh(record)
                return episode_to_model(record)
        except SQLAlchemyError as exc:
            logger.exception("Error adding episode to series %s", series_id)
            raise StorageError("Episode insertion failed") from exc

    def delete(self, kind: CatalogKind, item_id: int) -> bool:
        """Hard-delete a record; deleting a series also removes its episodes."""

        record_type = RECORD_TYPES[kind]
        try:
            with self._lock, Session(self._engine) as session:
                record = session.get(record_type, item_id)
                if record is None:
                    return False
                if kind is CatalogKind.SERIES:
                    episodes = session.exec(
                        select(EpisodeRecord).where(EpisodeRecord.series_id == item_id)
                    ).all()
                    for episode in episodes:
                        session.delete(episode)
                session.delete(record)
                session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Delete error for %s %s", _LABELS[kind], item_id)
            raise StorageError("Delete failed") from exc
        return True


def _shared_fields(record: CatalogRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "title": record.title,
        "original_title": record.original_title,
        "poster_url": record.poster_url,
        "backdrop_url": record.backdrop_url,
        "description": record.description,
        "overview": record.overview,
        "year": record.year,
        "genres": split_genres(record.genres),
        "rating": record.rating,
        "vote_count": record.vote_count,
        "popularity": record.popularity,
        "tagline": record.tagline,
        "imdb_id": record.imdb_id,
        "tmdb_id": record.tmdb_id,
        "status": record.status,
        "download_links": load_links(record.download_links),
        "upload_date": record.upload_date,
        "updated_date": record.updated_date,
    }


def movie_to_model(record: MovieRecord) -> MovieModel:
    """Convert a movie row into its response model."""

    return MovieModel(
        **_shared_fields(record),
        release_date=record.release_date,
        runtime=record.runtime,
        trailer_url=record.trailer_url,
    )


def series_to_model(record: SeriesRecord) -> SeriesModel:
    """Convert a web series row into its response model."""

    return SeriesModel(
        **_shared_fields(record),
        first_air_date=record.first_air_date,
        last_air_date=record.last_air_date,
        number_of_seasons=record.number_of_seasons,
        number_of_episodes=record.number_of_episodes,
    )


def episode_to_model(record: EpisodeRecord) -> EpisodeModel:
    """Convert an episode row into its response model."""

    return EpisodeModel(
        id=record.id,
        series_id=record.series_id,
        season_number=record.season_number,
        episode_number=record.episode_number,
        title=record.title,
        description=record.description,
        air_date=record.air_date,
        runtime=record.runtime,
        poster_url=record.poster_url,
        download_links=load_links(record.download_links),
    )
