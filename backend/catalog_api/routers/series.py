"""Web series listing, detail and episode endpoints."""
from fastapi import APIRouter, Depends, Query

from ..auth import require_admin
from ..dependencies import get_catalog_store
from ..errors import NotFoundError
from ..schemas import (
    CatalogQuery,
    EpisodeCreate,
    EpisodeModel,
    SeriesDetailModel,
    SeriesListModel,
)
from ..stores.catalog_store import CatalogStore

router = APIRouter(prefix="/api/web-series", tags=["web-series"])


@router.get("", response_model=SeriesListModel)
def list_series(
    page: int = Query(default=1, ge=1, description="Page number starting at 1."),
    limit: int = Query(default=20, ge=1, description="Number of series per page."),
    search: str | None = Query(default=None, description="Title or description substring."),
    genre: str | None = Query(default=None, description="Genre substring."),
    sort: str = Query(default="upload_date", description="Column to sort by, descending."),
    store: CatalogStore = Depends(get_catalog_store),
) -> SeriesListModel:
    """Return one page of web series matching the provided filters."""

    return store.list_series(
        CatalogQuery(page=page, limit=limit, search=search, genre=genre, sort=sort)
    )


@router.get("/{series_id}", response_model=SeriesDetailModel)
def get_series(
    series_id: int, store: CatalogStore = Depends(get_catalog_store)
) -> SeriesDetailModel:
    """Return a web series with its ordered episode list."""

    series = store.get_series(series_id)
    if series is None:
        raise NotFoundError("Web series not found")
    return series


@router.get("/{series_id}/episodes", response_model=list[EpisodeModel])
def list_episodes(
    series_id: int,
    season: int | None = Query(default=None, ge=0, description="Restrict to one season."),
    store: CatalogStore = Depends(get_catalog_store),
) -> list[EpisodeModel]:
    """Return the episodes of a series ordered by season and episode number."""

    return store.list_episodes(series_id, season)


@router.post(
    "/{series_id}/episodes",
    response_model=EpisodeModel,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def add_episode(
    series_id: int,
    payload: EpisodeCreate,
    store: CatalogStore = Depends(get_catalog_store),
) -> EpisodeModel:
    """Append an episode to an existing series."""

    episode = store.add_episode(series_id, payload)
    if episode is None:
        raise NotFoundError("Web series not found")
    return episode
