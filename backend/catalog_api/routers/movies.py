"""Public movie listing and detail endpoints."""
from fastapi import APIRouter, Depends, Query

from ..dependencies import get_catalog_store
from ..errors import NotFoundError
from ..schemas import CatalogQuery, MovieListModel, MovieModel
from ..stores.catalog_store import CatalogStore

router = APIRouter(prefix="/api/movies", tags=["movies"])


@router.get("", response_model=MovieListModel)
def list_movies(
    page: int = Query(default=1, ge=1, description="Page number starting at 1."),
    limit: int = Query(default=20, ge=1, description="Number of movies per page."),
    search: str | None = Query(
        default=None, description="Case-insensitive substring matched against title or description."
    ),
    genre: str | None = Query(
        default=None, description="Substring matched against the movie's genre list."
    ),
    year: int | None = Query(default=None, description="Exact release year."),
    sort: str = Query(
        default="upload_date",
        description="Column to sort by, always descending. Unknown values fall back to upload_date.",
    ),
    store: CatalogStore = Depends(get_catalog_store),
) -> MovieListModel:
    """Return one page of movies matching the provided filters."""

    return store.list_movies(
        CatalogQuery(page=page, limit=limit, search=search, genre=genre, year=year, sort=sort)
    )


@router.get("/{movie_id}", response_model=MovieModel)
def get_movie(movie_id: int, store: CatalogStore = Depends(get_catalog_store)) -> MovieModel:
    """Return a single movie with its download links."""

    movie = store.get_movie(movie_id)
    if movie is None:
        raise NotFoundError("Movie not found")
    return movie
