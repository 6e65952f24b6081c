"""Facet endpoints used to build the browse filters."""
from fastapi import APIRouter, Depends, Query

from ..dependencies import get_catalog_store
from ..schemas import CatalogKind
from ..stores.catalog_store import CatalogStore

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/genres", response_model=list[str])
def list_genres(
    kind: str = Query(default="movie", alias="type", description="movie, or anything else for series."),
    store: CatalogStore = Depends(get_catalog_store),
) -> list[str]:
    """Return the distinct genres of a kind, sorted alphabetically."""

    return store.list_genres(CatalogKind.from_label(kind))


@router.get("/years", response_model=list[int])
def list_years(
    kind: str = Query(default="movie", alias="type", description="movie, or anything else for series."),
    store: CatalogStore = Depends(get_catalog_store),
) -> list[int]:
    """Return the distinct years of a kind, newest first."""

    return store.list_years(CatalogKind.from_label(kind))
