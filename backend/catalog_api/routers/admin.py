"""Admin-only content management endpoints."""
from fastapi import APIRouter, Depends

from ..auth import require_admin
from ..dependencies import get_catalog_store, get_pipeline
from ..errors import NotFoundError
from ..schemas import CatalogKind, MessageModel, UploadRequest, UploadResult
from ..services.ingestion import IngestionPipeline
from ..stores.catalog_store import CatalogStore

router = APIRouter(prefix="/api", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/upload", response_model=UploadResult)
def upload(
    request: UploadRequest,
    pipeline: IngestionPipeline = Depends(get_pipeline),
) -> UploadResult:
    """Store a movie or web series, enriched from TMDB when a key is configured."""

    return pipeline.upload(request)


@router.delete("/{item_type}/{item_id}", response_model=MessageModel)
def delete_item(
    item_type: str,
    item_id: int,
    store: CatalogStore = Depends(get_catalog_store),
) -> MessageModel:
    """Hard-delete a movie (``movies``) or a web series (anything else)."""

    if not store.delete(CatalogKind.from_label(item_type), item_id):
        raise NotFoundError("Item not found")
    return MessageModel(message="Item deleted successfully")
