"""Upload pipeline: validate, enrich from TMDB, persist, notify."""
from __future__ import annotations

import logging
from typing import Any, Callable

from ..errors import StorageError, ValidationError
from ..schemas import CatalogKind, UploadRequest, UploadResult
from ..settings import CatalogSettings
from ..stores.catalog_store import CatalogStore
from ..stores.settings_store import SettingsStore
from .metadata import MetadataEnricher, normalize_api_key
from .notifications import UploadNotifier

logger = logging.getLogger(__name__)

EnricherFactory = Callable[[str], MetadataEnricher]


def build_minimal_record(title: str, kind: CatalogKind, request: UploadRequest) -> dict[str, Any]:
    """Return the record an upload stores when no metadata is available."""

    record: dict[str, Any] = {
        "title": title,
        "original_title": title,
        "poster_url": request.poster_url or None,
        "backdrop_url": request.backdrop_url or None,
        "genres": [],
        "download_links": list(request.download_links),
        "status": "published",
    }
    if kind is CatalogKind.MOVIE:
        record["trailer_url"] = request.trailer_url or None
    return record


class IngestionPipeline:
    """Turn an admin's minimal submission into a stored catalog record."""

    def __init__(
        self,
        settings: CatalogSettings,
        store: CatalogStore,
        settings_store: SettingsStore,
        notifier: UploadNotifier,
        enricher_factory: EnricherFactory,
    ) -> None:
        self._settings = settings
        self._store = store
        self._settings_store = settings_store
        self._notifier = notifier
        self._enricher_factory = enricher_factory

    def provider_api_key(self) -> str | None:
        """Return the TMDB key from the settings table, else the environment default."""

        try:
            stored = normalize_api_key(self._settings_store.get_value("tmdb_api_key"))
        except StorageError:
            stored = None
        return stored or normalize_api_key(self._settings.default_tmdb_api_key)

    def upload(self, request: UploadRequest) -> UploadResult:
        """Persist an upload and queue its notification.

        Enrichment overrides the submitted fields, except poster and backdrop
        URLs, which keep the submitted values when TMDB has no image.
        """

        title = (request.title or "").strip()
        if not title:
            raise ValidationError("Title is required")

        kind = CatalogKind.from_label(request.type)
        record = build_minimal_record(title, kind, request)

        api_key = self.provider_api_key()
        if api_key:
            metadata = self._enricher_factory(api_key).enrich(title, kind)
            record.update(metadata.model_dump(exclude_none=True))

        stored = self._store.create(kind, record)
        logger.info("Stored %s %r as id %s", kind.value, stored.title, stored.id)

        self._notifier.dispatch(stored.title, kind)

        label = "Movie" if kind is CatalogKind.MOVIE else "Web series"
        return UploadResult(
            id=stored.id,
            message=f"{label} uploaded successfully",
            data=stored,
        )
