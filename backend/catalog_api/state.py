"""Shared state container for the catalog API."""
from __future__ import annotations

from dataclasses import dataclass

import httpx
from sqlalchemy.engine import Engine

from .db import create_engine_from_settings, init_database
from .services.ingestion import IngestionPipeline
from .services.metadata import MetadataEnricher
from .services.notifications import UploadNotifier
from .services.queue import NotificationQueue
from .settings import CatalogSettings
from .stores.catalog_store import CatalogStore
from .stores.settings_store import SettingsStore


@dataclass(slots=True)
class AppState:
    """Encapsulates the stores and services shared across routers."""

    settings: CatalogSettings
    engine: Engine
    catalog_store: CatalogStore
    settings_store: SettingsStore
    notification_queue: NotificationQueue
    notifier: UploadNotifier
    pipeline: IngestionPipeline
    provider_transport: httpx.BaseTransport | None

    def __init__(
        self,
        settings: CatalogSettings,
        *,
        provider_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.provider_transport = provider_transport
        self.engine = create_engine_from_settings(settings)
        init_database(self.engine, settings)
        self.catalog_store = CatalogStore(self.engine)
        self.settings_store = SettingsStore(self.engine)
        self.notification_queue = NotificationQueue(settings)
        self.notifier = UploadNotifier(settings, self.settings_store, self.notification_queue)
        self.pipeline = IngestionPipeline(
            settings,
            self.catalog_store,
            self.settings_store,
            self.notifier,
            self.build_enricher,
        )

    def build_enricher(self, api_key: str) -> MetadataEnricher:
        """Create a TMDB enricher for the given key."""

        return MetadataEnricher.from_settings(
            self.settings, api_key, transport=self.provider_transport
        )

