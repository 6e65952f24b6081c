"""FastAPI dependencies for the catalog API."""
from fastapi import Depends, Request

from .services.ingestion import IngestionPipeline
from .services.queue import NotificationQueue
from .settings import CatalogSettings
from .state import AppState
from .stores.catalog_store import CatalogStore
from .stores.settings_store import SettingsStore


def get_app_state(request: Request) -> AppState:
    """Resolve the shared application state from the FastAPI request."""
    return request.app.state.app_state


def get_settings(app_state: AppState = Depends(get_app_state)) -> CatalogSettings:
    """Return the runtime settings."""
    return app_state.settings


def get_catalog_store(app_state: AppState = Depends(get_app_state)) -> CatalogStore:
    """Return the catalog store dependency."""
    return app_state.catalog_store


def get_settings_store(app_state: AppState = Depends(get_app_state)) -> SettingsStore:
    """Return the site settings store dependency."""
    return app_state.settings_store


def get_pipeline(app_state: AppState = Depends(get_app_state)) -> IngestionPipeline:
    """Return the upload pipeline."""
    return app_state.pipeline


def get_notification_queue(app_state: AppState = Depends(get_app_state)) -> NotificationQueue:
    """Return the notification queue service."""
    return app_state.notification_queue
