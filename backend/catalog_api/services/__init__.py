"""Service layer helpers for external integrations."""

from .ingestion import IngestionPipeline
from .metadata import MetadataEnricher
from .notifications import UploadNotifier
from .queue import NotificationQueue, NotificationQueueError

__all__ = [
    "IngestionPipeline",
    "MetadataEnricher",
    "NotificationQueue",
    "NotificationQueueError",
    "UploadNotifier",
]
