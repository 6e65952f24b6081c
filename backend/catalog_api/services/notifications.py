"""Fire-and-forget upload notifications."""
from __future__ import annotations

import logging

from ..errors import StorageError
from ..schemas import CatalogKind
from ..settings import CatalogSettings
from ..stores.settings_store import SettingsStore
from .queue import NotificationQueue, NotificationQueueError

logger = logging.getLogger(__name__)


class UploadNotifier:
    """Decides whether an upload e-mail is wanted and hands it to the queue.

    ``dispatch`` never raises: a disabled toggle, missing SMTP credentials or
    an unreachable queue are logged and reported through the return value.
    """

    def __init__(
        self,
        settings: CatalogSettings,
        settings_store: SettingsStore,
        queue: NotificationQueue,
    ) -> None:
        self._settings = settings
        self._settings_store = settings_store
        self._queue = queue

    def dispatch(self, title: str, kind: CatalogKind) -> bool:
        """Queue a notification for a stored upload; return True when enqueued."""

        if not self._settings.enable_email_notifications:
            return False
        if self._settings.smtp_password is None or not self._settings.smtp_username:
            logger.info("Email not configured, skipping notification")
            return False

        try:
            toggle = self._settings_store.get_value("email_notifications")
            site_name = self._settings_store.get_value("site_name") or self._settings.site_name
        except StorageError as exc:
            logger.warning("Skipping notification for %s: %s", title, exc)
            return False
        if (toggle or "").strip().lower() != "true":
            logger.info("Email notifications disabled, skipping %s", title)
            return False

        try:
            self._queue.enqueue_upload_notification(title=title, kind=kind, site_name=site_name)
        except NotificationQueueError as exc:
            logger.warning("Email notification error for %s: %s", title, exc)
            return False
        return True
