"""Upload notification queue backed by Redis and RQ."""
from __future__ import annotations

import logging

from redis import Redis
from redis.exceptions import RedisError
from rq import Queue
from rq.job import Job

try:  # pragma: no cover - optional dependency for test environments
    import fakeredis
except ModuleNotFoundError:  # pragma: no cover - runtime path without fakeredis
    fakeredis = None  # type: ignore[assignment]

from ..schemas import CatalogKind
from ..settings import CatalogSettings
from .tasks import report_notification_failure, send_upload_notification

logger = logging.getLogger(__name__)

FAKE_REDIS_SCHEME = "fakeredis://"


class NotificationQueueError(RuntimeError):
    """Raised when a notification job cannot be handed to Redis."""


def connect_redis(url: str) -> Redis:
    """Open a Redis client for ``url``; ``fakeredis://`` gives an in-memory server."""

    if not url.startswith(FAKE_REDIS_SCHEME):
        return Redis.from_url(url, socket_connect_timeout=2, socket_timeout=2)
    if fakeredis is None:  # pragma: no cover - safety branch
        raise NotificationQueueError("fakeredis must be installed to use fakeredis:// URLs")
    return fakeredis.FakeRedis()  # type: ignore[return-value]


class NotificationQueue:
    """Owns the Redis connection and enqueues upload e-mails for the worker."""

    def __init__(self, settings: CatalogSettings) -> None:
        self._settings = settings
        self._connection = connect_redis(settings.redis_url)
        self._queue = Queue(settings.redis_queue_name, connection=self._connection)

    @property
    def queue(self) -> Queue:
        """RQ queue drained by the notification worker."""

        return self._queue

    @property
    def connection(self) -> Redis:
        return self._connection

    def ping(self) -> bool:
        """Return whether Redis answers; used by the health endpoint."""

        try:
            return bool(self._connection.ping())
        except RedisError as exc:
            logger.debug("Notification queue ping failed: %s", exc)
            return False

    def enqueue_upload_notification(
        self, *, title: str, kind: CatalogKind, site_name: str
    ) -> Job:
        """Queue an upload e-mail; failures inside the worker go to the failure callback."""

        job_kwargs = {
            "title": title,
            "kind": kind.value,
            "site_name": site_name,
            "settings": self._settings.model_dump(),
        }
        try:
            job = self._queue.enqueue(
                send_upload_notification,
                kwargs=job_kwargs,
                on_failure=report_notification_failure,
            )
        except RedisError as exc:
            raise NotificationQueueError(f"Unable to queue notification for {title}") from exc
        logger.debug("Queued upload notification %s for %s", job.id, title)
        return job
