"""Run the RQ worker that delivers ShadowPlex upload e-mails."""
from __future__ import annotations

import logging
import os

from rq import SimpleWorker, Worker

from backend.catalog_api.services.queue import NotificationQueue
from backend.catalog_api.settings import CatalogSettings

logger = logging.getLogger(__name__)


def main() -> None:
    """Block on the notification queue and process jobs until interrupted."""

    settings = CatalogSettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    notifications = NotificationQueue(settings)
    # no fork() on Windows
    worker_cls = SimpleWorker if os.name == "nt" else Worker
    worker = worker_cls(
        [notifications.queue],
        connection=notifications.connection,
        name=settings.queue_worker_name,
    )
    logger.info(
        "Worker %s listening on %s",
        settings.queue_worker_name,
        settings.redis_queue_name,
    )
    worker.work(with_scheduler=False)


if __name__ == "__main__":  # pragma: no cover - manual entrypoint
    main()
