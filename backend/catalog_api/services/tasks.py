"""RQ task entrypoints executed by the notification worker."""
from __future__ import annotations

import logging
import smtplib
from datetime import datetime
from email.message import EmailMessage
from typing import Any

from ..settings import CatalogSettings

logger = logging.getLogger(__name__)


def _kind_label(kind: str) -> str:
    return "Movie" if kind == "movie" else "Web Series"


def build_upload_message(
    settings: CatalogSettings,
    *,
    title: str,
    kind: str,
    site_name: str,
    uploaded_at: datetime,
) -> EmailMessage:
    """Compose the HTML e-mail announcing a new upload."""

    label = _kind_label(kind)
    message = EmailMessage()
    message["Subject"] = f"New {label} Uploaded - {site_name}"
    message["From"] = settings.smtp_username or settings.admin_email
    message["To"] = settings.admin_email
    message.set_content(f"{title} ({label}) was uploaded at {uploaded_at:%Y-%m-%d %H:%M:%S}.")
    message.add_alternative(
        f"""\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: {settings.theme_primary};">{site_name} - New Upload</h2>
  <p><strong>Title:</strong> {title}</p>
  <p><strong>Type:</strong> {label}</p>
  <p><strong>Upload Time:</strong> {uploaded_at:%Y-%m-%d %H:%M:%S}</p>
  <p>Visit your <a href="{settings.public_base_url.rstrip('/')}/admin"
     style="color: {settings.theme_primary};">admin panel</a> to manage content.</p>
</div>
""",
        subtype="html",
    )
    return message


def send_upload_notification(
    *,
    title: str,
    kind: str,
    site_name: str,
    settings: dict[str, Any],
) -> None:
    """Background worker entrypoint delivering the upload e-mail over SMTP."""

    resolved = CatalogSettings.model_validate(settings)
    if resolved.smtp_password is None or not resolved.smtp_username:
        logger.info("Email not configured, skipping notification for %s", title)
        return

    message = build_upload_message(
        resolved, title=title, kind=kind, site_name=site_name, uploaded_at=datetime.now()
    )
    with smtplib.SMTP(resolved.smtp_host, resolved.smtp_port, timeout=30) as smtp:
        if resolved.smtp_use_tls:
            smtp.starttls()
        smtp.login(resolved.smtp_username, resolved.smtp_password.get_secret_value())
        smtp.send_message(message)
    logger.info("Notification email sent for %s", title)


def report_notification_failure(job, connection, exc_type, exc_value, traceback) -> None:
    """RQ failure callback: record the error, nothing else depends on delivery."""

    logger.error(
        "Email notification error for job %s: %s",
        getattr(job, "id", "?"),
        exc_value,
    )
