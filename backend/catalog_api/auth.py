"""Single-credential admin session gate."""
from __future__ import annotations

import secrets

from fastapi import Request

from .errors import AuthError
from .settings import CatalogSettings

SESSION_KEY = "logged_in"


def _matches(supplied: str, expected: str) -> bool:
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def login(request: Request, settings: CatalogSettings, email: str, password: str) -> None:
    """Mark the session privileged when the credentials match the configured pair."""

    email_ok = _matches(email, settings.admin_email)
    password_ok = _matches(password, settings.admin_password.get_secret_value())
    if not (email_ok and password_ok):
        raise AuthError("Invalid credentials")
    request.session[SESSION_KEY] = True


def logout(request: Request) -> None:
    """Forget everything stored in the session."""

    request.session.clear()


def is_logged_in(request: Request) -> bool:
    """Return whether the session carries the admin flag."""

    return bool(request.session.get(SESSION_KEY))


def require_admin(request: Request) -> None:
    """FastAPI dependency rejecting requests without an admin session."""

    if not is_logged_in(request):
        raise AuthError("Unauthorized")
