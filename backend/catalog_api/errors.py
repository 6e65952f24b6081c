"""Domain exceptions raised by the catalog API."""
from __future__ import annotations


class CatalogError(RuntimeError):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    """Raised when a required input is missing or malformed."""

    status_code = 400


class AuthError(CatalogError):
    """Raised when the caller lacks a valid admin session or credentials."""

    status_code = 401


class NotFoundError(CatalogError):
    """Raised when a record or setting key does not exist."""

    status_code = 404


class StorageError(CatalogError):
    """Raised when a query or write against the catalog database fails."""

    status_code = 500
