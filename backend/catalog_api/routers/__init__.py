"""Router exports for the catalog API."""
from . import admin, catalog, health, movies, series, session, site_settings

__all__ = ["admin", "catalog", "health", "movies", "series", "session", "site_settings"]
