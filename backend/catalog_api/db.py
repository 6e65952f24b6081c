"""Database helpers for the catalog API."""
from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from .models import SettingRecord
from .settings import CatalogSettings

# key -> description for every setting the site knows about
SETTING_DESCRIPTIONS: dict[str, str] = {
    "site_name": "Website name",
    "site_tagline": "Website tagline",
    "tmdb_api_key": "TMDB API key",
    "email_notifications": "Enable email notifications",
    "theme_primary": "Primary theme color",
    "theme_secondary": "Secondary theme color",
}


def default_settings(settings: CatalogSettings) -> dict[str, str]:
    """Return the seed value for each known setting key."""

    return {
        "site_name": settings.site_name,
        "site_tagline": settings.site_tagline,
        "tmdb_api_key": "",
        "email_notifications": "true",
        "theme_primary": settings.theme_primary,
        "theme_secondary": settings.theme_secondary,
    }


def _ensure_sqlite_path(database_url: str) -> None:
    """Create parent directories when using a SQLite URL."""

    if database_url.startswith("sqlite:///"):
        path_part = database_url.removeprefix("sqlite:///").split("?")[0]
        if path_part and path_part != ":memory:":
            db_path = Path(path_part)
            db_path.parent.mkdir(parents=True, exist_ok=True)


def create_engine_from_settings(settings: CatalogSettings) -> Engine:
    """Create a SQLModel engine using catalog settings."""

    _ensure_sqlite_path(settings.database_url)
    connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
    return create_engine(settings.database_url, echo=settings.database_echo, connect_args=connect_args)


def init_database(engine: Engine, settings: CatalogSettings) -> None:
    """Create tables and seed any missing settings without touching existing values."""

    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        for key, value in default_settings(settings).items():
            if session.get(SettingRecord, key) is None:
                session.add(
                    SettingRecord(key=key, value=value, description=SETTING_DESCRIPTIONS[key])
                )
        session.commit()
