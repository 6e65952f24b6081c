"""Runtime configuration for the catalog API."""
from __future__ import annotations

from pydantic import Field, PositiveFloat, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogSettings(BaseSettings):
    """Environment-aware settings for the catalog service."""

    database_url: str = Field(
        default="sqlite:///./data/shadowplex.db",
        description="Connection URL for the catalog SQLite database.",
    )
    database_echo: bool = Field(
        default=False, description="Enable SQL echo for debugging queries."
    )

    admin_email: str = Field(
        default="admin@shadowplex.local", description="Login e-mail of the single admin account."
    )
    admin_password: SecretStr = Field(
        default=SecretStr("admin123"), description="Password of the single admin account."
    )
    session_secret: str = Field(
        default="shadowplex-session-secret",
        description="Secret used to sign the admin session cookie.",
    )

    site_name: str = Field(default="ShadowPlex", description="Seed value for the site_name setting.")
    site_tagline: str = Field(
        default="Movies and web series, all in one place",
        description="Seed value for the site_tagline setting.",
    )
    theme_primary: str = Field(default="#e50914", description="Seed primary theme color.")
    theme_secondary: str = Field(default="#141414", description="Seed secondary theme color.")

    default_tmdb_api_key: str | None = Field(
        default=None,
        description="TMDB API key used when the tmdb_api_key setting is empty.",
    )
    tmdb_base_url: str = Field(
        default="https://api.themoviedb.org/3", description="Base URL of the TMDB REST API."
    )
    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w500",
        description="Prefix joined with TMDB poster and backdrop paths.",
    )
    provider_timeout: PositiveFloat = Field(
        default=10.0, description="Timeout in seconds for each TMDB request."
    )

    enable_email_notifications: bool = Field(
        default=True, description="Master switch for upload notification e-mails."
    )
    smtp_host: str = Field(default="smtp.gmail.com", description="SMTP relay host.")
    smtp_port: int = Field(default=587, description="SMTP relay port.")
    smtp_username: str | None = Field(default=None, description="SMTP login and sender address.")
    smtp_password: SecretStr | None = Field(default=None, description="SMTP password.")
    smtp_use_tls: bool = Field(default=True, description="Issue STARTTLS before logging in.")
    public_base_url: str = Field(
        default="http://localhost:3000",
        description="Public URL used for links inside notification e-mails.",
    )

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Connection URL for the Redis-backed notification queue.",
    )
    redis_queue_name: str = Field(
        default="shadowplex-notifications",
        description="RQ queue name used for notification jobs.",
    )
    queue_worker_name: str = Field(
        default="shadowplex-worker",
        description="Identifier used by the notification worker.",
    )

    log_level: str = Field(default="INFO", description="Root logging level for entry points.")
    host: str = Field(default="0.0.0.0", description="Bind address for the API server.")
    port: int = Field(default=3000, description="Bind port for the API server.")

    model_config = SettingsConfigDict(
        env_prefix="SHADOWPLEX_",
        env_file=".env",
        env_file_encoding="utf-8",
    )
