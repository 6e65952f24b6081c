"""Typer CLI for the ShadowPlex catalog API."""
from .app import app

__all__ = ["app"]
