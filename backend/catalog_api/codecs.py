"""Conversions between in-memory lists and their text columns."""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable

logger = logging.getLogger(__name__)

GENRE_DELIMITER = ", "


def join_genres(genres: Iterable[str] | None) -> str | None:
    """Join genre names into the stored delimited string."""

    if not genres:
        return None
    cleaned = [genre.strip() for genre in genres if genre and genre.strip()]
    return GENRE_DELIMITER.join(cleaned) or None


def split_genres(value: str | None) -> list[str]:
    """Split a stored genre string back into names, preserving order."""

    if not value:
        return []
    return [part.strip() for part in value.split(GENRE_DELIMITER.strip()) if part.strip()]


def dump_links(links: Iterable[Any] | None) -> str:
    """Serialize download link descriptors to JSON text."""

    payload = []
    for link in links or []:
        if hasattr(link, "model_dump"):
            link = link.model_dump(exclude_none=True)
        payload.append(link)
    return json.dumps(payload, ensure_ascii=False)


def load_links(value: str | None) -> list[dict[str, Any]]:
    """Parse stored download links; malformed text yields an empty list."""

    if not value:
        return []
    try:
        payload = json.loads(value)
    except ValueError:
        logger.warning("Discarding malformed download_links value: %.80s", value)
        return []
    if not isinstance(payload, list):
        logger.warning("Discarding download_links value that is not a list: %.80s", value)
        return []
    links = [item for item in payload if isinstance(item, dict) and item.get("url")]
    if len(links) != len(payload):
        logger.warning(
            "Dropped %d download link(s) without a url: %.80s", len(payload) - len(links), value
        )
    return links
