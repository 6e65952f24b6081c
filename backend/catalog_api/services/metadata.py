"""TMDB metadata enrichment for uploads."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from ..schemas import CatalogKind, EnrichedMetadata
from ..settings import CatalogSettings

logger = logging.getLogger(__name__)

PLACEHOLDER_API_KEY = "YOUR_TMDB_API_KEY"


def normalize_api_key(value: str | None) -> str | None:
    """Return a usable API key, treating blanks and the placeholder as unset."""

    if value is None:
        return None
    value = value.strip()
    if not value or value == PLACEHOLDER_API_KEY:
        return None
    return value


def _extract_year(date_str: str | None) -> int | None:
    if not date_str:
        return None
    if not isinstance(date_str, str):
        raise ValueError(f"TMDB date must be a string, got {date_str!r}")
    try:
        return int(date_str.split("-")[0])
    except ValueError:
        return None


class MetadataEnricher:
    """Look a title up on TMDB and map the best match onto the catalog schema.

    The lookup is search-then-detail: the first search result is taken as the
    match without any scoring, and its detail payload is mapped. Any network,
    HTTP or decoding failure is logged and yields an empty partial record, so
    callers can always fall back to the data they already have.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://api.themoviedb.org/3",
        image_base_url: str = "https://image.tmdb.org/t/p/w500",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = normalize_api_key(api_key)
        self.enabled = bool(self.api_key)
        self._base_url = base_url
        self._image_base_url = image_base_url
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: CatalogSettings,
        api_key: str | None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> "MetadataEnricher":
        """Build an enricher using the configured TMDB endpoints and timeout."""

        return cls(
            api_key,
            base_url=settings.tmdb_base_url,
            image_base_url=settings.tmdb_image_base_url,
            timeout=settings.provider_timeout,
            transport=transport,
        )

    def enrich(self, title: str, kind: CatalogKind) -> EnrichedMetadata:
        """Return the partial record TMDB knows for ``title``; empty when unavailable."""

        if not self.enabled or not title:
            return EnrichedMetadata()

        endpoint = "movie" if kind is CatalogKind.MOVIE else "tv"
        try:
            with httpx.Client(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                results = self._search(client, endpoint, title)
                if not results:
                    logger.info("TMDB returned no %s results for %r", endpoint, title)
                    return EnrichedMetadata()
                details = self._details(client, endpoint, results[0]["id"])
            return self._map(details, title, kind)
        except httpx.HTTPError as exc:
            logger.warning("TMDB API error for %r: %s", title, exc)
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Unexpected TMDB payload for %r: %s", title, exc)
        return EnrichedMetadata()

    def _search(self, client: httpx.Client, endpoint: str, title: str) -> list[dict[str, Any]]:
        response = client.get(
            f"/search/{endpoint}", params={"api_key": self.api_key, "query": title}
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("TMDB search response must be an object")
        results = payload.get("results") or []
        if not isinstance(results, list) or not all(isinstance(item, dict) for item in results):
            raise ValueError("TMDB search results must be a list of objects")
        return results

    def _details(self, client: httpx.Client, endpoint: str, tmdb_id: Any) -> dict[str, Any]:
        response = client.get(f"/{endpoint}/{tmdb_id}", params={"api_key": self.api_key})
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("TMDB detail response must be an object")
        return payload

    def _build_image_url(self, path: str | None) -> str | None:
        if not path:
            return None
        return f"{self._image_base_url}{path}"

    def _map(self, data: dict[str, Any], title: str, kind: CatalogKind) -> EnrichedMetadata:
        date = data.get("release_date") or data.get("first_air_date") or None
        runtime = data.get("runtime")
        if not runtime:
            episode_runtimes = data.get("episode_run_time") or []
            runtime = episode_runtimes[0] if episode_runtimes else None
        overview = data.get("overview") or None
        raw_genres = data.get("genres") or []
        if not isinstance(raw_genres, list) or not all(isinstance(g, dict) for g in raw_genres):
            raise ValueError("TMDB genres must be a list of objects")
        genres = [genre["name"] for genre in raw_genres if genre.get("name")]
        rating = data.get("vote_average") or None
        if rating is not None and not 0 <= rating <= 10:
            rating = None

        fields: dict[str, Any] = {
            "original_title": data.get("title") or data.get("name") or title,
            "poster_url": self._build_image_url(data.get("poster_path")),
            "backdrop_url": self._build_image_url(data.get("backdrop_path")),
            "description": overview,
            "overview": overview,
            "year": _extract_year(date),
            "runtime": runtime or None,
            "genres": genres or None,
            "rating": rating,
            "vote_count": data.get("vote_count") or None,
            "popularity": data.get("popularity") or None,
            "tagline": data.get("tagline") or None,
            "imdb_id": data.get("imdb_id") or None,
            "tmdb_id": data.get("id") or None,
        }
        if kind is CatalogKind.MOVIE:
            fields["release_date"] = date
        else:
            fields["first_air_date"] = date
            fields["last_air_date"] = data.get("last_air_date") or None
            fields["number_of_seasons"] = data.get("number_of_seasons") or None
            fields["number_of_episodes"] = data.get("number_of_episodes") or None
        return EnrichedMetadata(**fields)
