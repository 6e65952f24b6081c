"""Tests for the catalog API listings, lookups, settings and admin gate."""
from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.catalog_api import create_app  # noqa: E402
from backend.catalog_api.models import EpisodeRecord, MovieRecord, SeriesRecord  # noqa: E402
from backend.catalog_api.schemas import CatalogKind  # noqa: E402
from backend.catalog_api.settings import CatalogSettings  # noqa: E402

ADMIN = {"email": "admin@example.com", "password": "s3cret"}


@pytest.fixture()
def client(tmp_path: Path) -> TestClient:
    """Provide a test client backed by an isolated SQLite database."""

    db_path = tmp_path / "catalog.db"
    settings = CatalogSettings(
        database_url=f"sqlite:///{db_path}",
        redis_url="fakeredis://",
        admin_email=ADMIN["email"],
        admin_password=ADMIN["password"],
        default_tmdb_api_key=None,
    )
    app = create_app(settings=settings)
    return TestClient(app)


def login(client: TestClient) -> None:
    response = client.post("/api/login", json=ADMIN)
    assert response.status_code == 200


def seed_movies(client: TestClient, *movies: dict) -> list[int]:
    """Insert movie rows directly and return their ids."""

    app_state = client.app.state.app_state
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    ids: list[int] = []
    with Session(app_state.engine) as session:
        records = []
        for index, fields in enumerate(movies):
            fields = {"upload_date": base + timedelta(hours=index), **fields}
            record = MovieRecord(**fields)
            session.add(record)
            records.append(record)
        session.commit()
        for record in records:
            session.refresh(record)
            ids.append(record.id)
    return ids


def seed_series(client: TestClient, **fields) -> int:
    app_state = client.app.state.app_state
    with Session(app_state.engine) as session:
        record = SeriesRecord(**fields)
        session.add(record)
        session.commit()
        session.refresh(record)
        return record.id


def seed_episode(client: TestClient, **fields) -> None:
    app_state = client.app.state.app_state
    with Session(app_state.engine) as session:
        session.add(EpisodeRecord(**fields))
        session.commit()


def test_health_endpoint_reports_ok_status(client: TestClient) -> None:
    """The /health endpoint should respond with an OK status payload."""

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "version": "0.1.0",
        "queue": {"status": "ok", "detail": None},
    }


def test_movie_listing_paginates_newest_first(client: TestClient) -> None:
    """Pages hold at most ``limit`` movies and ``pages`` is ceil(total / limit)."""

    seed_movies(client, *({"title": f"Movie {n}"} for n in range(5)))

    first = client.get("/api/movies", params={"page": 1, "limit": 2})
    assert first.status_code == 200
    body = first.json()
    assert [movie["title"] for movie in body["movies"]] == ["Movie 4", "Movie 3"]
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 5, "pages": 3}

    last = client.get("/api/movies", params={"page": 3, "limit": 2}).json()
    assert [movie["title"] for movie in last["movies"]] == ["Movie 0"]
    assert last["pagination"]["pages"] == 3

    beyond = client.get("/api/movies", params={"page": 4, "limit": 2}).json()
    assert beyond["movies"] == []
    assert beyond["pagination"]["total"] == 5


def test_movie_listing_defaults(client: TestClient) -> None:
    """Without parameters the listing uses page 1 and 20 items per page."""

    body = client.get("/api/movies").json()

    assert body == {"movies": [], "pagination": {"page": 1, "limit": 20, "total": 0, "pages": 0}}


def test_search_is_case_insensitive_substring(client: TestClient) -> None:
    """Title search ignores case and matches any substring."""

    gilmore, _ = seed_movies(
        client,
        {"title": "Happy Gilmore 2"},
        {"title": "Unrelated", "description": "Quiet drama"},
    )

    for term in ("happy", "GILMORE", "2"):
        body = client.get("/api/movies", params={"search": term}).json()
        assert [movie["id"] for movie in body["movies"]] == [gilmore]
        assert body["pagination"]["total"] == 1


def test_search_matches_description(client: TestClient) -> None:
    """Search also looks at the description column."""

    _, heist = seed_movies(
        client,
        {"title": "First", "description": "A love story"},
        {"title": "Second", "description": "A daring HEIST in Rome"},
    )

    body = client.get("/api/movies", params={"search": "heist"}).json()

    assert [movie["id"] for movie in body["movies"]] == [heist]


def test_search_treats_wildcards_literally(client: TestClient) -> None:
    """LIKE wildcards typed by users only match themselves."""

    seed_movies(client, {"title": "100% Wolf"}, {"title": "Plain"})

    body = client.get("/api/movies", params={"search": "%"}).json()

    assert [movie["title"] for movie in body["movies"]] == ["100% Wolf"]


def test_genre_filter_matches_substring(client: TestClient) -> None:
    """Genre filtering is a substring match on the joined genre string."""

    comedy, _ = seed_movies(
        client,
        {"title": "Funny", "genres": "Comedy, Action"},
        {"title": "Serious", "genres": "Drama"},
    )

    body = client.get("/api/movies", params={"genre": "Com"}).json()

    assert [movie["id"] for movie in body["movies"]] == [comedy]
    assert body["movies"][0]["genres"] == ["Comedy", "Action"]


def test_year_filter_and_type_scope(client: TestClient) -> None:
    """Year is an exact match and rows not typed as movie are never listed."""

    old, new, _ = seed_movies(
        client,
        {"title": "Old", "year": 1999},
        {"title": "New", "year": 2024},
        {"title": "Stray", "year": 2024, "type": "series"},
    )

    body = client.get("/api/movies", params={"year": 2024}).json()
    assert [movie["id"] for movie in body["movies"]] == [new]

    everything = client.get("/api/movies").json()
    assert {movie["id"] for movie in everything["movies"]} == {old, new}


def test_sort_is_descending_and_whitelisted(client: TestClient) -> None:
    """Sorting always descends; unknown columns fall back to upload date."""

    seed_movies(client, {"title": "Bravo"}, {"title": "Charlie"}, {"title": "Alpha"})

    by_title = client.get("/api/movies", params={"sort": "title"}).json()
    assert [movie["title"] for movie in by_title["movies"]] == ["Charlie", "Bravo", "Alpha"]

    fallback = client.get("/api/movies", params={"sort": "title; DROP TABLE movies"}).json()
    assert [movie["title"] for movie in fallback["movies"]] == ["Alpha", "Charlie", "Bravo"]


def test_invalid_pagination_is_rejected(client: TestClient) -> None:
    """Non-positive limits are a validation error naming the field."""

    response = client.get("/api/movies", params={"limit": 0})

    assert response.status_code == 400
    assert "limit" in response.json()["error"]


def test_movie_detail_deserializes_download_links(client: TestClient) -> None:
    """Download links come back as a list; malformed stored text becomes []."""

    good, broken = seed_movies(
        client,
        {"title": "Good", "download_links": '[{"quality": "720p", "url": "http://x/720"}]'},
        {"title": "Broken", "download_links": "{not json"},
    )

    detail = client.get(f"/api/movies/{good}")
    assert detail.status_code == 200
    assert detail.json()["download_links"] == [{"quality": "720p", "url": "http://x/720"}]
    assert detail.json()["type"] == "movie"

    broken_detail = client.get(f"/api/movies/{broken}")
    assert broken_detail.status_code == 200
    assert broken_detail.json()["download_links"] == []


def test_movie_detail_returns_404_for_missing_movie(client: TestClient) -> None:
    """GET /api/movies/{id} should return 404 when the movie does not exist."""

    response = client.get("/api/movies/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Movie not found"}


def test_genres_are_deduplicated_and_sorted(client: TestClient) -> None:
    """Genres across all records of a kind are split, deduplicated and sorted."""

    seed_movies(
        client,
        {"title": "One", "genres": "Action, Comedy"},
        {"title": "Two", "genres": "Comedy, Drama"},
        {"title": "Three", "genres": ""},
    )
    seed_series(client, title="Show", genres="Mystery")

    assert client.get("/api/genres", params={"type": "movie"}).json() == [
        "Action",
        "Comedy",
        "Drama",
    ]
    assert client.get("/api/genres").json() == ["Action", "Comedy", "Drama"]
    assert client.get("/api/genres", params={"type": "series"}).json() == ["Mystery"]


def test_years_are_distinct_and_descending(client: TestClient) -> None:
    """Years skip nulls, drop duplicates and list the newest first."""

    seed_movies(
        client,
        {"title": "A", "year": 2001},
        {"title": "B", "year": 2020},
        {"title": "C", "year": 2020},
        {"title": "D"},
    )

    assert client.get("/api/years", params={"type": "movie"}).json() == [2020, 2001]
    assert client.get("/api/years", params={"type": "series"}).json() == []


def test_series_listing_and_detail_with_ordered_episodes(client: TestClient) -> None:
    """Series detail embeds episodes ordered by season then episode."""

    series_id = seed_series(client, title="Dark Waters", genres="Drama, Mystery", year=2021)
    seed_episode(client, series_id=series_id, season_number=2, episode_number=1, title="S2E1")
    seed_episode(client, series_id=series_id, season_number=1, episode_number=2, title="S1E2")
    seed_episode(client, series_id=series_id, season_number=1, episode_number=1, title="S1E1")

    listing = client.get("/api/web-series", params={"search": "dark"}).json()
    assert [item["id"] for item in listing["series"]] == [series_id]
    assert listing["pagination"]["total"] == 1

    detail = client.get(f"/api/web-series/{series_id}")
    assert detail.status_code == 200
    assert [episode["title"] for episode in detail.json()["episodes"]] == ["S1E1", "S1E2", "S2E1"]

    season_two = client.get(f"/api/web-series/{series_id}/episodes", params={"season": 2})
    assert [episode["title"] for episode in season_two.json()] == ["S2E1"]

    missing = client.get("/api/web-series/999")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Web series not found"}


def test_series_listing_ignores_year(client: TestClient) -> None:
    """The year filter only applies to movies."""

    seed_series(client, title="Old Show", year=1990)

    body = client.get("/api/web-series", params={"year": 2030}).json()

    assert body["pagination"]["total"] == 1


def test_settings_are_seeded_and_require_auth_to_change(client: TestClient) -> None:
    """Settings are readable by anyone and writable only by the admin."""

    settings = client.get("/api/settings").json()
    assert set(settings) == {
        "site_name",
        "site_tagline",
        "tmdb_api_key",
        "email_notifications",
        "theme_primary",
        "theme_secondary",
    }
    assert settings["site_name"] == {"value": "ShadowPlex", "description": "Website name"}

    denied = client.post("/api/settings", json={"key": "site_name", "value": "Hacked"})
    assert denied.status_code == 401
    assert client.get("/api/settings").json()["site_name"]["value"] == "ShadowPlex"

    login(client)
    updated = client.post("/api/settings", json={"key": "site_name", "value": "Reel House"})
    assert updated.status_code == 200
    assert updated.json() == {"success": True, "message": "Setting updated successfully"}
    assert client.get("/api/settings").json()["site_name"]["value"] == "Reel House"

    toggled = client.post("/api/settings", json={"key": "email_notifications", "value": False})
    assert toggled.status_code == 200
    assert client.get("/api/settings").json()["email_notifications"]["value"] == "false"

    unknown = client.post("/api/settings", json={"key": "favourite_colour", "value": "red"})
    assert unknown.status_code == 404


def test_login_logout_and_auth_status(client: TestClient) -> None:
    """The session flag follows login and logout."""

    assert client.get("/api/auth-status").json() == {"loggedIn": False}

    rejected = client.post("/api/login", json={"email": ADMIN["email"], "password": "wrong"})
    assert rejected.status_code == 401
    assert rejected.json() == {"error": "Invalid credentials"}
    assert client.get("/api/auth-status").json() == {"loggedIn": False}

    login(client)
    assert client.get("/api/auth-status").json() == {"loggedIn": True}

    logout = client.get("/api/logout")
    assert logout.status_code == 200
    assert client.get("/api/auth-status").json() == {"loggedIn": False}


def test_login_requires_both_fields(client: TestClient) -> None:
    """Missing credentials are a validation error, not an auth error."""

    response = client.post("/api/login", json={"email": ADMIN["email"]})

    assert response.status_code == 400
    assert "password" in response.json()["error"]


def test_mutations_require_admin_session(client: TestClient) -> None:
    """Upload and delete reject anonymous callers without touching the store."""

    (movie_id,) = seed_movies(client, {"title": "Keep Me"})
    store = client.app.state.app_state.catalog_store

    upload = client.post("/api/upload", json={"title": "Sneaky"})
    assert upload.status_code == 401
    assert upload.json() == {"error": "Unauthorized"}

    delete = client.delete(f"/api/movies/{movie_id}")
    assert delete.status_code == 401

    assert store.count(CatalogKind.MOVIE) == 1
    assert client.get(f"/api/movies/{movie_id}").status_code == 200


def test_delete_removes_existing_and_reports_missing(client: TestClient) -> None:
    """Deleting an existing id succeeds once, then reports 404."""

    movie_id, other_id = seed_movies(client, {"title": "Doomed"}, {"title": "Survivor"})
    login(client)

    response = client.delete(f"/api/movies/{movie_id}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Item deleted successfully"}
    assert client.get(f"/api/movies/{movie_id}").status_code == 404

    again = client.delete(f"/api/movies/{movie_id}")
    assert again.status_code == 404
    assert again.json() == {"error": "Item not found"}

    assert client.get(f"/api/movies/{other_id}").status_code == 200


def test_deleting_series_removes_its_episodes(client: TestClient) -> None:
    """Series deletion cascades to the episodes table."""

    series_id = seed_series(client, title="Short Lived")
    seed_episode(client, series_id=series_id, season_number=1, episode_number=1, title="Pilot")
    login(client)

    response = client.delete(f"/api/web-series/{series_id}")

    assert response.status_code == 200
    assert client.get(f"/api/web-series/{series_id}").status_code == 404
    assert client.get(f"/api/web-series/{series_id}/episodes").json() == []


def test_add_episode_requires_admin_and_existing_series(client: TestClient) -> None:
    """Episodes can be appended by the admin to series that exist."""

    series_id = seed_series(client, title="Anthology")
    payload = {
        "season_number": 1,
        "episode_number": 3,
        "title": "Third",
        "download_links": [{"quality": "480p", "url": "http://x/e3"}],
    }

    denied = client.post(f"/api/web-series/{series_id}/episodes", json=payload)
    assert denied.status_code == 401

    login(client)
    created = client.post(f"/api/web-series/{series_id}/episodes", json=payload)
    assert created.status_code == 201
    assert created.json()["series_id"] == series_id
    assert created.json()["download_links"] == [{"quality": "480p", "url": "http://x/e3"}]

    missing = client.post("/api/web-series/999/episodes", json=payload)
    assert missing.status_code == 404

    episodes = client.get(f"/api/web-series/{series_id}/episodes").json()
    assert [episode["title"] for episode in episodes] == ["Third"]


def test_new_episode_refreshes_series_timestamp(client: TestClient) -> None:
    """Adding an episode stamps the series with a fresh update time."""

    series_id = seed_series(client, title="Timekeeper")
    before = client.get(f"/api/web-series/{series_id}").json()
    login(client)

    created = client.post(
        f"/api/web-series/{series_id}/episodes",
        json={"season_number": 1, "episode_number": 1, "title": "Pilot"},
    )
    assert created.status_code == 201

    after = client.get(f"/api/web-series/{series_id}").json()
    assert after["upload_date"] == before["upload_date"]
    assert datetime.fromisoformat(after["updated_date"]) >= datetime.fromisoformat(
        before["updated_date"]
    )
