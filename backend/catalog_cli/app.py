"""Command line interface for the ShadowPlex catalog API."""
from __future__ import annotations

import json
from typing import List, Optional

import httpx
import typer

from .client import create_client


DEFAULT_API_BASE = "http://localhost:3000"

app = typer.Typer(help="Browse and manage the ShadowPlex catalog.")
movies_app = typer.Typer(help="Browse movies.")
app.add_typer(movies_app, name="movies")
series_app = typer.Typer(help="Browse web series and their episodes.")
app.add_typer(series_app, name="series")
settings_app = typer.Typer(help="Inspect and change site settings.")
app.add_typer(settings_app, name="settings")


def _api_base_option() -> typer.Option:
    return typer.Option(
        DEFAULT_API_BASE,
        "--api-base",
        help="Base URL for the catalog API service.",
        show_default=True,
        envvar="SHADOWPLEX_API_BASE",
    )


def _email_option() -> typer.Option:
    return typer.Option(
        ...,
        "--email",
        help="Admin e-mail used to log in.",
        envvar="SHADOWPLEX_ADMIN_EMAIL",
    )


def _password_option() -> typer.Option:
    return typer.Option(
        ...,
        "--password",
        help="Admin password used to log in.",
        envvar="SHADOWPLEX_ADMIN_PASSWORD",
        hide_input=True,
    )


def _echo_json(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _error_message(response: httpx.Response) -> str:
    try:
        return str(response.json().get("error", response.text))
    except ValueError:
        return response.text


def _login(client: httpx.Client, email: str, password: str) -> None:
    response = client.post("/api/login", json={"email": email, "password": password})
    if response.status_code == 401:
        typer.echo("Login failed: invalid credentials", err=True)
        raise typer.Exit(code=1)
    response.raise_for_status()


def _exit_on_client_error(response: httpx.Response) -> None:
    if response.status_code in (400, 401, 404):
        typer.echo(_error_message(response), err=True)
        raise typer.Exit(code=1)
    response.raise_for_status()


@app.command()
def health(api_base: str = _api_base_option()) -> None:
    """Call the /health endpoint and pretty-print the response."""

    with create_client(api_base) as client:
        response = client.get("/health")
        response.raise_for_status()
        _echo_json(response.json())


def _listing_params(
    page: int,
    limit: int,
    search: Optional[str],
    genre: Optional[str],
    sort: str,
) -> dict[str, object]:
    params: dict[str, object] = {"page": page, "limit": limit, "sort": sort}
    if search:
        params["search"] = search
    if genre:
        params["genre"] = genre
    return params


@movies_app.command("list")
def list_movies(
    page: int = typer.Option(1, min=1, help="Page number starting at 1."),
    limit: int = typer.Option(20, min=1, help="Number of movies per page."),
    search: Optional[str] = typer.Option(None, help="Title or description substring."),
    genre: Optional[str] = typer.Option(None, help="Genre substring."),
    year: Optional[int] = typer.Option(None, help="Exact release year."),
    sort: str = typer.Option("upload_date", help="Column to sort by (descending).", show_default=True),
    api_base: str = _api_base_option(),
) -> None:
    """Display one page of movies."""

    params = _listing_params(page, limit, search, genre, sort)
    if year is not None:
        params["year"] = year

    with create_client(api_base) as client:
        response = client.get("/api/movies", params=params)
        _exit_on_client_error(response)
        _echo_json(response.json())


@movies_app.command("show")
def show_movie(
    movie_id: int = typer.Argument(..., help="Movie identifier."),
    api_base: str = _api_base_option(),
) -> None:
    """Display a single movie."""

    with create_client(api_base) as client:
        response = client.get(f"/api/movies/{movie_id}")
        if response.status_code == 404:
            typer.echo("Movie not found", err=True)
            raise typer.Exit(code=1)
        response.raise_for_status()
        _echo_json(response.json())


@series_app.command("list")
def list_series(
    page: int = typer.Option(1, min=1, help="Page number starting at 1."),
    limit: int = typer.Option(20, min=1, help="Number of series per page."),
    search: Optional[str] = typer.Option(None, help="Title or description substring."),
    genre: Optional[str] = typer.Option(None, help="Genre substring."),
    sort: str = typer.Option("upload_date", help="Column to sort by (descending).", show_default=True),
    api_base: str = _api_base_option(),
) -> None:
    """Display one page of web series."""

    with create_client(api_base) as client:
        response = client.get(
            "/api/web-series", params=_listing_params(page, limit, search, genre, sort)
        )
        _exit_on_client_error(response)
        _echo_json(response.json())


@series_app.command("show")
def show_series(
    series_id: int = typer.Argument(..., help="Web series identifier."),
    api_base: str = _api_base_option(),
) -> None:
    """Display a web series with its episodes."""

    with create_client(api_base) as client:
        response = client.get(f"/api/web-series/{series_id}")
        if response.status_code == 404:
            typer.echo("Web series not found", err=True)
            raise typer.Exit(code=1)
        response.raise_for_status()
        _echo_json(response.json())


@series_app.command("episodes")
def list_episodes(
    series_id: int = typer.Argument(..., help="Web series identifier."),
    season: Optional[int] = typer.Option(None, min=0, help="Restrict to one season."),
    api_base: str = _api_base_option(),
) -> None:
    """Display the episodes of a web series."""

    params: dict[str, object] = {}
    if season is not None:
        params["season"] = season

    with create_client(api_base) as client:
        response = client.get(f"/api/web-series/{series_id}/episodes", params=params)
        response.raise_for_status()
        _echo_json(response.json())


@app.command()
def genres(
    kind: str = typer.Option("movie", "--type", help="movie or series."),
    api_base: str = _api_base_option(),
) -> None:
    """List the distinct genres of a kind."""

    with create_client(api_base) as client:
        response = client.get("/api/genres", params={"type": kind})
        response.raise_for_status()
        _echo_json(response.json())


@app.command()
def years(
    kind: str = typer.Option("movie", "--type", help="movie or series."),
    api_base: str = _api_base_option(),
) -> None:
    """List the distinct release years of a kind, newest first."""

    with create_client(api_base) as client:
        response = client.get("/api/years", params={"type": kind})
        response.raise_for_status()
        _echo_json(response.json())


@settings_app.command("show")
def show_settings(api_base: str = _api_base_option()) -> None:
    """Display every site setting."""

    with create_client(api_base) as client:
        response = client.get("/api/settings")
        response.raise_for_status()
        _echo_json(response.json())


@settings_app.command("set")
def set_setting(
    key: str = typer.Argument(..., help="Setting key, e.g. site_name."),
    value: str = typer.Argument(..., help="New value."),
    email: str = _email_option(),
    password: str = _password_option(),
    api_base: str = _api_base_option(),
) -> None:
    """Update one site setting."""

    with create_client(api_base) as client:
        _login(client, email, password)
        response = client.post("/api/settings", json={"key": key, "value": value})
        _exit_on_client_error(response)
        _echo_json(response.json())


@app.command()
def upload(
    title: str = typer.Argument(..., help="Title to upload; TMDB fills in the rest."),
    kind: str = typer.Option("movie", "--type", help="movie or series."),
    links: Optional[List[str]] = typer.Option(
        None,
        "--link",
        help="Download link as QUALITY=URL or a bare URL (repeat the flag).",
    ),
    trailer_url: Optional[str] = typer.Option(None, help="Trailer URL (movies only)."),
    poster_url: Optional[str] = typer.Option(None, help="Poster URL used when TMDB has none."),
    backdrop_url: Optional[str] = typer.Option(None, help="Backdrop URL used when TMDB has none."),
    email: str = _email_option(),
    password: str = _password_option(),
    api_base: str = _api_base_option(),
) -> None:
    """Upload a movie or web series."""

    download_links: list[dict[str, str]] = []
    for link in links or []:
        quality, sep, url = link.partition("=")
        if sep and not quality.startswith(("http://", "https://")):
            download_links.append({"quality": quality, "url": url})
        else:
            download_links.append({"url": link})

    payload: dict[str, object] = {"title": title, "type": kind, "download_links": download_links}
    if trailer_url is not None:
        payload["trailer_url"] = trailer_url
    if poster_url is not None:
        payload["poster_url"] = poster_url
    if backdrop_url is not None:
        payload["backdrop_url"] = backdrop_url

    with create_client(api_base) as client:
        _login(client, email, password)
        response = client.post("/api/upload", json=payload)
        _exit_on_client_error(response)
        _echo_json(response.json())


@app.command()
def delete(
    kind: str = typer.Argument(..., help="movies or web-series."),
    item_id: int = typer.Argument(..., help="Identifier of the record to delete."),
    email: str = _email_option(),
    password: str = _password_option(),
    api_base: str = _api_base_option(),
) -> None:
    """Delete a movie or web series."""

    with create_client(api_base) as client:
        _login(client, email, password)
        response = client.delete(f"/api/{kind}/{item_id}")
        _exit_on_client_error(response)
        _echo_json(response.json())
