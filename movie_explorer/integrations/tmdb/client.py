from __future__ import annotations

import logging
import os
from typing import Any, Mapping
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

TMDB_API_BASE_URL = "https://api.themoviedb.org/3"
DEFAULT_LANGUAGE = "en-US"


class TmdbClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, body_snippet: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


def _require_api_key(api_key: str | None) -> str:
    resolved = (api_key or os.getenv("TMDB_API_KEY") or "").strip()
    if not resolved:
        raise TmdbClientError("TMDB_API_KEY is not set.")
    return resolved


def resolve_api_key(api_key: str | None = None) -> str | None:
    """
    Best-effort API key resolution for callers that want to continue when the key is missing.
    """

    resolved = (api_key or os.getenv("TMDB_API_KEY") or "").strip()
    return resolved or None


def _request_json(
    session: requests.Session,
    url: str,
    *,
    api_key: str,
    params: Mapping[str, Any] | None = None,
    timeout_seconds: float = 20.0,
) -> dict[str, Any]:
    headers = {
        "accept": "application/json",
        "Authorization": f"Bearer {api_key}",
    }

    try:
        resp = session.get(url, params=params, headers=headers, timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise TmdbClientError(f"TMDb request failed: {exc}") from exc

    if resp.status_code != 200:
        raise TmdbClientError(
            f"TMDb request failed with HTTP {resp.status_code}.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        )

    try:
        payload = resp.json()
    except ValueError as exc:
        raise TmdbClientError(
            "TMDb returned non-JSON response.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        ) from exc

    if not isinstance(payload, dict):
        raise TmdbClientError("TMDb returned unexpected JSON shape (not an object).")
    return payload


def search_movies(
    query: str,
    *,
    include_adult: bool = False,
    language: str = DEFAULT_LANGUAGE,
    page: int = 1,
    api_key: str | None = None,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """
    Search TMDb movies by title.

    Returns the raw `/3/search/movie` payload; callers normalize `results`.
    """

    api_key = _require_api_key(api_key)
    session = session or requests.Session()
    url = f"{TMDB_API_BASE_URL}/search/movie"
    params = {
        "query": query,
        "include_adult": "true" if include_adult else "false",
        "language": language,
        "page": int(page),
    }
    logger.debug(f"TMDb movie search query={query!r} page={page}")
    return _request_json(session, url, api_key=api_key, params=params)


def fetch_movie_details(
    movie_id: int | str,
    *,
    language: str = DEFAULT_LANGUAGE,
    api_key: str | None = None,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """
    Fetch a movie details payload from TMDb.

    Returns the full JSON object as returned by `/3/movie/{id}`. The id is forwarded
    as given, so an unknown or malformed id surfaces as an upstream HTTP error.
    """

    api_key = _require_api_key(api_key)
    session = session or requests.Session()
    url = f"{TMDB_API_BASE_URL}/movie/{quote(str(movie_id).strip(), safe='')}"
    return _request_json(session, url, api_key=api_key, params={"language": language})
