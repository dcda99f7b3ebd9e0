"""
Reshape TMDb movie payloads into the records served by the proxy endpoints.

Upstream records are not validated: missing keys fall back to empty or
placeholder values instead of failing the request.
"""

from __future__ import annotations

from typing import Any, Mapping

from movie_explorer.models.movies import YEAR_PLACEHOLDER, MovieDetail, SearchResult

IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"


def release_year(release_date: Any) -> str:
    """Return the part of `release_date` before the first `-`, or the placeholder."""
    if not isinstance(release_date, str) or not release_date.strip():
        return YEAR_PLACEHOLDER
    return release_date.strip().split("-")[0]


def poster_url(poster_path: Any) -> str | None:
    if not isinstance(poster_path, str) or not poster_path:
        return None
    return f"{IMAGE_BASE_URL}{poster_path}"


def _movie_id(record: Mapping[str, Any]) -> int:
    value = record.get("id")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"TMDb movie record has no integer id: {value!r}")
    return value


def _runtime(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def normalize_search_result(record: Mapping[str, Any]) -> SearchResult:
    return SearchResult(
        id=_movie_id(record),
        title=str(record.get("title") or ""),
        year=release_year(record.get("release_date")),
        poster=poster_url(record.get("poster_path")),
        overview=str(record.get("overview") or ""),
    )


def normalize_search_results(payload: Mapping[str, Any]) -> list[SearchResult]:
    records = payload.get("results")
    if not isinstance(records, list):
        return []
    out: list[SearchResult] = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        try:
            out.append(normalize_search_result(record))
        except ValueError:
            # Records without an id cannot be opened or favorited.
            continue
    return out


def normalize_movie_detail(record: Mapping[str, Any]) -> MovieDetail:
    return MovieDetail(
        id=_movie_id(record),
        title=str(record.get("title") or ""),
        overview=str(record.get("overview") or ""),
        year=release_year(record.get("release_date")),
        runtime=_runtime(record.get("runtime")),
        poster=poster_url(record.get("poster_path")),
    )
