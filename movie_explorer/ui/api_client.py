from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from movie_explorer.models.movies import MovieDetail, SearchResult

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://127.0.0.1:8000"
SEARCH_PATH = "/api/search"
MOVIE_PATH = "/api/movie"


class ExplorerApiError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def resolve_base_url(base_url: str | None = None) -> str:
    return (base_url or os.getenv("EXPLORER_API_BASE_URL") or DEFAULT_API_BASE_URL).strip().rstrip("/")


class ExplorerApiClient:
    """
    Async client for the search and movie-detail proxy endpoints.

    Every failure (transport error, non-2xx status, undecodable body) is raised as
    `ExplorerApiError`; callers do not distinguish between them.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout_seconds: float = 20.0,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=resolve_base_url(base_url),
            transport=transport,
            timeout=timeout_seconds,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ExplorerApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        logger.debug(f"GET {path} params={params}")
        try:
            resp = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise ExplorerApiError(f"Request to {path} failed: {exc}") from exc

        if not resp.is_success:
            raise ExplorerApiError(f"{path} responded with HTTP {resp.status_code}", status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise ExplorerApiError(f"{path} returned non-JSON response", status_code=resp.status_code) from exc

    async def search(self, query: str) -> list[SearchResult]:
        payload = await self._get_json(SEARCH_PATH, {"query": query})
        records = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(records, list):
            raise ExplorerApiError(f"{SEARCH_PATH} returned unexpected JSON shape")
        try:
            return [SearchResult.from_mapping(record) for record in records if isinstance(record, dict)]
        except ValueError as exc:
            raise ExplorerApiError(f"{SEARCH_PATH} returned an invalid result: {exc}") from exc

    async def movie_details(self, movie_id: int) -> MovieDetail:
        payload = await self._get_json(MOVIE_PATH, {"id": str(movie_id)})
        if not isinstance(payload, dict):
            raise ExplorerApiError(f"{MOVIE_PATH} returned unexpected JSON shape")
        try:
            return MovieDetail.from_mapping(payload)
        except ValueError as exc:
            raise ExplorerApiError(f"{MOVIE_PATH} returned an invalid movie: {exc}") from exc
