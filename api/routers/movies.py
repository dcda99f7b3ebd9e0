"""
Proxy endpoints for TMDb movie search and movie details.

Both endpoints forward a single request upstream and reshape the response;
there is no caching, pagination or retrying.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.deps import TmdbApiKey, TmdbSession
from movie_explorer.integrations.tmdb.client import TmdbClientError, fetch_movie_details, search_movies
from movie_explorer.integrations.tmdb.normalize import normalize_movie_detail, normalize_search_results

logger = logging.getLogger(__name__)

router = APIRouter(tags=["movies"])

MISSING_ID_ERROR = "Movie ID is required"
DETAILS_ERROR = "Failed to load movie details"


# --- Pydantic models ---

class SearchResultOut(BaseModel):
    id: int
    title: str
    year: str
    poster: str | None
    overview: str


class SearchResponse(BaseModel):
    results: list[SearchResultOut]


class MovieDetailOut(BaseModel):
    id: int
    title: str
    overview: str
    year: str
    runtime: int | None
    poster: str | None


class ErrorResponse(BaseModel):
    error: str


# --- Endpoints ---

@router.get(
    "/search",
    response_model=SearchResponse,
    responses={500: {"model": SearchResponse}},
)
def search(
    api_key: TmdbApiKey,
    session: TmdbSession,
    query: str | None = Query(default=None),
):
    """Search movies by title (first page only, adult titles excluded)."""
    if not query:
        return {"results": []}

    try:
        payload = search_movies(query, include_adult=False, page=1, api_key=api_key, session=session)
    except TmdbClientError as exc:
        logger.warning(f"TMDb search failed for query={query!r}: {exc} (status={exc.status_code})")
        return JSONResponse(status_code=500, content={"results": []})

    return {"results": [result.to_dict() for result in normalize_search_results(payload)]}


@router.get(
    "/movie",
    response_model=MovieDetailOut,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def movie_details(
    api_key: TmdbApiKey,
    session: TmdbSession,
    movie_id: str | None = Query(default=None, alias="id"),
):
    """Get the details of a single movie by TMDb id."""
    if not movie_id:
        return JSONResponse(status_code=400, content={"error": MISSING_ID_ERROR})

    try:
        payload = fetch_movie_details(movie_id, api_key=api_key, session=session)
        detail = normalize_movie_detail(payload)
    except (TmdbClientError, ValueError) as exc:
        logger.warning(f"TMDb movie details failed for id={movie_id!r}: {exc}")
        return JSONResponse(status_code=500, content={"error": DETAILS_ERROR})

    return detail.to_dict()
