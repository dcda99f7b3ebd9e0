"""
Dependency injection for the TMDb credential and HTTP session.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from functools import lru_cache
from typing import Annotated

import requests
from fastapi import Depends

from movie_explorer.integrations.tmdb.client import resolve_api_key
from movie_explorer.utils.env import load_env

load_env()

logger = logging.getLogger(__name__)


@lru_cache
def get_tmdb_api_key() -> str | None:
    """
    Resolve the TMDb bearer token from the environment.

    A missing token is not fatal at startup; the proxies report it as an upstream failure.
    """
    api_key = resolve_api_key()
    if not api_key:
        logger.warning("TMDB_API_KEY is not set; movie proxies will fail until it is configured")
    return api_key


def get_tmdb_session() -> Iterator[requests.Session]:
    """
    Yields a requests session for a single proxy request.
    """
    session = requests.Session()
    try:
        yield session
    finally:
        session.close()


# Type aliases for dependency injection
TmdbApiKey = Annotated[str | None, Depends(get_tmdb_api_key)]
TmdbSession = Annotated[requests.Session, Depends(get_tmdb_session)]
