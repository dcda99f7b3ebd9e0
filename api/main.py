"""
Movie Explorer API - FastAPI application.

Provides endpoints for:
- Searching movies by title (TMDb proxy)
- Fetching a single movie's details (TMDb proxy)
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routers import movies

logger = logging.getLogger(__name__)


def get_cors_origins() -> list[str]:
    """
    Origins allowed to call the proxy, from comma-separated CORS_ALLOW_ORIGINS.

    Unset or blank means any origin; the proxy is anonymous, so no credentials
    are ever allowed.
    """
    origins = [origin.strip() for origin in os.getenv("CORS_ALLOW_ORIGINS", "").split(",")]
    return [origin for origin in origins if origin] or ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting up Movie Explorer API...")
    yield
    logger.info("Shutting down Movie Explorer API...")


app = FastAPI(
    title="Movie Explorer API",
    description="Proxy endpoints for TMDb movie search and movie details",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=False,
    allow_methods=["GET"],
)

app.include_router(movies.router, prefix="/api")


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "movie-explorer"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}
