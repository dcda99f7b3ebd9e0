"""
Domain models shared across the proxy app and the client side.
"""

from movie_explorer.models.movies import Favorite, MovieDetail, SearchResult

__all__ = [
    "Favorite",
    "MovieDetail",
    "SearchResult",
]
