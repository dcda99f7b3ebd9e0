"""
Explorer UI state and its transitions.

`ExplorerState` is immutable. Every transition is a plain function that takes a
state and returns a new one, so the search, modal and favorites logic can be
tested without a running event loop or any rendering layer.

Favorites are held in an insertion-ordered mapping keyed by movie id; every
mutation re-checks that no id appears twice.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType

from movie_explorer.models.movies import Favorite, MovieDetail, SearchResult, validate_rating


class ViewMode(str, Enum):
    SEARCH = "search"
    FAVORITES = "favorites"


class FavoritesInvariantError(RuntimeError):
    pass


def _freeze_favorites(favorites: Mapping[int, Favorite]) -> Mapping[int, Favorite]:
    for movie_id, favorite in favorites.items():
        if favorite.id != movie_id:
            raise FavoritesInvariantError(f"Favorite keyed as {movie_id} has id {favorite.id}")
    return MappingProxyType(dict(favorites))


def favorites_from_list(favorites: Iterable[Favorite]) -> Mapping[int, Favorite]:
    """Key favorites by id; a repeated id keeps the first occurrence."""
    keyed: dict[int, Favorite] = {}
    for favorite in favorites:
        keyed.setdefault(favorite.id, favorite)
    return _freeze_favorites(keyed)


@dataclass(frozen=True)
class ExplorerState:
    view: ViewMode = ViewMode.SEARCH

    # Search
    query: str = ""
    debounced_query: str = ""
    results: tuple[SearchResult, ...] = ()
    has_searched: bool = False
    error: str | None = None
    search_generation: int = 0

    # Detail modal
    modal_open: bool = False
    details: MovieDetail | None = None
    details_loading: bool = False
    details_error: str | None = None
    details_request_id: int = 0

    favorites: Mapping[int, Favorite] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def favorites_list(self) -> list[Favorite]:
        return list(self.favorites.values())


# --- Search ---


def set_query(state: ExplorerState, text: str) -> ExplorerState:
    return replace(state, query=text)


def commit_query(state: ExplorerState, text: str) -> ExplorerState:
    """
    Commit a debounced query and start a new search generation.

    An empty commit clears results and any error right away.
    """
    generation = state.search_generation + 1
    if not text:
        return replace(
            state,
            debounced_query="",
            results=(),
            error=None,
            has_searched=False,
            search_generation=generation,
        )
    return replace(
        state,
        debounced_query=text,
        error=None,
        has_searched=False,
        search_generation=generation,
    )


def search_succeeded(state: ExplorerState, generation: int, results: Iterable[SearchResult]) -> ExplorerState:
    if generation != state.search_generation:
        return state
    return replace(state, results=tuple(results), error=None, has_searched=True)


def search_failed(state: ExplorerState, generation: int, message: str) -> ExplorerState:
    if generation != state.search_generation:
        return state
    return replace(state, results=(), error=message, has_searched=True)


def is_loading(state: ExplorerState) -> bool:
    return bool(state.debounced_query) and not state.has_searched and state.error is None


# --- Detail modal ---


def open_details(state: ExplorerState) -> tuple[ExplorerState, int]:
    request_id = state.details_request_id + 1
    new_state = replace(
        state,
        modal_open=True,
        details=None,
        details_error=None,
        details_loading=True,
        details_request_id=request_id,
    )
    return new_state, request_id


def details_loaded(state: ExplorerState, request_id: int, details: MovieDetail) -> ExplorerState:
    if request_id != state.details_request_id:
        return state
    return replace(state, details=details, details_error=None, details_loading=False)


def details_failed(state: ExplorerState, request_id: int, message: str) -> ExplorerState:
    if request_id != state.details_request_id:
        return state
    return replace(state, details_error=message, details_loading=False)


def close_modal(state: ExplorerState) -> ExplorerState:
    return replace(state, modal_open=False)


# --- Favorites ---


def is_favorite(state: ExplorerState, movie_id: int) -> bool:
    return movie_id in state.favorites


def get_favorite(state: ExplorerState, movie_id: int) -> Favorite | None:
    return state.favorites.get(movie_id)


def _with_favorites(state: ExplorerState, favorites: dict[int, Favorite]) -> ExplorerState:
    return replace(state, favorites=_freeze_favorites(favorites))


def add_favorite(state: ExplorerState, details: MovieDetail) -> ExplorerState:
    if is_favorite(state, details.id):
        return state
    favorites = dict(state.favorites)
    favorites[details.id] = Favorite.from_detail(details)
    return _with_favorites(state, favorites)


def add_favorite_from_result(state: ExplorerState, result: SearchResult) -> ExplorerState:
    if is_favorite(state, result.id):
        return state
    favorites = dict(state.favorites)
    favorites[result.id] = Favorite.from_result(result)
    return _with_favorites(state, favorites)


def remove_favorite(state: ExplorerState, movie_id: int) -> ExplorerState:
    if not is_favorite(state, movie_id):
        return state
    favorites = dict(state.favorites)
    del favorites[movie_id]
    return _with_favorites(state, favorites)


def update_favorite(
    state: ExplorerState,
    movie_id: int,
    *,
    rating: int | None = None,
    note: str | None = None,
) -> ExplorerState:
    """
    Merge `rating` and/or `note` into an existing favorite.

    Fields left as None are kept. Unknown ids are a no-op.
    """
    current = get_favorite(state, movie_id)
    if current is None:
        return state
    if rating is not None:
        validate_rating(rating)
    updates: dict[str, object] = {}
    if rating is not None:
        updates["rating"] = rating
    if note is not None:
        updates["note"] = note
    favorites = dict(state.favorites)
    favorites[movie_id] = replace(current, **updates)
    return _with_favorites(state, favorites)


def replace_favorites(state: ExplorerState, favorites: Iterable[Favorite]) -> ExplorerState:
    return replace(state, favorites=favorites_from_list(favorites))


# --- View ---


def switch_view(state: ExplorerState, view: ViewMode | str) -> ExplorerState:
    return replace(state, view=ViewMode(view))
