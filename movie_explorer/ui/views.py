"""
Stateless text renderers for the explorer.

Each function takes state (or a slice of it) and returns the lines to print;
nothing here mutates state or talks to the network.
"""

from __future__ import annotations

import textwrap

from movie_explorer.models.movies import MAX_RATING, MIN_RATING, Favorite, MovieDetail, SearchResult
from movie_explorer.ui.state import ExplorerState, ViewMode, get_favorite, is_favorite, is_loading

SEARCH_PLACEHOLDER = "Search for a movie..."
OVERVIEW_WIDTH = 72


def _clamp(text: str, lines: int = 2) -> list[str]:
    if not text:
        return []
    return textwrap.wrap(text, width=OVERVIEW_WIDTH, max_lines=lines, placeholder=" …")


def _heading(movie: SearchResult | MovieDetail | Favorite) -> str:
    return f"{movie.title} ({movie.year})"


def render_view_switcher(state: ExplorerState) -> list[str]:
    labels = {
        ViewMode.SEARCH: "Search",
        ViewMode.FAVORITES: f"Favorites ({len(state.favorites)})",
    }
    parts = [f"[{label}]" if view is state.view else f" {label} " for view, label in labels.items()]
    return ["  ".join(parts)]


def render_search_input(query: str) -> list[str]:
    return [f"> {query}" if query else f"> {SEARCH_PLACEHOLDER}"]


def render_result(result: SearchResult, *, favorite: bool) -> list[str]:
    lines = [f"#{result.id}  {_heading(result)}"]
    lines.extend(f"    {line}" for line in _clamp(result.overview))
    lines.append("    Remove Favorite" if favorite else "    + Add to Favorites")
    return lines


def render_search_results(state: ExplorerState) -> list[str]:
    # The results panel only appears once a search has completed.
    if not state.has_searched:
        return []
    lines: list[str] = []
    if is_loading(state):
        lines.append("Searching movies…")
    if state.error:
        lines.append(state.error)
    if not is_loading(state) and not state.error and not state.results:
        lines.append(f'No movies found for "{state.debounced_query}"')
    for result in state.results:
        lines.extend(render_result(result, favorite=is_favorite(state, result.id)))
    return lines


def render_favorite(favorite: Favorite) -> list[str]:
    lines = [f"#{favorite.id}  {_heading(favorite)}", f"    Rating: {favorite.rating}/{MAX_RATING}"]
    lines.extend(f"    {line}" for line in _clamp(favorite.note))
    lines.append("    Remove Favorite")
    return lines


def render_favorites(state: ExplorerState) -> list[str]:
    if not state.favorites:
        return ["No favorites yet."]
    lines: list[str] = []
    for favorite in state.favorites_list:
        lines.extend(render_favorite(favorite))
    return lines


def render_favorite_editor(favorite: Favorite) -> list[str]:
    choices = " ".join(
        f"[{n}]" if n == favorite.rating else str(n) for n in range(MIN_RATING, MAX_RATING + 1)
    )
    lines = ["Remove from Favorites", f"Rating: {choices}", "Note:"]
    lines.extend(f"  {line}" for line in (favorite.note.splitlines() or [""]))
    return lines


def render_modal(state: ExplorerState) -> list[str]:
    if not state.modal_open:
        return []
    lines = ["-" * 40]
    if state.details_loading:
        lines.append("Loading movie details…")
    if state.details_error:
        lines.append(state.details_error)
    details = state.details
    if details is not None:
        lines.append(_heading(details))
        if details.poster:
            lines.append(f"Poster: {details.poster}")
        if details.runtime:
            lines.append(f"Runtime: {details.runtime} min")
        lines.extend(textwrap.wrap(details.overview, width=OVERVIEW_WIDTH))
        lines.append("")
        favorite = get_favorite(state, details.id)
        if favorite is None:
            lines.append("Add to Favorites")
        else:
            lines.extend(render_favorite_editor(favorite))
    lines.append("-" * 40)
    return lines


def render_page(state: ExplorerState) -> list[str]:
    lines = render_view_switcher(state)
    lines.append("")
    if state.view is ViewMode.SEARCH:
        lines.extend(render_search_input(state.query))
        lines.extend(render_search_results(state))
    else:
        lines.extend(render_favorites(state))
    lines.extend(render_modal(state))
    return lines
