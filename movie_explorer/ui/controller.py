"""
Explorer controller: the single owner of UI state.

Runs on one asyncio event loop. User actions call the controller synchronously;
network work (search, movie details) runs as tasks on the same loop and applies
its outcome through the pure transitions in `movie_explorer.ui.state`.

- Typing restarts a debounce timer; the previous timer and any in-flight search are
  cancelled, so at most one search is ever pending.
- Detail fetches carry a request id; a response for a superseded request is dropped.
- Every change to the favorites collection is written to storage immediately.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from movie_explorer.models.movies import MovieDetail, SearchResult
from movie_explorer.ui import state as st
from movie_explorer.ui.api_client import ExplorerApiClient, ExplorerApiError
from movie_explorer.ui.storage import FavoritesStorage, FavoritesStorageError, LoadStatus

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5
SEARCH_ERROR_MESSAGE = "Something went wrong. Please try again."
DETAILS_ERROR_MESSAGE = "Failed to load movie details."


class ExplorerController:
    def __init__(
        self,
        api: ExplorerApiClient,
        storage: FavoritesStorage,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self._api = api
        self._storage = storage
        self._debounce_seconds = debounce_seconds
        self._debounce_handle: asyncio.TimerHandle | None = None
        self._search_task: asyncio.Task | None = None
        self._details_tasks: set[asyncio.Task] = set()
        self._listeners: list[Callable[[st.ExplorerState], None]] = []

        loaded = storage.load()
        self.favorites_load_status: LoadStatus = loaded.status
        self._state = st.replace_favorites(st.ExplorerState(), loaded.favorites)
        logger.debug(f"Loaded {len(loaded.favorites)} favorites (status={loaded.status.value})")

    @property
    def state(self) -> st.ExplorerState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return st.is_loading(self._state)

    def subscribe(self, listener: Callable[[st.ExplorerState], None]) -> None:
        """Call `listener` with the new state after every change."""
        self._listeners.append(listener)

    def _set_state(self, new_state: st.ExplorerState) -> None:
        if new_state is self._state:
            return
        favorites_changed = new_state.favorites is not self._state.favorites
        self._state = new_state
        if favorites_changed:
            self._persist_favorites()
        for listener in list(self._listeners):
            listener(new_state)

    def _persist_favorites(self) -> None:
        try:
            self._storage.save(self._state.favorites_list)
        except FavoritesStorageError as e:
            logger.warning(f"Failed to persist favorites: {e}")

    # --- Search ---

    def _cancel_pending_search(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None
        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()
        self._search_task = None

    def set_query(self, text: str) -> None:
        """
        Update the query text and restart the debounce timer.

        Must be called from within the running event loop. An empty query clears
        results and errors immediately.
        """
        self._cancel_pending_search()
        self._set_state(st.set_query(self._state, text))
        if not text:
            self._set_state(st.commit_query(self._state, ""))
            return
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(self._debounce_seconds, self._commit_query)

    def _commit_query(self) -> None:
        self._debounce_handle = None
        self._set_state(st.commit_query(self._state, self._state.query))
        query = self._state.debounced_query
        if not query:
            return
        generation = self._state.search_generation
        self._search_task = asyncio.ensure_future(self._run_search(query, generation))

    async def _run_search(self, query: str, generation: int) -> None:
        try:
            results = await self._api.search(query)
        except ExplorerApiError as e:
            logger.warning(f"Search failed for query={query!r}: {e}")
            self._set_state(st.search_failed(self._state, generation, SEARCH_ERROR_MESSAGE))
            return
        self._set_state(st.search_succeeded(self._state, generation, results))

    # --- Detail modal ---

    def open_details(self, movie_id: int) -> None:
        """Open the modal and fetch details for `movie_id`."""
        new_state, request_id = st.open_details(self._state)
        self._set_state(new_state)
        task = asyncio.ensure_future(self._run_details(movie_id, request_id))
        self._details_tasks.add(task)
        task.add_done_callback(self._details_tasks.discard)

    async def _run_details(self, movie_id: int, request_id: int) -> None:
        try:
            details = await self._api.movie_details(movie_id)
        except ExplorerApiError as e:
            logger.warning(f"Movie details failed for id={movie_id}: {e}")
            self._set_state(st.details_failed(self._state, request_id, DETAILS_ERROR_MESSAGE))
            return
        self._set_state(st.details_loaded(self._state, request_id, details))

    def close_modal(self) -> None:
        # In-flight detail fetches keep running; their result is stored but not shown.
        self._set_state(st.close_modal(self._state))

    # --- Favorites ---

    def is_favorite(self, movie_id: int) -> bool:
        return st.is_favorite(self._state, movie_id)

    def add_favorite(self, details: MovieDetail) -> None:
        self._set_state(st.add_favorite(self._state, details))

    def add_favorite_from_result(self, result: SearchResult) -> None:
        """Add `result` as a favorite (if new), then open its detail modal."""
        self._set_state(st.add_favorite_from_result(self._state, result))
        self.open_details(result.id)

    def remove_favorite(self, movie_id: int) -> None:
        self._set_state(st.remove_favorite(self._state, movie_id))

    def update_favorite(self, movie_id: int, *, rating: int | None = None, note: str | None = None) -> None:
        self._set_state(st.update_favorite(self._state, movie_id, rating=rating, note=note))

    # --- View ---

    def switch_view(self, view: st.ViewMode | str) -> None:
        self._set_state(st.switch_view(self._state, view))

    # --- Lifecycle ---

    async def wait_idle(self) -> None:
        """Wait until no debounce timer is pending and no fetch is in flight."""
        loop = asyncio.get_running_loop()
        while True:
            if self._debounce_handle is not None:
                await asyncio.sleep(max(0.0, self._debounce_handle.when() - loop.time()))
                continue
            pending = [t for t in self._details_tasks if not t.done()]
            if self._search_task is not None and not self._search_task.done():
                pending.append(self._search_task)
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def aclose(self) -> None:
        self._cancel_pending_search()
        for task in list(self._details_tasks):
            task.cancel()
        await self._api.aclose()
