"""
Favorites persistence.

Favorites live in a single named entry ("favorites") holding the JSON-serialized
list. The entry is read once when a session starts and overwritten wholesale on
every change.

On disk the entry lives in a JSON file at EXPLORER_FAVORITES_PATH (or a default
path under the home directory); `InMemoryFavoritesStorage` serves tests.
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from movie_explorer.models.movies import Favorite

logger = logging.getLogger(__name__)

FAVORITES_ENTRY = "favorites"
DEFAULT_FAVORITES_PATH = Path.home() / ".movie_explorer" / "favorites.json"


class LoadStatus(str, Enum):
    LOADED = "loaded"
    EMPTY = "empty"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class FavoritesLoadResult:
    """
    Outcome of reading the favorites entry.

    `EMPTY` means nothing was stored yet; `CORRUPT` means something was stored but
    could not be read. Both carry an empty favorites list.
    """

    status: LoadStatus
    favorites: list[Favorite] = field(default_factory=list)


class FavoritesStorageError(Exception):
    """Raised when the favorites entry cannot be read or written."""


def serialize_favorites(favorites: Iterable[Favorite]) -> str:
    return json.dumps([favorite.to_dict() for favorite in favorites], ensure_ascii=False)


def deserialize_favorites(raw: str) -> list[Favorite]:
    """
    Parse a serialized favorites list.

    Raises ValueError when the content is not a list of favorite objects.
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Favorites entry is not a list.")
    favorites: list[Favorite] = []
    seen: set[int] = set()
    for item in data:
        if not isinstance(item, dict):
            raise ValueError(f"Favorites entry contains a non-object item: {item!r}")
        favorite = Favorite.from_mapping(item)
        if favorite.id in seen:
            continue
        seen.add(favorite.id)
        favorites.append(favorite)
    return favorites


def _load_from_raw(raw: str | None) -> FavoritesLoadResult:
    if raw is None or not raw.strip():
        return FavoritesLoadResult(LoadStatus.EMPTY)
    try:
        favorites = deserialize_favorites(raw)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError too.
        logger.warning(f"Ignoring unreadable favorites entry: {e}")
        return FavoritesLoadResult(LoadStatus.CORRUPT)
    return FavoritesLoadResult(LoadStatus.LOADED, favorites)


class FavoritesStorage(ABC):
    """Abstract storage for the serialized favorites entry."""

    @abstractmethod
    def read_entry(self) -> str | None:
        """Return the raw entry, or None when nothing is stored. Raises FavoritesStorageError when unreadable."""
        pass

    @abstractmethod
    def write_entry(self, raw: str) -> None:
        """Overwrite the raw entry."""
        pass

    def load(self) -> FavoritesLoadResult:
        try:
            raw = self.read_entry()
        except FavoritesStorageError as e:
            logger.warning(f"Favorites storage unavailable: {e}")
            return FavoritesLoadResult(LoadStatus.CORRUPT)
        return _load_from_raw(raw)

    def save(self, favorites: Iterable[Favorite]) -> None:
        self.write_entry(serialize_favorites(favorites))


class InMemoryFavoritesStorage(FavoritesStorage):
    """In-process storage; nothing survives the process."""

    def __init__(self, raw: str | None = None) -> None:
        self.raw = raw
        self.writes = 0

    def read_entry(self) -> str | None:
        return self.raw

    def write_entry(self, raw: str) -> None:
        self.raw = raw
        self.writes += 1


class FileFavoritesStorage(FavoritesStorage):
    """
    Stores the favorites entry in a JSON document on disk.

    The document is an object of named entries so other settings can share the file;
    each entry value is the serialized string, mirroring browser local storage.
    """

    def __init__(self, path: str | Path, *, entry: str = FAVORITES_ENTRY) -> None:
        self.path = Path(path).expanduser()
        self.entry = entry

    def _read_text(self) -> str | None:
        if not self.path.is_file():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise FavoritesStorageError(f"Cannot read {self.path}: {e}") from e

    def _parse_document(self, text: str | None) -> dict | None:
        """Return the entries of `text`, or None when it is not a JSON object."""
        if text is None or not text.strip():
            return {}
        try:
            document = json.loads(text)
        except ValueError:
            return None
        if not isinstance(document, dict):
            return None
        return document

    def read_entry(self) -> str | None:
        document = self._parse_document(self._read_text())
        if document is None:
            raise FavoritesStorageError(f"Favorites file {self.path} is not a JSON object")
        raw = document.get(self.entry)
        if raw is not None and not isinstance(raw, str):
            raise FavoritesStorageError(f"Entry {self.entry!r} in {self.path} is not a string")
        return raw

    def write_entry(self, raw: str) -> None:
        try:
            document = self._parse_document(self._read_text()) or {}
        except FavoritesStorageError:
            document = {}
        document[self.entry] = raw
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise FavoritesStorageError(f"Cannot write {self.path}: {e}") from e
        logger.debug(f"Wrote favorites entry to {self.path}")


_storage: FavoritesStorage | None = None


def get_storage() -> FavoritesStorage:
    """
    Get the storage singleton.

    Uses EXPLORER_FAVORITES_PATH when set, otherwise ~/.movie_explorer/favorites.json.
    """
    global _storage
    if _storage is None:
        path = (os.getenv("EXPLORER_FAVORITES_PATH") or "").strip()
        _storage = FileFavoritesStorage(path or DEFAULT_FAVORITES_PATH)
    return _storage
