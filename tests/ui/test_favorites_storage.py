from __future__ import annotations

import json
from pathlib import Path

import pytest

from movie_explorer.models.movies import Favorite
from movie_explorer.ui import storage as mod
from movie_explorer.ui.storage import (
    FileFavoritesStorage,
    InMemoryFavoritesStorage,
    LoadStatus,
    deserialize_favorites,
    serialize_favorites,
)

FAVORITES = [
    Favorite(id=27205, title="Inception", year="2010", runtime=148, rating=5, note="rewatch"),
    Favorite(id=603, title="The Matrix", year="1999", poster="https://image.tmdb.org/t/p/w500/m.jpg"),
    Favorite(id=11, title="Amélie", overview="Paris — Montmartre"),
]


def test_serialized_favorites_round_trip() -> None:
    assert deserialize_favorites(serialize_favorites(FAVORITES)) == FAVORITES


def test_serialized_form_is_a_json_list_of_objects() -> None:
    data = json.loads(serialize_favorites(FAVORITES[:1]))
    assert data == [
        {
            "id": 27205,
            "title": "Inception",
            "overview": "",
            "year": "2010",
            "runtime": 148,
            "poster": None,
            "rating": 5,
            "note": "rewatch",
        }
    ]


def test_deserialize_keeps_first_of_duplicate_ids() -> None:
    raw = json.dumps([{"id": 1, "title": "a"}, {"id": 1, "title": "b"}])
    assert [f.title for f in deserialize_favorites(raw)] == ["a"]


class TestInMemoryStorage:
    def test_nothing_stored_is_empty(self):
        result = InMemoryFavoritesStorage().load()
        assert result.status is LoadStatus.EMPTY
        assert result.favorites == []

    def test_save_then_load(self):
        storage = InMemoryFavoritesStorage()
        storage.save(FAVORITES)

        result = storage.load()

        assert result.status is LoadStatus.LOADED
        assert result.favorites == FAVORITES
        assert storage.writes == 1

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            '{"id": 1}',
            '[{"title": "no id"}]',
            '[{"id": 1, "title": "x", "rating": 9}]',
            "[1, 2]",
        ],
    )
    def test_unreadable_entry_is_corrupt(self, raw: str):
        result = InMemoryFavoritesStorage(raw).load()
        assert result.status is LoadStatus.CORRUPT
        assert result.favorites == []

    def test_empty_list_is_loaded(self):
        result = InMemoryFavoritesStorage("[]").load()
        assert result.status is LoadStatus.LOADED
        assert result.favorites == []


class TestFileStorage:
    def test_missing_file_is_empty(self, tmp_path: Path):
        result = FileFavoritesStorage(tmp_path / "favorites.json").load()
        assert result.status is LoadStatus.EMPTY

    def test_save_creates_parent_dirs_and_round_trips(self, tmp_path: Path):
        path = tmp_path / "nested" / "favorites.json"
        FileFavoritesStorage(path).save(FAVORITES)

        result = FileFavoritesStorage(path).load()

        assert result.status is LoadStatus.LOADED
        assert result.favorites == FAVORITES
        document = json.loads(path.read_text(encoding="utf-8"))
        assert json.loads(document["favorites"])[0]["id"] == 27205

    def test_save_keeps_other_entries(self, tmp_path: Path):
        path = tmp_path / "favorites.json"
        path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

        FileFavoritesStorage(path).save(FAVORITES[:1])

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["theme"] == "dark"
        assert "favorites" in document

    def test_save_keeps_non_string_entries(self, tmp_path: Path):
        path = tmp_path / "favorites.json"
        path.write_text(json.dumps({"theme": "dark", "window": {"w": 800}, "count": 3}), encoding="utf-8")

        FileFavoritesStorage(path).save(FAVORITES[:1])

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["theme"] == "dark"
        assert document["window"] == {"w": 800}
        assert document["count"] == 3
        assert json.loads(document["favorites"])[0]["id"] == 27205

    def test_non_string_favorites_entry_is_corrupt(self, tmp_path: Path):
        path = tmp_path / "favorites.json"
        path.write_text(json.dumps({"favorites": [{"id": 1, "title": "x"}]}), encoding="utf-8")

        result = FileFavoritesStorage(path).load()

        assert result.status is LoadStatus.CORRUPT
        assert result.favorites == []

    @pytest.mark.parametrize(
        "text",
        [
            json.dumps([{"id": 1, "title": "x"}]),
            json.dumps("[]"),
            "42",
        ],
    )
    def test_non_object_file_is_corrupt(self, tmp_path: Path, text: str):
        path = tmp_path / "favorites.json"
        path.write_text(text, encoding="utf-8")

        result = FileFavoritesStorage(path).load()

        assert result.status is LoadStatus.CORRUPT
        assert result.favorites == []

    def test_other_entries_without_favorites_is_empty(self, tmp_path: Path):
        path = tmp_path / "favorites.json"
        path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

        assert FileFavoritesStorage(path).load().status is LoadStatus.EMPTY

    def test_garbage_file_is_corrupt_and_overwritten_on_save(self, tmp_path: Path):
        path = tmp_path / "favorites.json"
        path.write_text("garbage", encoding="utf-8")
        storage = FileFavoritesStorage(path)

        assert storage.load().status is LoadStatus.CORRUPT

        storage.save(FAVORITES[:1])
        assert storage.load().favorites == FAVORITES[:1]

    def test_unwritable_path_raises_storage_error(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        storage = FileFavoritesStorage(blocker / "favorites.json")

        with pytest.raises(mod.FavoritesStorageError):
            storage.save(FAVORITES)


def test_get_storage_uses_environment_path(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(mod, "_storage", None)
    monkeypatch.setenv("EXPLORER_FAVORITES_PATH", str(tmp_path / "fav.json"))

    storage = mod.get_storage()

    assert isinstance(storage, FileFavoritesStorage)
    assert storage.path == tmp_path / "fav.json"
    assert mod.get_storage() is storage
