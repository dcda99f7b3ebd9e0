from __future__ import annotations

import pytest

from movie_explorer.integrations.tmdb.normalize import (
    IMAGE_BASE_URL,
    normalize_movie_detail,
    normalize_search_results,
    poster_url,
    release_year,
)
from movie_explorer.models.movies import YEAR_PLACEHOLDER, MovieDetail, SearchResult


@pytest.mark.parametrize(
    ("release_date", "expected"),
    [
        ("2022-03-01", "2022"),
        ("1999", "1999"),
        (None, YEAR_PLACEHOLDER),
        ("", YEAR_PLACEHOLDER),  # TMDb sends "" for unknown dates
        (19990331, YEAR_PLACEHOLDER),
    ],
)
def test_release_year(release_date, expected: str) -> None:
    assert release_year(release_date) == expected


def test_poster_url() -> None:
    assert poster_url("/abc.jpg") == f"{IMAGE_BASE_URL}/abc.jpg"
    assert poster_url(None) is None
    assert poster_url("") is None


def test_normalize_search_results() -> None:
    payload = {
        "results": [
            {
                "id": 27205,
                "title": "Inception",
                "release_date": "2010-07-15",
                "poster_path": "/inception.jpg",
                "overview": "Cobb steals secrets.",
                "adult": False,
            },
            {"id": 1, "title": None, "overview": None},
            {"title": "no id"},
            None,
        ]
    }

    assert normalize_search_results(payload) == [
        SearchResult(
            id=27205,
            title="Inception",
            year="2010",
            poster=f"{IMAGE_BASE_URL}/inception.jpg",
            overview="Cobb steals secrets.",
        ),
        SearchResult(id=1, title="", year=YEAR_PLACEHOLDER, poster=None, overview=""),
    ]


@pytest.mark.parametrize("payload", [{}, {"results": None}, {"results": "oops"}])
def test_normalize_search_results_without_a_results_list(payload) -> None:
    assert normalize_search_results(payload) == []


def test_normalize_movie_detail() -> None:
    detail = normalize_movie_detail(
        {
            "id": 603,
            "title": "The Matrix",
            "overview": "Set in the 22nd century...",
            "release_date": "1999-03-31",
            "runtime": 136,
            "poster_path": "/matrix.jpg",
            "genres": [{"id": 28, "name": "Action"}],
        }
    )
    assert detail == MovieDetail(
        id=603,
        title="The Matrix",
        overview="Set in the 22nd century...",
        year="1999",
        runtime=136,
        poster=f"{IMAGE_BASE_URL}/matrix.jpg",
    )


def test_normalize_movie_detail_without_runtime() -> None:
    detail = normalize_movie_detail({"id": 5, "runtime": None, "overview": None})
    assert detail.runtime is None
    assert detail.overview == ""
    assert detail.year == YEAR_PLACEHOLDER


def test_normalize_movie_detail_requires_id() -> None:
    with pytest.raises(ValueError):
        normalize_movie_detail({"title": "x"})
