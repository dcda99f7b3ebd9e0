from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from movie_explorer.integrations.tmdb import client as mod
from movie_explorer.integrations.tmdb.client import TmdbClientError, fetch_movie_details, search_movies


def _response(status_code: int = 200, payload=None, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


def test_search_movies_sends_bearer_token_and_first_page_params() -> None:
    session = MagicMock()
    session.get.return_value = _response(payload={"page": 1, "results": []})

    payload = search_movies("batman", api_key="tok", session=session)

    assert payload == {"page": 1, "results": []}
    session.get.assert_called_once()
    args, kwargs = session.get.call_args
    assert args[0] == f"{mod.TMDB_API_BASE_URL}/search/movie"
    assert kwargs["params"] == {"query": "batman", "include_adult": "false", "language": "en-US", "page": 1}
    assert kwargs["headers"]["Authorization"] == "Bearer tok"
    assert kwargs["headers"]["accept"] == "application/json"


def test_fetch_movie_details_builds_movie_url() -> None:
    session = MagicMock()
    session.get.return_value = _response(payload={"id": 603, "runtime": 136})

    payload = fetch_movie_details("603", api_key="tok", session=session)

    assert payload["runtime"] == 136
    args, kwargs = session.get.call_args
    assert args[0] == f"{mod.TMDB_API_BASE_URL}/movie/603"
    assert kwargs["params"] == {"language": "en-US"}


def test_fetch_movie_details_quotes_the_id() -> None:
    session = MagicMock()
    session.get.return_value = _response(payload={"id": 1})

    fetch_movie_details("12/../x", api_key="tok", session=session)

    assert session.get.call_args.args[0] == f"{mod.TMDB_API_BASE_URL}/movie/12%2F..%2Fx"


@pytest.mark.parametrize("status_code", [401, 404, 429, 500])
def test_non_200_raises_without_retry(status_code: int) -> None:
    session = MagicMock()
    session.get.return_value = _response(status_code=status_code, text="nope")

    with pytest.raises(TmdbClientError) as excinfo:
        search_movies("batman", api_key="tok", session=session)

    assert excinfo.value.status_code == status_code
    assert excinfo.value.body_snippet == "nope"
    assert session.get.call_count == 1


def test_transport_error_raises_client_error() -> None:
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("boom")

    with pytest.raises(TmdbClientError, match="boom"):
        fetch_movie_details(603, api_key="tok", session=session)
    assert session.get.call_count == 1


def test_non_json_response_raises() -> None:
    session = MagicMock()
    session.get.return_value = _response(payload=ValueError("not json"), text="<html>")

    with pytest.raises(TmdbClientError, match="non-JSON"):
        search_movies("batman", api_key="tok", session=session)


def test_non_object_json_raises() -> None:
    session = MagicMock()
    session.get.return_value = _response(payload=[1, 2, 3])

    with pytest.raises(TmdbClientError, match="not an object"):
        search_movies("batman", api_key="tok", session=session)


def test_missing_api_key_raises_before_any_request(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TMDB_API_KEY", raising=False)
    session = MagicMock()

    with pytest.raises(TmdbClientError, match="TMDB_API_KEY"):
        search_movies("batman", session=session)
    session.get.assert_not_called()


def test_api_key_falls_back_to_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TMDB_API_KEY", " env-token ")
    session = MagicMock()
    session.get.return_value = _response(payload={"results": []})

    search_movies("batman", session=session)

    assert session.get.call_args.kwargs["headers"]["Authorization"] == "Bearer env-token"
    assert mod.resolve_api_key() == "env-token"
