from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

YEAR_PLACEHOLDER = "—"
DEFAULT_RATING = 3
MIN_RATING = 1
MAX_RATING = 5


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _coerce_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _coerce_optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


@dataclass(frozen=True)
class SearchResult:
    """
    A single movie returned by the search proxy.

    Transient: lives only for the duration of a search response.
    """

    id: int
    title: str
    year: str = YEAR_PLACEHOLDER
    poster: str | None = None
    overview: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SearchResult":
        movie_id = _coerce_int(data.get("id"))
        if movie_id is None:
            raise ValueError(f"Search result has no integer id: {data.get('id')!r}")
        return cls(
            id=movie_id,
            title=_coerce_str(data.get("title")),
            year=_coerce_str(data.get("year"), YEAR_PLACEHOLDER),
            poster=_coerce_optional_str(data.get("poster")),
            overview=_coerce_str(data.get("overview")),
        )


@dataclass(frozen=True)
class MovieDetail:
    """
    Movie details shown in the modal.

    Same fields as `SearchResult` plus `runtime` (minutes, when known).
    """

    id: int
    title: str
    overview: str = ""
    year: str = YEAR_PLACEHOLDER
    runtime: int | None = None
    poster: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MovieDetail":
        movie_id = _coerce_int(data.get("id"))
        if movie_id is None:
            raise ValueError(f"Movie detail has no integer id: {data.get('id')!r}")
        return cls(
            id=movie_id,
            title=_coerce_str(data.get("title")),
            overview=_coerce_str(data.get("overview")),
            year=_coerce_str(data.get("year"), YEAR_PLACEHOLDER),
            runtime=_coerce_int(data.get("runtime")),
            poster=_coerce_optional_str(data.get("poster")),
        )


def validate_rating(rating: Any) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValueError(f"Rating must be an integer, got {rating!r}")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
    return rating


@dataclass(frozen=True)
class Favorite:
    """
    A user-curated movie kept in local storage.

    Carries every `MovieDetail` field plus the user's `rating` (1-5) and `note`.
    """

    id: int
    title: str
    overview: str = ""
    year: str = YEAR_PLACEHOLDER
    runtime: int | None = None
    poster: str | None = None
    rating: int = DEFAULT_RATING
    note: str = ""

    def __post_init__(self) -> None:
        validate_rating(self.rating)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_detail(cls, detail: MovieDetail) -> "Favorite":
        return cls(
            id=detail.id,
            title=detail.title,
            overview=detail.overview,
            year=detail.year,
            runtime=detail.runtime,
            poster=detail.poster,
        )

    @classmethod
    def from_result(cls, result: SearchResult) -> "Favorite":
        # Runtime is unknown until the detail view is fetched.
        return cls(
            id=result.id,
            title=result.title,
            overview=result.overview,
            year=result.year,
            runtime=None,
            poster=result.poster,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Favorite":
        movie_id = _coerce_int(data.get("id"))
        if movie_id is None:
            raise ValueError(f"Favorite has no integer id: {data.get('id')!r}")
        rating = data.get("rating", DEFAULT_RATING)
        return cls(
            id=movie_id,
            title=_coerce_str(data.get("title")),
            overview=_coerce_str(data.get("overview")),
            year=_coerce_str(data.get("year"), YEAR_PLACEHOLDER),
            runtime=_coerce_int(data.get("runtime")),
            poster=_coerce_optional_str(data.get("poster")),
            rating=validate_rating(rating),
            note=_coerce_str(data.get("note")),
        )
