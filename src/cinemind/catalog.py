"""
In-memory movie catalog and user ratings.

The catalog is a read-only snapshot: movies and ratings are validated once
at construction and never mutated afterwards, so every recommender can share
the same instance.
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from .config import USER_RATING_MAX, USER_RATING_MIN

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when catalog data is missing or violates catalog invariants."""


@dataclass(frozen=True)
class Movie:
    id: int
    title: str
    year: int
    genres: tuple[str, ...]
    director: str
    cast: tuple[str, ...]
    rating: float
    runtime: int
    description: str = ""
    votes: int | None = None
    poster: str | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Movie":
        if not isinstance(payload, dict):
            raise CatalogError(f"Movie entry must be an object, got {payload!r}")
        try:
            return cls(
                id=int(payload['id']),
                title=str(payload['title']),
                year=int(payload['year']),
                genres=tuple(load_json(payload.get('genres', payload.get('genre')))),
                director=str(payload['director']),
                cast=tuple(load_json(payload.get('cast'))),
                rating=float(payload['rating']),
                runtime=int(payload.get('runtime') or 0),
                description=payload.get('description') or "",
                votes=int(payload['votes']) if payload.get('votes') is not None else None,
                poster=payload.get('poster'),
            )
        except KeyError as e:
            raise CatalogError(f"Movie entry missing required field {e}: {payload!r}") from e
        except (TypeError, ValueError) as e:
            raise CatalogError(f"Invalid movie entry {payload.get('id')!r}: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "year": self.year,
            "genres": list(self.genres),
            "director": self.director,
            "cast": list(self.cast),
            "rating": self.rating,
            "votes": self.votes,
            "runtime": self.runtime,
            "description": self.description,
            "poster": self.poster,
        }


@dataclass(frozen=True)
class UserRating:
    user_id: int
    movie_id: int
    rating: float

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "UserRating":
        if not isinstance(payload, dict):
            raise CatalogError(f"Rating entry must be an object, got {payload!r}")
        try:
            return cls(
                user_id=int(payload.get('user_id', payload.get('userId'))),
                movie_id=int(payload.get('movie_id', payload.get('movieId'))),
                rating=float(payload['rating']),
            )
        except KeyError as e:
            raise CatalogError(f"Rating entry missing required field {e}: {payload!r}") from e
        except (TypeError, ValueError) as e:
            raise CatalogError(f"Invalid rating entry {payload!r}: {e}") from e


def load_json(val):
    """Parse a list field that may arrive JSON-encoded."""
    if not val:
        return []
    if isinstance(val, (list, tuple)):
        return list(val)
    try:
        parsed = json.loads(val)
    except json.JSONDecodeError:
        # Plain string such as "Drama" or "Tom Hanks"
        return [val]
    except TypeError as e:
        logger.warning(f"Failed to parse JSON '{str(val)[:50]}...': {e}")
        return []
    return parsed if isinstance(parsed, list) else [parsed]


class Catalog:
    """
    Fixed collection of movies and user ratings.

    Provides lookup primitives only; authoring the catalog is the caller's
    concern.
    """

    def __init__(self, movies: Iterable[Movie], ratings: Iterable[UserRating] = ()):
        self._movies = tuple(movies)
        self._by_id: dict[int, Movie] = {}
        for movie in self._movies:
            if movie.id in self._by_id:
                raise CatalogError(f"Duplicate movie id {movie.id} ({movie.title!r})")
            if not movie.genres:
                raise CatalogError(f"Movie {movie.id} ({movie.title!r}) has no genres")
            self._by_id[movie.id] = movie

        self._ratings = tuple(ratings)
        self._ratings_by_user: dict[int, list[UserRating]] = defaultdict(list)
        for r in self._ratings:
            if not USER_RATING_MIN <= r.rating <= USER_RATING_MAX:
                raise CatalogError(
                    f"Rating {r.rating} by user {r.user_id} for movie {r.movie_id} "
                    f"is outside {USER_RATING_MIN:g}-{USER_RATING_MAX:g}"
                )
            self._ratings_by_user[r.user_id].append(r)

        logger.debug(f"Loaded catalog: {len(self._movies)} movies, {len(self._ratings)} ratings")

    def __len__(self) -> int:
        return len(self._movies)

    def __contains__(self, movie_id: object) -> bool:
        return movie_id in self._by_id

    def find_by_id(self, movie_id: int) -> Movie | None:
        return self._by_id.get(movie_id)

    def all(self) -> tuple[Movie, ...]:
        return self._movies

    @property
    def ratings(self) -> tuple[UserRating, ...]:
        return self._ratings

    def ratings_by_user(self, user_id: int) -> list[UserRating]:
        return list(self._ratings_by_user.get(user_id, ()))

    def all_user_ids(self) -> set[int]:
        return set(self._ratings_by_user)

    def genres(self) -> list[str]:
        """Distinct genre tags in first-seen order."""
        return list(dict.fromkeys(g for movie in self._movies for g in movie.genres))

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Catalog":
        if not isinstance(payload, dict) or 'movies' not in payload:
            raise CatalogError("Catalog JSON must be an object with a 'movies' list")
        raw_movies = payload['movies']
        raw_ratings = payload.get('ratings') or []
        if not isinstance(raw_movies, list):
            raise CatalogError("Catalog 'movies' must be a list")
        if not isinstance(raw_ratings, list):
            raise CatalogError("Catalog 'ratings' must be a list")
        movies = [Movie.from_dict(m) for m in raw_movies]
        ratings = [UserRating.from_dict(r) for r in raw_ratings]
        return cls(movies, ratings)


def load_catalog(path: str | Path) -> Catalog:
    """Load a catalog snapshot from a JSON file."""
    catalog_path = Path(path)
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found: {catalog_path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid catalog JSON in {catalog_path}: {e}") from e

    catalog = Catalog.from_dict(payload)
    logger.info(f"Loaded {len(catalog)} movies from {catalog_path}")
    return catalog
