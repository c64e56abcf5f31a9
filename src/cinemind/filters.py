"""Predicate filtering, free-text search and browse listings over a catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Iterable

from .catalog import Catalog, Movie
from .config import DEFAULT_SEARCH_LIMIT, DEFAULT_TOP_RATED_LIMIT

logger = logging.getLogger(__name__)


@dataclass
class RecommendationFilters:
    """Optional constraints; ``None`` means no constraint."""
    genre: str | None = None
    year_from: int | None = None
    year_to: int | None = None
    min_rating: float | None = None
    director: str | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


def matches_filters(movie: Movie, filters: RecommendationFilters | None) -> bool:
    """True iff ``movie`` satisfies every present field of ``filters``."""
    if filters is None:
        return True
    if filters.genre is not None and filters.genre not in movie.genres:
        return False
    if filters.year_from is not None and movie.year < filters.year_from:
        return False
    if filters.year_to is not None and movie.year > filters.year_to:
        return False
    if filters.min_rating is not None and movie.rating < filters.min_rating:
        return False
    if filters.director is not None and movie.director != filters.director:
        return False
    return True


def apply_filters(movies: Iterable[Movie], filters: RecommendationFilters | None) -> list[Movie]:
    """Filter preserving input order."""
    if filters is None or filters.is_empty():
        return list(movies)
    return [m for m in movies if matches_filters(m, filters)]


def validate_limit(limit: int) -> int:
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    return limit


def search_movies(catalog: Catalog, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[Movie]:
    """
    Case-insensitive substring search over title, director, cast and genres.

    Results keep catalog order; there is no relevance ranking.
    """
    validate_limit(limit)
    if not query or not query.strip():
        return []
    needle = query.lower()

    results = []
    for movie in catalog.all():
        if (
            needle in movie.title.lower()
            or needle in movie.director.lower()
            or any(needle in actor.lower() for actor in movie.cast)
            or any(needle in genre.lower() for genre in movie.genres)
        ):
            results.append(movie)
            if len(results) >= limit:
                break

    logger.debug(f"Search '{query}' matched {len(results)} movies")
    return results


def movies_by_genre(catalog: Catalog, genre: str) -> list[Movie]:
    """Browse shortcut: movies with a genre tag containing ``genre`` (case-insensitive)."""
    needle = genre.strip().lower()
    if not needle:
        return []
    return [m for m in catalog.all() if any(needle in g.lower() for g in m.genres)]


def top_rated(catalog: Catalog, limit: int = DEFAULT_TOP_RATED_LIMIT) -> list[Movie]:
    """Highest-rated movies, movie id breaking ties."""
    validate_limit(limit)
    return sorted(catalog.all(), key=lambda m: (-m.rating, m.id))[:limit]
