"""
Similarity functions for content-based and collaborative scoring.

Content similarity is a weighted sum of five independent terms (genre,
director, cast, year, rating). User similarity is the Pearson correlation
over co-rated movies, clamped to non-negative values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping

import numpy as np

from .catalog import Movie
from .config import (
    ERA_WINDOW,
    FALLBACK_REASON,
    HIGHLY_RATED,
    MAX_CAST_IN_REASON,
    RATING_SPAN,
    REASON_SEPARATOR,
    YEAR_WINDOW,
)
from .weights import TERMS, SimilarityWeights

logger = logging.getLogger(__name__)


def overlap_ratio(a, b) -> float:
    """|a ∩ b| / max(|a|, |b|), 0 when both are empty."""
    set_a, set_b = set(a), set(b)
    denom = max(len(set_a), len(set_b))
    if denom == 0:
        return 0.0
    return len(set_a & set_b) / denom


def proximity(x: float, y: float, window: float) -> float:
    """Linear falloff from 1 (equal) to 0 (``window`` apart or more)."""
    if window <= 0:
        return 1.0 if x == y else 0.0
    return max(0.0, 1.0 - abs(x - y) / window)


def content_breakdown(a: Movie, b: Movie) -> dict[str, float]:
    """Unweighted similarity sub-terms, each in [0, 1]."""
    return {
        'genre': overlap_ratio(a.genres, b.genres),
        'director': 1.0 if a.director == b.director else 0.0,
        'cast': overlap_ratio(a.cast, b.cast),
        'year': proximity(a.year, b.year, YEAR_WINDOW),
        'rating': proximity(a.rating, b.rating, RATING_SPAN),
    }


def content_similarity(a: Movie, b: Movie, weights: SimilarityWeights | None = None) -> float:
    """Weighted content similarity between two movies."""
    weights = weights or SimilarityWeights()
    terms = content_breakdown(a, b)
    return sum(terms[term] * getattr(weights, term) for term in TERMS)


@dataclass(frozen=True)
class ReasonRule:
    """One explanation fragment, emitted when ``applies`` holds."""
    name: str
    applies: Callable[[Movie, Movie], bool]
    fragment: Callable[[Movie, Movie], str]


def _shared(target_values, candidate_values) -> list[str]:
    # Candidate order, matching how the candidate lists them
    target_set = set(target_values)
    return [v for v in candidate_values if v in target_set]


def _genre_fragment(target: Movie, candidate: Movie) -> str:
    shared = _shared(target.genres, candidate.genres)
    plural = "s" if len(shared) > 1 else ""
    return f"shares {', '.join(shared)} genre{plural}"


def _cast_fragment(target: Movie, candidate: Movie) -> str:
    shared = _shared(target.cast, candidate.cast)
    return f"stars {', '.join(shared[:MAX_CAST_IN_REASON])}"


REASON_RULES: list[ReasonRule] = [
    ReasonRule(
        name="genre",
        applies=lambda t, c: bool(_shared(t.genres, c.genres)),
        fragment=_genre_fragment,
    ),
    ReasonRule(
        name="director",
        applies=lambda t, c: t.director == c.director,
        fragment=lambda t, c: f"same director ({c.director})",
    ),
    ReasonRule(
        name="cast",
        applies=lambda t, c: bool(_shared(t.cast, c.cast)),
        fragment=_cast_fragment,
    ),
    ReasonRule(
        name="era",
        applies=lambda t, c: abs(t.year - c.year) <= ERA_WINDOW,
        fragment=lambda t, c: "from the same era",
    ),
    ReasonRule(
        name="highly_rated",
        applies=lambda t, c: c.rating >= HIGHLY_RATED,
        fragment=lambda t, c: "highly rated",
    ),
]


def reason_fragments(target: Movie, candidate: Movie, rules: list[ReasonRule] | None = None) -> list[str]:
    """Fragments of every rule that fires, in rule priority order."""
    return [
        rule.fragment(target, candidate)
        for rule in (REASON_RULES if rules is None else rules)
        if rule.applies(target, candidate)
    ]


def build_reason(target: Movie, candidate: Movie, rules: list[ReasonRule] | None = None) -> str:
    """Human-readable explanation of why ``candidate`` resembles ``target``."""
    fragments = reason_fragments(target, candidate, rules)
    return REASON_SEPARATOR.join(fragments) if fragments else FALLBACK_REASON


def pearson_similarity(ratings_a: Mapping[int, float], ratings_b: Mapping[int, float]) -> float:
    """
    Pearson correlation over movies rated by both users.

    Returns 0.0 when there is no overlap or either series has no variance,
    and clamps negative correlations to 0.0.
    """
    common = sorted(set(ratings_a) & set(ratings_b))
    if not common:
        return 0.0

    x = np.array([ratings_a[m] for m in common], dtype=np.float64)
    y = np.array([ratings_b[m] for m in common], dtype=np.float64)

    dx = x - x.mean()
    dy = y - y.mean()
    denom = np.sqrt(np.sum(dx * dx) * np.sum(dy * dy))
    if denom == 0:
        return 0.0

    corr = float(np.sum(dx * dy) / denom)
    # Guard tiny overshoot from floating-point error
    return min(1.0, max(0.0, corr))
