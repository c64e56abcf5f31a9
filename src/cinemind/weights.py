"""
Utilities for loading and applying content-similarity term weights.

Weights are stored per similarity term (genre, director, cast, year, rating)
and can be overridden from a JSON file. When no file is available, the
system falls back to the defaults in ``config.WEIGHTS``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import SIMILARITY_WEIGHTS_PATH, WEIGHTS

logger = logging.getLogger(__name__)

# Bound weights so a bad override can't dominate the score
MIN_WEIGHT = 0.0
MAX_WEIGHT = 1.0

TERMS = ("genre", "director", "cast", "year", "rating")


def _clamp_weight(value: float) -> float:
    return max(MIN_WEIGHT, min(MAX_WEIGHT, value))


@dataclass
class SimilarityWeights:
    """Container for per-term multipliers."""

    genre: float = WEIGHTS['genre']
    director: float = WEIGHTS['director']
    cast: float = WEIGHTS['cast']
    year: float = WEIGHTS['year']
    rating: float = WEIGHTS['rating']

    def __post_init__(self) -> None:
        for term in TERMS:
            raw = getattr(self, term)
            try:
                setattr(self, term, _clamp_weight(float(raw)))
            except (TypeError, ValueError):
                logger.warning("Invalid weight %r for %s, using default %s", raw, term, WEIGHTS[term])
                setattr(self, term, WEIGHTS[term])

    def to_dict(self) -> dict[str, float]:
        return {term: getattr(self, term) for term in TERMS}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "SimilarityWeights":
        values = {term: payload[term] for term in TERMS if term in payload}
        return cls(**values)


def load_similarity_weights(path: str | Path | None = None) -> SimilarityWeights:
    """Load weights from disk; fall back to defaults if missing or invalid."""
    weight_path = Path(path) if path else SIMILARITY_WEIGHTS_PATH
    if not weight_path.exists():
        logger.debug("Similarity weights file not found at %s; using defaults", weight_path)
        return SimilarityWeights()

    try:
        payload = json.loads(weight_path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Failed to load similarity weights from %s: %s", weight_path, exc)
        return SimilarityWeights()

    if not isinstance(payload, dict):
        logger.warning("Similarity weights in %s must be a JSON object; using defaults", weight_path)
        return SimilarityWeights()

    weights = SimilarityWeights.from_dict(payload)
    logger.info("Loaded similarity weights from %s", weight_path)
    return weights


def save_similarity_weights(weights: SimilarityWeights, path: str | Path | None = None) -> Path:
    """Persist weights to disk."""
    weight_path = Path(path) if path else SIMILARITY_WEIGHTS_PATH
    weight_path.parent.mkdir(parents=True, exist_ok=True)
    weight_path.write_text(json.dumps(weights.to_dict(), indent=2))
    return weight_path
