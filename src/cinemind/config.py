"""
Configuration constants for the CineMind recommendation engine.

This module centralizes all magic numbers and configurable parameters.
Numeric values can be overridden via CINEMIND_* environment variables.
"""
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def _get_float_env(key: str, default: float, min_val: float = 0) -> float:
    """Float override from the environment, clamped to min_val; bad values fall back to default."""
    try:
        val = float(os.environ.get(key, default))
        if val < min_val:
            logger.warning(f"{key}={val} is below minimum {min_val}, using {min_val}")
            return min_val
        return val
    except ValueError:
        logger.warning(f"Invalid {key}='{os.environ.get(key)}', using default {default}")
        return default


def _get_int_env(key: str, default: int, min_val: int = 1) -> int:
    """Integer counterpart of _get_float_env."""
    try:
        val = int(os.environ.get(key, default))
        if val < min_val:
            logger.warning(f"{key}={val} is below minimum {min_val}, using {min_val}")
            return min_val
        return val
    except ValueError:
        logger.warning(f"Invalid {key}='{os.environ.get(key)}', using default {default}")
        return default


# Data files
CATALOG_PATH = Path(os.environ["CINEMIND_CATALOG"]) if os.environ.get("CINEMIND_CATALOG") else None
SIMILARITY_WEIGHTS_PATH = Path(os.environ.get("CINEMIND_WEIGHTS", "data/similarity_weights.json"))

# Content similarity weights (sum to 1.0 so scores stay within [0, 1])
WEIGHTS = {
    'genre': 0.40,
    'director': 0.20,
    'cast': 0.20,      # Always summed, zero when no shared cast
    'year': 0.10,
    'rating': 0.10,
}

# Normalization windows
YEAR_WINDOW = _get_float_env("CINEMIND_YEAR_WINDOW", 10.0, min_val=1.0)  # Years until proximity reaches 0
RATING_SPAN = _get_float_env("CINEMIND_RATING_SPAN", 10.0, min_val=1.0)  # Full 0-10 rating scale

# Reason thresholds
ERA_WINDOW = 5  # Max year gap reported as "same era"
HIGHLY_RATED = 8.0
MAX_CAST_IN_REASON = 2
REASON_SEPARATOR = " • "
FALLBACK_REASON = "similar style"

# Content-based inclusion cutoff; only applied when a caller asks for it
SIMILARITY_INCLUSION_THRESHOLD = _get_float_env("CINEMIND_SIMILARITY_THRESHOLD", 0.1, min_val=0.0)

# Collaborative filtering
MIN_USER_SIMILARITY = _get_float_env("CINEMIND_MIN_USER_SIMILARITY", 0.1, min_val=0.0)
USER_RATING_MIN = 1.0
USER_RATING_MAX = 5.0

# Hybrid fusion
HYBRID_CONTENT_WEIGHT = 0.6
HYBRID_COLLAB_WEIGHT = 0.4
HYBRID_CANDIDATE_MULTIPLIER = 2  # Each source is asked for limit * this
HYBRID_REASON_SEPARATOR = " | "

# Result limits
DEFAULT_LIMIT = _get_int_env("CINEMIND_DEFAULT_LIMIT", 8, min_val=1)
DEFAULT_SEARCH_LIMIT = _get_int_env("CINEMIND_SEARCH_LIMIT", 12, min_val=1)
DEFAULT_GENRE_LIMIT = 12
DEFAULT_TOP_RATED_LIMIT = 8

# Scale of Movie.rating, used by genre-based scoring
MOVIE_RATING_SCALE = 10.0
