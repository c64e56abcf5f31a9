from dataclasses import dataclass
import logging

import numpy as np
from scipy.sparse import csr_matrix

from .catalog import Catalog, Movie
from .filters import RecommendationFilters, apply_filters, matches_filters, search_movies, validate_limit
from .similarity import build_reason, content_breakdown, content_similarity, pearson_similarity
from .weights import TERMS, SimilarityWeights
from .config import (
    DEFAULT_GENRE_LIMIT,
    DEFAULT_LIMIT,
    HYBRID_CANDIDATE_MULTIPLIER,
    HYBRID_COLLAB_WEIGHT,
    HYBRID_CONTENT_WEIGHT,
    HYBRID_REASON_SEPARATOR,
    MIN_USER_SIMILARITY,
    MOVIE_RATING_SCALE,
)

logger = logging.getLogger(__name__)

__all__ = [
    "RecommendationResult",
    "ContentRecommender",
    "CollaborativeRecommender",
    "HybridRecommender",
    "fuse_results",
    "content_based_recommendations",
    "collaborative_recommendations",
    "hybrid_recommendations",
    "genre_based_recommendations",
    "search_movies",
]


@dataclass
class RecommendationResult:
    movie: Movie
    score: float
    reason: str


def _rank_key(item: tuple[Movie, float]) -> tuple[float, int]:
    # Score descending, movie id ascending for reproducible ties
    movie, score = item
    return (-score, movie.id)


class ContentRecommender:
    """
    Score movies by attribute similarity to a target movie.
    No embeddings, just weighted feature matching.
    """

    def __init__(self, catalog: Catalog, weights: SimilarityWeights | None = None):
        self.catalog = catalog
        self.weights = weights or SimilarityWeights()

    def recommend(
        self,
        movie_id: int,
        limit: int = DEFAULT_LIMIT,
        filters: RecommendationFilters | None = None,
        min_similarity: float | None = None,
    ) -> list[RecommendationResult]:
        """
        Rank every other movie by similarity to ``movie_id``.

        Filters narrow the candidate set before scoring. ``min_similarity``
        drops candidates scoring at or below it; by default nothing is cut.
        """
        validate_limit(limit)
        target = self.catalog.find_by_id(movie_id)
        if target is None:
            logger.debug(f"Content recommendations: unknown movie id {movie_id}")
            return []

        candidates = [m for m in apply_filters(self.catalog.all(), filters) if m.id != target.id]

        scored: list[tuple[Movie, float]] = []
        for movie in candidates:
            score = content_similarity(target, movie, self.weights)
            if min_similarity is not None and score <= min_similarity:
                continue
            scored.append((movie, score))

        scored.sort(key=_rank_key)
        logger.debug(f"Scored {len(scored)}/{len(candidates)} candidates against '{target.title}'")

        return [
            RecommendationResult(movie=movie, score=score, reason=build_reason(target, movie))
            for movie, score in scored[:limit]
        ]

    def explain(self, movie_id: int, candidate_id: int) -> dict[str, float]:
        """Weighted contribution of each similarity term, empty for unknown ids."""
        target = self.catalog.find_by_id(movie_id)
        candidate = self.catalog.find_by_id(candidate_id)
        if target is None or candidate is None:
            return {}
        terms = content_breakdown(target, candidate)
        return {term: terms[term] * getattr(self.weights, term) for term in TERMS}


class CollaborativeRecommender:
    """
    Collaborative filtering recommender.
    Finds users with similar taste and recommends movies they rated.

    Ratings are held in a sparse user x movie matrix built once from the
    catalog snapshot.
    """

    def __init__(self, catalog: Catalog, min_user_similarity: float = MIN_USER_SIMILARITY):
        self.catalog = catalog
        self.min_user_similarity = min_user_similarity

        self._user_ids: list[int] = []
        self._user_index: dict[int, int] = {}
        self._movie_ids: np.ndarray = np.array([], dtype=np.int64)
        self._user_matrix: csr_matrix | None = None

        self._build_sparse_matrix()

    def _build_sparse_matrix(self):
        """
        Build the sparse user-movie rating matrix and its index mappings.

        Rows are users (ascending id), columns are movies (ascending id).
        Ratings are on a 1-5 scale, so a stored zero never means "rated".
        """
        ratings = self.catalog.ratings
        self._user_ids = sorted({r.user_id for r in ratings})
        self._user_index = {user_id: idx for idx, user_id in enumerate(self._user_ids)}

        movie_ids = sorted({r.movie_id for r in ratings})
        movie_index = {movie_id: idx for idx, movie_id in enumerate(movie_ids)}
        self._movie_ids = np.array(movie_ids, dtype=np.int64)

        rows = [self._user_index[r.user_id] for r in ratings]
        cols = [movie_index[r.movie_id] for r in ratings]
        data = [r.rating for r in ratings]

        shape = (len(self._user_ids), len(movie_ids))
        if rows:
            self._user_matrix = csr_matrix((data, (rows, cols)), shape=shape, dtype=np.float64)
            self._user_matrix.sort_indices()
        else:
            self._user_matrix = csr_matrix(shape, dtype=np.float64)

        logger.debug(
            f"Built sparse user-movie matrix: {len(self._user_ids)} users x "
            f"{len(movie_ids)} movies, {self._user_matrix.nnz} ratings"
        )

    def _ratings_for(self, user_id: int) -> dict[int, float]:
        """Movie id -> rating for one user, empty when the user has no ratings."""
        idx = self._user_index.get(user_id)
        if idx is None:
            return {}
        start, end = self._user_matrix.indptr[idx], self._user_matrix.indptr[idx + 1]
        cols = self._user_matrix.indices[start:end]
        values = self._user_matrix.data[start:end]
        return {int(self._movie_ids[c]): float(v) for c, v in zip(cols, values)}

    def user_similarity(self, user_a: int, user_b: int) -> float:
        """Clamped Pearson correlation between two users' ratings."""
        return pearson_similarity(self._ratings_for(user_a), self._ratings_for(user_b))

    def similar_users(self, user_id: int) -> list[tuple[int, float]]:
        """
        Users whose similarity to ``user_id`` exceeds the minimum threshold.

        Returns:
            List of (user_id, similarity) tuples, most similar first
        """
        if user_id not in self._user_index:
            return []

        neighbors = []
        for other_id in self._user_ids:
            if other_id == user_id:
                continue
            similarity = self.user_similarity(user_id, other_id)
            if similarity > self.min_user_similarity:
                neighbors.append((other_id, similarity))

        neighbors.sort(key=lambda x: (-x[1], x[0]))
        return neighbors

    def recommend(
        self,
        user_id: int,
        limit: int = DEFAULT_LIMIT,
        filters: RecommendationFilters | None = None,
    ) -> list[RecommendationResult]:
        """Generate collaborative recommendations for movies the user has not rated."""
        validate_limit(limit)

        seen = self._ratings_for(user_id)
        if not seen:
            logger.debug(f"Collaborative recommendations: user {user_id} has no ratings")
            return []

        neighbors = self.similar_users(user_id)
        if not neighbors:
            logger.debug(f"Collaborative recommendations: no similar users for user {user_id}")
            return []

        totals: dict[int, float] = {}
        counts: dict[int, int] = {}
        best_match: dict[int, float] = {}

        for neighbor_id, similarity in neighbors:
            for movie_id, rating in self._ratings_for(neighbor_id).items():
                if movie_id in seen:
                    continue
                movie = self.catalog.find_by_id(movie_id)
                if movie is None or not matches_filters(movie, filters):
                    continue

                totals[movie_id] = totals.get(movie_id, 0.0) + rating * similarity
                counts[movie_id] = counts.get(movie_id, 0) + 1
                # Neighbors arrive most similar first
                best_match.setdefault(movie_id, similarity)

        scored = [
            (self.catalog.find_by_id(movie_id), totals[movie_id] / counts[movie_id])
            for movie_id in totals
        ]
        scored.sort(key=_rank_key)

        return [
            RecommendationResult(
                movie=movie,
                score=score,
                reason=f"users with similar taste enjoyed this ({best_match[movie.id]:.0%} match)",
            )
            for movie, score in scored[:limit]
        ]


def fuse_results(
    content_results: list[RecommendationResult],
    collab_results: list[RecommendationResult],
    weight_content: float = HYBRID_CONTENT_WEIGHT,
    weight_collab: float = HYBRID_COLLAB_WEIGHT,
    exclude: set[int] | None = None,
) -> list[RecommendationResult]:
    """
    Weighted score fusion keyed by movie id.

    Scores are weighted as-is (no normalization). A movie present in both
    lists gets the sum of its weighted scores and both labeled reasons,
    content first.
    """
    exclude = exclude or set()
    movies: dict[int, Movie] = {}
    fused: dict[int, float] = {}
    reasons: dict[int, list[str]] = {}

    for results, weight, label in (
        (content_results, weight_content, "Content"),
        (collab_results, weight_collab, "Collaborative"),
    ):
        for r in results:
            movie_id = r.movie.id
            if movie_id in exclude:
                continue
            movies[movie_id] = r.movie
            fused[movie_id] = fused.get(movie_id, 0.0) + r.score * weight
            reasons.setdefault(movie_id, []).append(f"{label}: {r.reason}")

    ranked = sorted(fused.items(), key=lambda x: (-x[1], x[0]))
    return [
        RecommendationResult(
            movie=movies[movie_id],
            score=score,
            reason=HYBRID_REASON_SEPARATOR.join(reasons[movie_id]),
        )
        for movie_id, score in ranked
    ]


class HybridRecommender:
    """Blend content-based and collaborative results for a movie/user pair."""

    def __init__(
        self,
        catalog: Catalog,
        content: ContentRecommender | None = None,
        collaborative: CollaborativeRecommender | None = None,
        weight_content: float = HYBRID_CONTENT_WEIGHT,
        weight_collab: float = HYBRID_COLLAB_WEIGHT,
    ):
        self.catalog = catalog
        self.content = content or ContentRecommender(catalog)
        self.collaborative = collaborative or CollaborativeRecommender(catalog)
        self.weight_content = weight_content
        self.weight_collab = weight_collab

    def recommend(
        self,
        movie_id: int,
        user_id: int,
        limit: int = DEFAULT_LIMIT,
        filters: RecommendationFilters | None = None,
    ) -> list[RecommendationResult]:
        validate_limit(limit)
        if self.catalog.find_by_id(movie_id) is None:
            logger.debug(f"Hybrid recommendations: unknown movie id {movie_id}")
            return []

        pool = limit * HYBRID_CANDIDATE_MULTIPLIER
        content_results = self.content.recommend(movie_id, pool, filters)
        collab_results = self.collaborative.recommend(user_id, pool, filters)

        logger.debug(
            f"Hybrid fusion: {len(content_results)} content + {len(collab_results)} collaborative candidates"
        )

        fused = fuse_results(
            content_results,
            collab_results,
            weight_content=self.weight_content,
            weight_collab=self.weight_collab,
            exclude={movie_id},
        )
        return fused[:limit]


def genre_based_recommendations(
    catalog: Catalog,
    genre: str,
    limit: int = DEFAULT_GENRE_LIMIT,
    filters: RecommendationFilters | None = None,
) -> list[RecommendationResult]:
    """Highest-rated movies tagged exactly with ``genre``, scored as rating / 10."""
    validate_limit(limit)
    tagged = [m for m in catalog.all() if genre in m.genres]
    ranked = sorted(apply_filters(tagged, filters), key=lambda m: (-m.rating, m.id))

    return [
        RecommendationResult(
            movie=movie,
            score=movie.rating / MOVIE_RATING_SCALE,
            reason=f"top-rated {genre} ({movie.rating:.1f}/10)",
        )
        for movie in ranked[:limit]
    ]


def content_based_recommendations(
    catalog: Catalog,
    movie_id: int,
    limit: int = DEFAULT_LIMIT,
    filters: RecommendationFilters | None = None,
    min_similarity: float | None = None,
    weights: SimilarityWeights | None = None,
) -> list[RecommendationResult]:
    return ContentRecommender(catalog, weights).recommend(movie_id, limit, filters, min_similarity)


def collaborative_recommendations(
    catalog: Catalog,
    user_id: int,
    limit: int = DEFAULT_LIMIT,
    filters: RecommendationFilters | None = None,
) -> list[RecommendationResult]:
    return CollaborativeRecommender(catalog).recommend(user_id, limit, filters)


def hybrid_recommendations(
    catalog: Catalog,
    movie_id: int,
    user_id: int,
    limit: int = DEFAULT_LIMIT,
    filters: RecommendationFilters | None = None,
    weights: SimilarityWeights | None = None,
) -> list[RecommendationResult]:
    return HybridRecommender(catalog, content=ContentRecommender(catalog, weights)).recommend(
        movie_id, user_id, limit, filters
    )

