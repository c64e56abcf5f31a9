import pytest

from cinemind import config
from cinemind.catalog import Catalog
from cinemind.filters import RecommendationFilters, matches_filters
from cinemind.recommender import (
    CollaborativeRecommender,
    ContentRecommender,
    HybridRecommender,
    RecommendationResult,
    collaborative_recommendations,
    content_based_recommendations,
    fuse_results,
    genre_based_recommendations,
    hybrid_recommendations,
)

from conftest import make_movie, make_ratings


def test_content_recommender_never_returns_target(nolan_catalog):
    recommender = ContentRecommender(nolan_catalog)
    for movie in nolan_catalog.all():
        recs = recommender.recommend(movie.id, limit=10)
        assert recs
        assert all(r.movie.id != movie.id for r in recs)


def test_content_recommender_ranks_same_director_first(nolan_catalog):
    recs = content_based_recommendations(nolan_catalog, 1, limit=3)

    assert recs[0].movie.title == "Interstellar"
    assert "same director" in recs[0].reason
    assert [r.score for r in recs] == sorted((r.score for r in recs), reverse=True)


def test_content_recommender_returns_full_ranking_without_threshold(nolan_catalog):
    recs = content_based_recommendations(nolan_catalog, 1, limit=10)

    assert len(recs) == len(nolan_catalog) - 1


def test_content_recommender_applies_explicit_threshold():
    catalog = Catalog([
        make_movie(1, genres=("Drama",), year=2020, rating=9.0),
        make_movie(2, genres=("Comedy",), director="Other", year=1950, rating=2.0),
        make_movie(3, genres=("Drama",), year=2019, rating=8.5),
    ])

    unfiltered = content_based_recommendations(catalog, 1, limit=5)
    cut = content_based_recommendations(catalog, 1, limit=5, min_similarity=config.SIMILARITY_INCLUSION_THRESHOLD)

    assert {r.movie.id for r in unfiltered} == {2, 3}
    assert [r.movie.id for r in cut] == [3]
    assert all(r.score > config.SIMILARITY_INCLUSION_THRESHOLD for r in cut)


def test_content_recommender_unknown_movie_returns_empty(nolan_catalog):
    assert content_based_recommendations(nolan_catalog, 999, limit=5) == []


def test_content_recommender_breaks_ties_by_movie_id():
    catalog = Catalog([
        make_movie(1, genres=("Drama",)),
        make_movie(5, genres=("Drama",)),
        make_movie(3, genres=("Drama",)),
    ])

    recs = content_based_recommendations(catalog, 1, limit=5)

    assert [r.movie.id for r in recs] == [3, 5]


@pytest.mark.parametrize("limit", [0, -1])
def test_recommenders_reject_non_positive_limit(nolan_catalog, limit):
    with pytest.raises(ValueError):
        content_based_recommendations(nolan_catalog, 1, limit=limit)
    with pytest.raises(ValueError):
        collaborative_recommendations(nolan_catalog, 1, limit=limit)
    with pytest.raises(ValueError):
        genre_based_recommendations(nolan_catalog, "Drama", limit=limit)


@pytest.mark.parametrize(
    "filters",
    [
        RecommendationFilters(genre="Drama"),
        RecommendationFilters(year_from=2000, year_to=2015),
        RecommendationFilters(min_rating=9.0),
        RecommendationFilters(director="Christopher Nolan"),
        RecommendationFilters(genre="Crime", min_rating=9.0, year_to=2010),
    ],
)
def test_every_recommender_honors_filters(nolan_catalog, filters):
    results = (
        content_based_recommendations(nolan_catalog, 3, limit=10, filters=filters)
        + collaborative_recommendations(nolan_catalog, 1, limit=10, filters=filters)
        + hybrid_recommendations(nolan_catalog, 3, 1, limit=10, filters=filters)
        + genre_based_recommendations(nolan_catalog, "Drama", limit=10, filters=filters)
    )

    assert results
    assert all(matches_filters(r.movie, filters) for r in results)


def test_explain_returns_weighted_terms(nolan_catalog):
    recommender = ContentRecommender(nolan_catalog)

    contributions = recommender.explain(1, 2)

    assert set(contributions) == {"genre", "director", "cast", "year", "rating"}
    assert contributions["director"] == pytest.approx(config.WEIGHTS["director"])
    assert sum(contributions.values()) == pytest.approx(
        content_based_recommendations(nolan_catalog, 1, limit=1)[0].score
    )
    assert recommender.explain(1, 999) == {}


def test_user_similarity_is_symmetric_and_clamped(nolan_catalog):
    collab = CollaborativeRecommender(nolan_catalog)

    user_ids = sorted(nolan_catalog.all_user_ids())
    for a in user_ids:
        for b in user_ids:
            sim = collab.user_similarity(a, b)
            assert sim == collab.user_similarity(b, a)
            assert 0.0 <= sim <= 1.0

    # User 3 rates in exactly the opposite order from user 1
    assert collab.user_similarity(1, 3) == 0.0


def test_similar_users_excludes_self_and_weak_matches(nolan_catalog):
    collab = CollaborativeRecommender(nolan_catalog)

    neighbors = collab.similar_users(1)

    assert [u for u, _ in neighbors] == [2]
    assert neighbors[0][1] > config.MIN_USER_SIMILARITY
    assert collab.similar_users(999) == []


def test_collaborative_surfaces_neighbor_ratings(nolan_catalog):
    recs = collaborative_recommendations(nolan_catalog, 1, limit=5)

    sim = CollaborativeRecommender(nolan_catalog).user_similarity(1, 2)
    assert [r.movie.id for r in recs] == [4, 5]
    assert recs[0].score == pytest.approx(5 * sim)
    assert recs[1].score == pytest.approx(3 * sim)
    assert "similar taste" in recs[0].reason
    assert f"{sim:.0%}" in recs[0].reason


def test_collaborative_averages_weighted_ratings_across_neighbors():
    catalog = Catalog(
        [make_movie(i) for i in range(1, 5)],
        make_ratings([
            (1, 1, 5), (1, 2, 1), (1, 3, 3),
            (2, 1, 5), (2, 2, 1), (2, 3, 3), (2, 4, 4),
            (3, 1, 4), (3, 2, 2), (3, 3, 3), (3, 4, 2),
        ]),
    )
    collab = CollaborativeRecommender(catalog)

    recs = collab.recommend(1, limit=5)

    sim_2 = collab.user_similarity(1, 2)
    sim_3 = collab.user_similarity(1, 3)
    assert [r.movie.id for r in recs] == [4]
    assert recs[0].score == pytest.approx((4 * sim_2 + 2 * sim_3) / 2)


def test_collaborative_user_without_ratings_gets_nothing(nolan_catalog):
    assert collaborative_recommendations(nolan_catalog, 42, limit=5) == []


def test_collaborative_skips_movies_missing_from_catalog():
    catalog = Catalog(
        [make_movie(1), make_movie(2)],
        make_ratings([(1, 1, 5), (1, 2, 1), (2, 1, 5), (2, 2, 1), (2, 77, 5)]),
    )

    assert collaborative_recommendations(catalog, 1, limit=5) == []


def test_hybrid_score_is_weighted_sum_of_sources(nolan_catalog):
    limit = 3
    pool = limit * config.HYBRID_CANDIDATE_MULTIPLIER
    content = {r.movie.id: r for r in ContentRecommender(nolan_catalog).recommend(1, pool)}
    collab = {r.movie.id: r for r in CollaborativeRecommender(nolan_catalog).recommend(1, pool)}

    recs = hybrid_recommendations(nolan_catalog, 1, 1, limit=limit)

    assert len(recs) == limit
    both = [r for r in recs if r.movie.id in content and r.movie.id in collab]
    assert both
    for r in both:
        expected = content[r.movie.id].score * 0.6 + collab[r.movie.id].score * 0.4
        assert r.score == pytest.approx(expected)
        assert r.reason.startswith("Content: ")
        assert config.HYBRID_REASON_SEPARATOR + "Collaborative: " in r.reason


def test_hybrid_without_collaborative_signal_uses_content_only(nolan_catalog):
    content = ContentRecommender(nolan_catalog).recommend(1, 6)

    recs = hybrid_recommendations(nolan_catalog, 1, 42, limit=3)

    assert [r.movie.id for r in recs] == [r.movie.id for r in content[:3]]
    for r, c in zip(recs, content):
        assert r.score == pytest.approx(c.score * config.HYBRID_CONTENT_WEIGHT)
        assert r.reason == f"Content: {c.reason}"


def test_hybrid_never_recommends_target_movie(nolan_catalog):
    # User 1 has not rated movie 4, but neighbor user 2 rated it highly
    recs = HybridRecommender(nolan_catalog).recommend(4, 1, limit=10)

    assert recs
    assert all(r.movie.id != 4 for r in recs)


def test_hybrid_unknown_movie_returns_empty(nolan_catalog):
    assert hybrid_recommendations(nolan_catalog, 999, 1, limit=5) == []


def test_fuse_results_labels_single_source_reasons():
    a, b = make_movie(1), make_movie(2)
    content = [RecommendationResult(movie=a, score=0.5, reason="shares Drama genre")]
    collab = [RecommendationResult(movie=b, score=4.0, reason="users with similar taste enjoyed this (90% match)")]

    fused = fuse_results(content, collab)

    assert [r.movie.id for r in fused] == [2, 1]
    assert fused[0].score == pytest.approx(1.6)
    assert fused[0].reason == "Collaborative: users with similar taste enjoyed this (90% match)"
    assert fused[1].score == pytest.approx(0.3)
    assert fused[1].reason == "Content: shares Drama genre"


def test_genre_recommendations_sorted_by_rating_with_floor(nolan_catalog):
    recs = genre_based_recommendations(
        nolan_catalog, "Drama", limit=10, filters=RecommendationFilters(min_rating=9.0)
    )

    assert [r.movie.title for r in recs] == ["The Shawshank Redemption", "The Godfather", "The Dark Knight"]
    assert all(r.movie.rating >= 9.0 for r in recs)
    for x, y in zip(recs, recs[1:]):
        assert x.movie.rating >= y.movie.rating
    assert recs[0].score == pytest.approx(0.93)
    assert recs[0].reason == "top-rated Drama (9.3/10)"


def test_genre_recommendations_require_exact_tag(nolan_catalog):
    assert genre_based_recommendations(nolan_catalog, "drama", limit=5) == []
    assert genre_based_recommendations(nolan_catalog, "Sci", limit=5) == []
    assert [r.movie.id for r in genre_based_recommendations(nolan_catalog, "Sci-Fi", limit=5)] == [2]


def test_collaborative_handles_catalog_without_ratings():
    catalog = Catalog([make_movie(1), make_movie(2)])
    collab = CollaborativeRecommender(catalog)

    assert collab.recommend(1, limit=5) == []
    assert collab.similar_users(1) == []
    assert hybrid_recommendations(catalog, 1, 1, limit=5)[0].movie.id == 2
