import argparse
import json
import logging
import sys
from pathlib import Path

from .catalog import Catalog, CatalogError, Movie, load_catalog
from .config import (
    CATALOG_PATH,
    DEFAULT_GENRE_LIMIT,
    DEFAULT_LIMIT,
    DEFAULT_SEARCH_LIMIT,
    DEFAULT_TOP_RATED_LIMIT,
    SIMILARITY_INCLUSION_THRESHOLD,
)
from .filters import RecommendationFilters, movies_by_genre, search_movies, top_rated
from .recommender import (
    CollaborativeRecommender,
    ContentRecommender,
    HybridRecommender,
    RecommendationResult,
    genre_based_recommendations,
)
from .sample_data import build_sample_catalog
from .weights import load_similarity_weights

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for --limit style arguments."""
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'")
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {parsed}")
    return parsed


def _load_catalog(args: argparse.Namespace) -> Catalog:
    """Catalog from --catalog, then CINEMIND_CATALOG, then the bundled sample."""
    path = getattr(args, 'catalog', None) or CATALOG_PATH
    if path:
        return load_catalog(path)
    logger.debug("No catalog file given; using bundled sample catalog")
    return build_sample_catalog()


def _filters_from_args(args: argparse.Namespace) -> RecommendationFilters | None:
    filters = RecommendationFilters(
        genre=getattr(args, 'genre_filter', None),
        year_from=getattr(args, 'year_from', None),
        year_to=getattr(args, 'year_to', None),
        min_rating=getattr(args, 'min_rating', None),
        director=getattr(args, 'director', None),
    )
    return None if filters.is_empty() else filters


def _movie_label(movie: Movie) -> str:
    return f"{movie.title} ({movie.year})"


def _output_recommendations(
    recs: list[RecommendationResult],
    args: argparse.Namespace,
    heading: str,
) -> None:
    """Format and log recommendations in the requested format."""
    output_format = getattr(args, 'format', 'text')

    if output_format == 'json':
        output = [
            {
                **r.movie.to_dict(),
                "score": round(r.score, 4),
                "reason": r.reason,
            }
            for r in recs
        ]
        logger.info(json.dumps(output, indent=2, ensure_ascii=False))
        return

    logger.info(f"\n{heading}:")
    for i, r in enumerate(recs, 1):
        logger.info(f"{i}. {_movie_label(r.movie)} - Score: {r.score:.2f}")
        logger.info(f"   Why: {r.reason}")


def _output_movies(movies: list[Movie], args: argparse.Namespace, heading: str) -> None:
    if getattr(args, 'format', 'text') == 'json':
        logger.info(json.dumps([m.to_dict() for m in movies], indent=2, ensure_ascii=False))
        return

    logger.info(f"\n{heading}:")
    for i, m in enumerate(movies, 1):
        logger.info(f"{i}. {_movie_label(m)} - {m.rating:.1f}/10 - {', '.join(m.genres)} - dir. {m.director}")


def cmd_similar(args: argparse.Namespace) -> None:
    """Find movies similar to a specific movie."""
    catalog = _load_catalog(args)
    target = catalog.find_by_id(args.movie_id)
    if target is None:
        logger.error(f"No movie found with id {args.movie_id}")
        return

    weights = load_similarity_weights(args.weights)
    recommender = ContentRecommender(catalog, weights)
    min_similarity = SIMILARITY_INCLUSION_THRESHOLD if args.threshold else args.min_similarity
    recs = recommender.recommend(args.movie_id, args.limit, _filters_from_args(args), min_similarity)

    if not recs:
        logger.warning(f"No similar movies found for '{target.title}'")
        return

    _output_recommendations(recs, args, f"Movies similar to {_movie_label(target)}")

    if args.explain and args.format == 'text':
        logger.info("\nScore breakdown:")
        for r in recs:
            contributions = recommender.explain(target.id, r.movie.id)
            parts = ", ".join(f"{term} {value:.2f}" for term, value in contributions.items())
            logger.info(f"  {r.movie.title}: {parts}")


def cmd_collaborative(args: argparse.Namespace) -> None:
    """Recommend movies liked by users with similar taste."""
    catalog = _load_catalog(args)
    recs = CollaborativeRecommender(catalog).recommend(args.user_id, args.limit, _filters_from_args(args))

    if not recs:
        logger.warning(f"No collaborative recommendations for user {args.user_id} (no ratings or no similar users)")
        return

    _output_recommendations(recs, args, f"Top {len(recs)} recommendations for user {args.user_id} (collaborative)")


def cmd_hybrid(args: argparse.Namespace) -> None:
    """Blend content-based and collaborative recommendations."""
    catalog = _load_catalog(args)
    target = catalog.find_by_id(args.movie_id)
    if target is None:
        logger.error(f"No movie found with id {args.movie_id}")
        return

    content = ContentRecommender(catalog, load_similarity_weights(args.weights))
    recommender = HybridRecommender(catalog, content=content)
    recs = recommender.recommend(args.movie_id, args.user_id, args.limit, _filters_from_args(args))

    if not recs:
        logger.warning("No hybrid recommendations found")
        return

    _output_recommendations(
        recs, args, f"Top {len(recs)} recommendations for user {args.user_id} from {_movie_label(target)} (hybrid)"
    )


def cmd_genre(args: argparse.Namespace) -> None:
    """Top-rated movies in a genre."""
    catalog = _load_catalog(args)
    recs = genre_based_recommendations(catalog, args.genre, args.limit, _filters_from_args(args))

    if not recs:
        near = movies_by_genre(catalog, args.genre)
        if near:
            needle = args.genre.lower()
            tags = sorted({g for m in near for g in m.genres if needle in g.lower()})
            logger.warning(f"No movies tagged exactly '{args.genre}'. Did you mean: {', '.join(tags)}?")
        else:
            known = ", ".join(catalog.genres())
            logger.warning(f"No movies found for genre '{args.genre}'. Known genres: {known}")
        return

    _output_recommendations(recs, args, f"Top {args.genre} movies")


def cmd_search(args: argparse.Namespace) -> None:
    """Free-text search over title, director, cast and genres."""
    catalog = _load_catalog(args)
    results = search_movies(catalog, args.query, args.limit)

    if not results:
        logger.warning(f"No movies match '{args.query}'")
        return

    _output_movies(results, args, f"Results for '{args.query}'")


def cmd_top(args: argparse.Namespace) -> None:
    """Highest-rated movies in the catalog."""
    catalog = _load_catalog(args)
    _output_movies(top_rated(catalog, args.limit), args, "Top rated")


def cmd_similar_users(args: argparse.Namespace) -> None:
    """List users whose ratings correlate with the given user."""
    catalog = _load_catalog(args)
    neighbors = CollaborativeRecommender(catalog).similar_users(args.user_id)[:args.limit]

    if not neighbors:
        logger.warning(f"No similar users found for user {args.user_id}")
        return

    if args.format == 'json':
        logger.info(json.dumps(
            [{"user_id": u, "similarity": round(s, 4)} for u, s in neighbors],
            indent=2,
        ))
        return

    logger.info(f"\nUsers similar to user {args.user_id}:")
    for i, (user_id, similarity) in enumerate(neighbors, 1):
        rated = len(catalog.ratings_by_user(user_id))
        logger.info(f"{i}. user {user_id} - {similarity:.0%} match ({rated} ratings)")


def cmd_genres(args: argparse.Namespace) -> None:
    """List the genre tags present in the catalog."""
    catalog = _load_catalog(args)
    for genre in catalog.genres():
        count = sum(1 for m in catalog.all() if genre in m.genres)
        logger.info(f"{genre} ({count})")


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--genre", dest="genre_filter", help="Only movies tagged with this genre")
    parser.add_argument("--year-from", type=int, help="Minimum release year (inclusive)")
    parser.add_argument("--year-to", type=int, help="Maximum release year (inclusive)")
    parser.add_argument("--min-rating", type=float, help="Minimum movie rating (0-10, inclusive)")
    parser.add_argument("--director", help="Only movies by this director (exact match)")


def _add_format_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--format", choices=['text', 'json'], default='text', help="Output format")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cinemind", description="CineMind movie recommendations")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--catalog", type=Path, help="Catalog JSON file (defaults to the bundled sample)")
    parser.add_argument("--weights", type=Path, help="JSON file overriding content similarity weights")
    subparsers = parser.add_subparsers(dest="command", required=True)

    similar_parser = subparsers.add_parser("similar", help="Movies similar to a movie (content-based)")
    similar_parser.add_argument("movie_id", type=int, help="Target movie id")
    similar_parser.add_argument("--limit", type=_positive_int, default=DEFAULT_LIMIT, help="Number of recommendations")
    similar_parser.add_argument("--min-similarity", type=float, help="Drop candidates scoring at or below this")
    similar_parser.add_argument("--threshold", action="store_true",
                                help=f"Apply the default inclusion threshold ({SIMILARITY_INCLUSION_THRESHOLD})")
    similar_parser.add_argument("--explain", action="store_true", help="Show per-term score breakdown")
    _add_filter_arguments(similar_parser)
    _add_format_argument(similar_parser)
    similar_parser.set_defaults(func=cmd_similar)

    collab_parser = subparsers.add_parser("collaborative", help="Recommendations from users with similar taste")
    collab_parser.add_argument("user_id", type=int, help="Target user id")
    collab_parser.add_argument("--limit", type=_positive_int, default=DEFAULT_LIMIT, help="Number of recommendations")
    _add_filter_arguments(collab_parser)
    _add_format_argument(collab_parser)
    collab_parser.set_defaults(func=cmd_collaborative)

    hybrid_parser = subparsers.add_parser("hybrid", help="Blend content-based and collaborative recommendations")
    hybrid_parser.add_argument("movie_id", type=int, help="Target movie id")
    hybrid_parser.add_argument("user_id", type=int, help="Target user id")
    hybrid_parser.add_argument("--limit", type=_positive_int, default=DEFAULT_LIMIT, help="Number of recommendations")
    _add_filter_arguments(hybrid_parser)
    _add_format_argument(hybrid_parser)
    hybrid_parser.set_defaults(func=cmd_hybrid)

    genre_parser = subparsers.add_parser("genre", help="Top-rated movies in a genre")
    genre_parser.add_argument("genre", help="Genre tag (exact match, e.g. 'Sci-Fi')")
    genre_parser.add_argument("--limit", type=_positive_int, default=DEFAULT_GENRE_LIMIT, help="Number of results")
    genre_parser.add_argument("--year-from", type=int, help="Minimum release year (inclusive)")
    genre_parser.add_argument("--year-to", type=int, help="Maximum release year (inclusive)")
    genre_parser.add_argument("--min-rating", type=float, help="Minimum movie rating (0-10, inclusive)")
    genre_parser.add_argument("--director", help="Only movies by this director (exact match)")
    _add_format_argument(genre_parser)
    genre_parser.set_defaults(func=cmd_genre)

    search_parser = subparsers.add_parser("search", help="Search by title, director, cast or genre")
    search_parser.add_argument("query", help="Case-insensitive search text")
    search_parser.add_argument("--limit", type=_positive_int, default=DEFAULT_SEARCH_LIMIT, help="Number of results")
    _add_format_argument(search_parser)
    search_parser.set_defaults(func=cmd_search)

    top_parser = subparsers.add_parser("top", help="Highest-rated movies")
    top_parser.add_argument("--limit", type=_positive_int, default=DEFAULT_TOP_RATED_LIMIT, help="Number of results")
    _add_format_argument(top_parser)
    top_parser.set_defaults(func=cmd_top)

    users_parser = subparsers.add_parser("similar-users", help="Users with similar taste")
    users_parser.add_argument("user_id", type=int, help="Target user id")
    users_parser.add_argument("--limit", type=_positive_int, default=10, help="Number of users")
    _add_format_argument(users_parser)
    users_parser.set_defaults(func=cmd_similar_users)

    genres_parser = subparsers.add_parser("genres", help="List genres in the catalog")
    genres_parser.set_defaults(func=cmd_genres)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging based on verbosity
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(message)s' if not args.verbose else '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        args.func(args)
    except CatalogError as e:
        logger.error(f"Catalog error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
