import importlib
import sys
from pathlib import Path

import pytest

# Ensure the package under test is importable without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from cinemind.catalog import Catalog, Movie, UserRating  # noqa: E402


def make_movie(
    movie_id: int,
    title: str | None = None,
    genres=("Drama",),
    director: str = "Director",
    cast=(),
    year: int = 2020,
    rating: float = 7.0,
):
    return Movie(
        id=movie_id,
        title=title or f"Movie {movie_id}",
        year=year,
        genres=tuple(genres),
        director=director,
        cast=tuple(cast),
        rating=rating,
        runtime=120,
    )


def make_ratings(rows):
    return [UserRating(user_id=u, movie_id=m, rating=float(r)) for u, m, r in rows]


@pytest.fixture
def fresh_config(monkeypatch):
    """
    Reload config after the test sets CINEMIND_* environment variables.
    """
    import cinemind.config as config

    yield lambda: importlib.reload(config)
    # Drop any overrides so later tests see the defaults again
    monkeypatch.undo()
    importlib.reload(config)


@pytest.fixture
def nolan_catalog():
    """Small catalog with two Nolan films and a few unrelated titles."""
    movies = [
        make_movie(1, "The Dark Knight", genres=("Action", "Crime", "Drama"),
                   director="Christopher Nolan", cast=("Christian Bale", "Heath Ledger", "Michael Caine"),
                   year=2008, rating=9.0),
        make_movie(2, "Interstellar", genres=("Adventure", "Drama", "Sci-Fi"),
                   director="Christopher Nolan", cast=("Matthew McConaughey", "Anne Hathaway", "Michael Caine"),
                   year=2014, rating=8.6),
        make_movie(3, "The Shawshank Redemption", genres=("Drama",),
                   director="Frank Darabont", cast=("Tim Robbins", "Morgan Freeman"),
                   year=1994, rating=9.3),
        make_movie(4, "The Godfather", genres=("Crime", "Drama"),
                   director="Francis Ford Coppola", cast=("Marlon Brando", "Al Pacino"),
                   year=1972, rating=9.2),
        make_movie(5, "La La Land", genres=("Comedy", "Drama", "Romance"),
                   director="Damien Chazelle", cast=("Ryan Gosling", "Emma Stone"),
                   year=2016, rating=8.0),
        make_movie(6, "Spirited Away", genres=("Animation", "Adventure", "Fantasy"),
                   director="Hayao Miyazaki", cast=("Rumi Hiiragi",),
                   year=2001, rating=8.6),
    ]
    ratings = make_ratings([
        # Users 1 and 2 agree closely; user 3 has the opposite taste
        (1, 1, 5), (1, 2, 4), (1, 3, 2),
        (2, 1, 5), (2, 2, 4), (2, 3, 1), (2, 4, 5), (2, 5, 3),
        (3, 1, 1), (3, 2, 2), (3, 3, 5), (3, 6, 5),
        (4, 1, 4), (4, 2, 4), (4, 3, 4), (4, 6, 2),
    ])
    return Catalog(movies, ratings)
