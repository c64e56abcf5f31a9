"""Bundled demo catalog used when no catalog file is supplied."""

from .catalog import Catalog, Movie, UserRating

_MOVIES = [
    Movie(
        id=1, title="Neon Dreams", year=2024, genres=("Sci-Fi", "Thriller"),
        director="Alex Chen", cast=("Emma Stone", "Oscar Isaac", "Tilda Swinton"),
        rating=8.7, votes=15200, runtime=142,
        description="In a cyberpunk future, a hacker discovers a conspiracy that threatens "
                    "the fabric of digital reality itself.",
    ),
    Movie(
        id=2, title="Shadow's Edge", year=2023, genres=("Action", "Thriller"),
        director="Maria Rodriguez", cast=("Idris Elba", "Charlize Theron", "John Boyega"),
        rating=8.2, votes=9800, runtime=118,
        description="A former assassin must protect a key witness while being hunted by his "
                    "former employers through the dark streets of Prague.",
    ),
    Movie(
        id=3, title="Quantum Realm", year=2024, genres=("Sci-Fi", "Adventure"),
        director="Christopher Nolan", cast=("Matthew McConaughey", "Anne Hathaway", "Michael Caine"),
        rating=9.1, votes=21400, runtime=165,
        description="When parallel dimensions begin colliding, a team of scientists races to "
                    "prevent the destruction of all realities.",
    ),
    Movie(
        id=4, title="The Last Guardian", year=2023, genres=("Fantasy", "Adventure"),
        director="Peter Jackson", cast=("Saoirse Ronan", "Benedict Cumberbatch", "Ian McKellen"),
        rating=8.9, votes=17300, runtime=156,
        description="In a world where magic is fading, the last remaining guardian must train "
                    "an unlikely hero to save their realm.",
    ),
    Movie(
        id=5, title="Ocean's Heart", year=2024, genres=("Romance", "Drama"),
        director="Greta Gerwig", cast=("Timothée Chalamet", "Zendaya", "Laura Dern"),
        rating=8.4, votes=11900, runtime=127,
        description="A marine biologist and a lighthouse keeper find love while working to "
                    "save a dying coral reef ecosystem.",
    ),
    Movie(
        id=6, title="Midnight Runner", year=2023, genres=("Action", "Thriller"),
        director="Denis Villeneuve", cast=("Ryan Gosling", "Ana de Armas", "Oscar Isaac"),
        rating=8.0, votes=8700, runtime=134,
        description="A courier with a dark past must deliver a mysterious package while "
                    "evading both law enforcement and criminal organizations.",
    ),
    Movie(
        id=7, title="The Dark Knight", year=2008, genres=("Action", "Crime", "Drama"),
        director="Christopher Nolan", cast=("Christian Bale", "Heath Ledger", "Aaron Eckhart", "Michael Caine"),
        rating=9.0, votes=2900000, runtime=152,
        description="Batman faces the Joker, a criminal mastermind who plunges Gotham into anarchy.",
    ),
    Movie(
        id=8, title="Interstellar", year=2014, genres=("Adventure", "Drama", "Sci-Fi"),
        director="Christopher Nolan", cast=("Matthew McConaughey", "Anne Hathaway", "Jessica Chastain", "Michael Caine"),
        rating=8.6, votes=2200000, runtime=169,
        description="Explorers travel through a wormhole in space to ensure humanity's survival.",
    ),
    Movie(
        id=9, title="The Shawshank Redemption", year=1994, genres=("Drama",),
        director="Frank Darabont", cast=("Tim Robbins", "Morgan Freeman", "Bob Gunton"),
        rating=9.3, votes=2900000, runtime=142,
        description="Two imprisoned men bond over years, finding redemption through acts of decency.",
    ),
    Movie(
        id=10, title="The Godfather", year=1972, genres=("Crime", "Drama"),
        director="Francis Ford Coppola", cast=("Marlon Brando", "Al Pacino", "James Caan"),
        rating=9.2, votes=2000000, runtime=175,
        description="The aging patriarch of a crime dynasty transfers control to his reluctant son.",
    ),
    Movie(
        id=11, title="Pulp Fiction", year=1994, genres=("Crime", "Drama"),
        director="Quentin Tarantino", cast=("John Travolta", "Uma Thurman", "Samuel L. Jackson"),
        rating=8.9, votes=2200000, runtime=154,
        description="The lives of two mob hitmen, a boxer and a pair of bandits intertwine.",
    ),
    Movie(
        id=12, title="Spirited Away", year=2001, genres=("Animation", "Adventure", "Fantasy"),
        director="Hayao Miyazaki", cast=("Rumi Hiiragi", "Miyu Irino", "Mari Natsuki"),
        rating=8.6, votes=850000, runtime=125,
        description="A girl wanders into a world ruled by gods, witches and spirits.",
    ),
    Movie(
        id=13, title="Parasite", year=2019, genres=("Drama", "Thriller"),
        director="Bong Joon Ho", cast=("Song Kang-ho", "Lee Sun-kyun", "Cho Yeo-jeong"),
        rating=8.5, votes=950000, runtime=132,
        description="Greed and class discrimination threaten a newly formed symbiotic relationship.",
    ),
    Movie(
        id=14, title="Arrival", year=2016, genres=("Drama", "Mystery", "Sci-Fi"),
        director="Denis Villeneuve", cast=("Amy Adams", "Jeremy Renner", "Forest Whitaker"),
        rating=7.9, votes=760000, runtime=116,
        description="A linguist works with the military to communicate with alien visitors.",
    ),
    Movie(
        id=15, title="Blade Runner 2049", year=2017, genres=("Action", "Drama", "Sci-Fi"),
        director="Denis Villeneuve", cast=("Ryan Gosling", "Harrison Ford", "Ana de Armas"),
        rating=8.0, votes=670000, runtime=164,
        description="A young blade runner unearths a secret that could plunge society into chaos.",
    ),
    Movie(
        id=16, title="La La Land", year=2016, genres=("Comedy", "Drama", "Romance"),
        director="Damien Chazelle", cast=("Ryan Gosling", "Emma Stone", "John Legend"),
        rating=8.0, votes=690000, runtime=128,
        description="A jazz pianist and an aspiring actress fall in love in Los Angeles.",
    ),
]

# (user_id, movie_id, rating on a 1-5 scale)
_RATINGS = [
    (1, 7, 5), (1, 8, 5), (1, 3, 4), (1, 9, 4), (1, 13, 3),
    (2, 7, 5), (2, 8, 4), (2, 3, 4), (2, 15, 5), (2, 14, 4), (2, 1, 4),
    (3, 7, 4), (3, 8, 5), (3, 9, 3), (3, 12, 5), (3, 4, 4),
    (4, 5, 5), (4, 16, 5), (4, 13, 4), (4, 7, 2), (4, 9, 4),
    (5, 10, 5), (5, 11, 5), (5, 7, 4), (5, 9, 5), (5, 2, 3),
    (6, 6, 4), (6, 15, 5), (6, 2, 4), (6, 1, 3), (6, 14, 4),
]


def build_sample_catalog() -> Catalog:
    """Return a fresh copy of the bundled demo catalog."""
    return Catalog(
        _MOVIES,
        [UserRating(user_id=u, movie_id=m, rating=float(r)) for u, m, r in _RATINGS],
    )
