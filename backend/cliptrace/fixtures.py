"""Static data: the demo seed rows and the catalog's offline fallback list."""

from datetime import timedelta

# ---------- Seed (both storage backends) ----------

SEED_MOVIE = {
    "title": "John Wick",
    "year": 2014,
    "director": "Chad Stahelski",
    "genre": "Action, Thriller",
    "rating": "R",
    "imdb_rating": "7.4",
    "poster": "https://images.unsplash.com/photo-1489599032470-841ea88893b2?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=600",
    "description": "An ex-hit-man comes out of retirement to track down the gangsters that took everything from him.",
    "cast": [
        {"name": "Keanu Reeves", "character": "John Wick", "image": "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?ixlib=rb-4.0.3&auto=format&fit=crop&w=300&h=400"},
        {"name": "Bridget Moynahan", "character": "Helen", "image": "https://images.unsplash.com/photo-1494790108755-2616b612b786?ixlib=rb-4.0.3&auto=format&fit=crop&w=300&h=400"},
        {"name": "Ian McShane", "character": "Winston", "image": "https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?ixlib=rb-4.0.3&auto=format&fit=crop&w=300&h=400"},
    ],
    "platforms": [
        {"name": "Netflix", "type": "subscription", "available": True},
        {"name": "Prime Video", "type": "rental", "price": "Rent $3.99 | Buy $12.99", "available": True},
        {"name": "Hulu", "type": "subscription", "available": True},
    ],
}

SEED_SCENE = {
    "timestamp": "1:23:45 - 1:24:15",
    "description": "Continental Hotel Fight",
    "chapter": "Final Confrontation",
    "fingerprint": "sample_fingerprint_hash",
}

# (row, age); rows without a movie are left unlinked
SEED_HISTORY = [
    ({"file_name": "action_scene_clip.mp4", "confidence": "97.0", "linked": True}, timedelta(hours=2)),
    ({"file_name": "romantic_dialogue.mp4", "confidence": None, "linked": False}, timedelta(days=1)),
]

# ---------- Catalog ----------

MOCK_PLATFORMS = [
    {"name": "Netflix", "type": "subscription", "available": True},
    {"name": "Prime Video", "type": "rental", "price": "Rent $3.99 | Buy $12.99", "available": True},
    {"name": "Hulu", "type": "subscription", "available": True},
    {"name": "Disney+", "type": "subscription", "available": True},
    {"name": "HBO Max", "type": "subscription", "available": True},
    {"name": "Apple TV+", "type": "rental", "price": "Rent $4.99 | Buy $14.99", "available": True},
]

# platforms are attached by the catalog client at lookup time
FALLBACK_MOVIES = [
    {
        "id": 550,
        "title": "Fight Club",
        "year": 1999,
        "director": "David Fincher",
        "genre": "Drama",
        "rating": "R",
        "imdb_rating": "8.8",
        "poster": "https://image.tmdb.org/t/p/w500/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg",
        "description": "An insomniac office worker and a devil-may-care soap maker form an underground fight club that evolves into an anarchist organization.",
        "cast": [
            {"name": "Brad Pitt", "character": "Tyler Durden", "image": "https://image.tmdb.org/t/p/w185/cckcYc2v0yh1tc9QjRelptcOBko.jpg"},
            {"name": "Edward Norton", "character": "The Narrator", "image": "https://image.tmdb.org/t/p/w185/5XBzD5WuTyVQZeS4VI25z2moMeY.jpg"},
            {"name": "Helena Bonham Carter", "character": "Marla Singer", "image": "https://image.tmdb.org/t/p/w185/DDeITcCpnBd0CkAIRPhggy9bt5.jpg"},
        ],
    },
    {
        "id": 155,
        "title": "The Dark Knight",
        "year": 2008,
        "director": "Christopher Nolan",
        "genre": "Action, Crime, Drama",
        "rating": "PG-13",
        "imdb_rating": "9.0",
        "poster": "https://image.tmdb.org/t/p/w500/qJ2tW6WMUDux911r6m7haRef0WH.jpg",
        "description": "When the menace known as the Joker wreaks havoc and chaos on the people of Gotham, Batman must accept one of the greatest psychological and physical tests of his ability to fight injustice.",
        "cast": [
            {"name": "Christian Bale", "character": "Bruce Wayne / Batman", "image": "https://image.tmdb.org/t/p/w185/vecCuUwdcCwCzNqTAUhqnHktNte.jpg"},
            {"name": "Heath Ledger", "character": "The Joker", "image": "https://image.tmdb.org/t/p/w185/5Y9HnYYa9jF4NunY9lSgJGjSe8E.jpg"},
            {"name": "Aaron Eckhart", "character": "Harvey Dent / Two-Face", "image": "https://image.tmdb.org/t/p/w185/keMg4eNjgcSQP7xjBzOJx4CyEG.jpg"},
        ],
    },
    {
        "id": 13,
        "title": "Forrest Gump",
        "year": 1994,
        "director": "Robert Zemeckis",
        "genre": "Drama, Romance",
        "rating": "PG-13",
        "imdb_rating": "8.8",
        "poster": "https://image.tmdb.org/t/p/w500/arw2vcBveWOVZr6pxd9XTd1TdQa.jpg",
        "description": "The presidencies of Kennedy and Johnson, the Vietnam War, the Watergate scandal and other historical events unfold from the perspective of an Alabama man with an IQ of 75.",
        "cast": [
            {"name": "Tom Hanks", "character": "Forrest Gump", "image": "https://image.tmdb.org/t/p/w185/xndWFsBlClOJFRdhSt4NBwiPq2o.jpg"},
            {"name": "Robin Wright", "character": "Jenny Curran", "image": "https://image.tmdb.org/t/p/w185/sQsf6vWL73p2JmKlVjnMAmRYSdL.jpg"},
            {"name": "Gary Sinise", "character": "Lieutenant Dan Taylor", "image": "https://image.tmdb.org/t/p/w185/7ZhpoHwq3m0F3qslEvGKXPi6OhY.jpg"},
        ],
    },
    {
        "id": 122,
        "title": "The Lord of the Rings: The Return of the King",
        "year": 2003,
        "director": "Peter Jackson",
        "genre": "Adventure, Drama, Fantasy",
        "rating": "PG-13",
        "imdb_rating": "9.0",
        "poster": "https://image.tmdb.org/t/p/w500/rCzpDGLbOoPwLjy3OAm5NUPOTrC.jpg",
        "description": "Gandalf and Aragorn lead the World of Men against Sauron's army to draw his gaze from Frodo and Sam as they approach Mount Doom with the One Ring.",
        "cast": [
            {"name": "Elijah Wood", "character": "Frodo Baggins", "image": "https://image.tmdb.org/t/p/w185/7UKRbJBNG7mxBl2QQc5XsAh6F8B.jpg"},
            {"name": "Ian McKellen", "character": "Gandalf", "image": "https://image.tmdb.org/t/p/w185/coJJDqeHJSVU5cBBd7kJR3k9PFx.jpg"},
            {"name": "Viggo Mortensen", "character": "Aragorn", "image": "https://image.tmdb.org/t/p/w185/vH5gVSpHAMhDaFWfh0Q7BG61O1y.jpg"},
        ],
    },
    {
        "id": 680,
        "title": "Pulp Fiction",
        "year": 1994,
        "director": "Quentin Tarantino",
        "genre": "Crime, Drama",
        "rating": "R",
        "imdb_rating": "8.9",
        "poster": "https://image.tmdb.org/t/p/w500/d5iIlFn5s0ImszYzBPb8JPIfbXD.jpg",
        "description": "The lives of two mob hitmen, a boxer, a gangster and his wife intertwine in four tales of violence and redemption.",
        "cast": [
            {"name": "John Travolta", "character": "Vincent Vega", "image": "https://image.tmdb.org/t/p/w185/9GVufE87MMIrSn0CbJFLudkALdL.jpg"},
            {"name": "Uma Thurman", "character": "Mia Wallace", "image": "https://image.tmdb.org/t/p/w185/xuxgPXyv6KjUHIM8cZaxx4ry25L.jpg"},
            {"name": "Samuel L. Jackson", "character": "Jules Winnfield", "image": "https://image.tmdb.org/t/p/w185/AiAYAqwpM5xmiFrAIeQvUXDCVvo.jpg"},
        ],
    },
]
