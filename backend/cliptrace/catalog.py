"""TMDB catalog client with an offline fallback list.

Callers never see upstream failures: every public method either returns
normalized data from TMDB or falls back to ``fixtures.FALLBACK_MOVIES``
(``get_movie_by_id`` returns ``None`` instead).
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import requests

from . import schemas
from .errors import UpstreamServiceError
from .fixtures import FALLBACK_MOVIES, MOCK_PLATFORMS

logger = logging.getLogger(__name__)

TMDB_BASE = "https://api.themoviedb.org/3"
POSTER_BASE = "https://image.tmdb.org/t/p/w500"
PROFILE_BASE = "https://image.tmdb.org/t/p/w185"
PLACEHOLDER_PROFILE = "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?ixlib=rb-4.0.3&auto=format&fit=crop&w=300&h=400"

SEARCH_LIMIT = 10
POPULAR_LIMIT = 20
CAST_LIMIT = 10
LONG_RUNTIME_MINUTES = 120


class MovieCatalog:
    def __init__(
        self,
        api_key: Optional[str],
        rng: Optional[random.Random] = None,
        session: Optional[requests.Session] = None,
        language: str = "en-US",
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.enabled = bool(api_key)
        self.rng = rng or random.Random()
        self.session = session or requests.Session()
        self.language = language
        self.timeout = timeout

        if not self.enabled:
            logger.warning(
                "TMDB_API_KEY not set; catalog lookups will use the built-in fallback movies."
            )

    # ---------- HTTP ----------

    def _fetch(self, endpoint: str, **params) -> dict:
        if not self.enabled:
            raise UpstreamServiceError("TMDB service is disabled")

        params.update({"api_key": self.api_key, "language": self.language})
        url = f"{TMDB_BASE}{endpoint}"
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("TMDB request to %s failed: %s", endpoint, exc)
            raise UpstreamServiceError(f"TMDB request failed: {endpoint}") from exc

    # ---------- Public API ----------

    def search_movies(self, query: str) -> list[schemas.Movie]:
        try:
            data = self._fetch("/search/movie", query=query, include_adult=False, page=1)
            return self._transform_results(data, SEARCH_LIMIT)
        except Exception as exc:
            logger.error("Search for %r fell back to built-in movies: %s", query, exc)
            needle = query.lower()
            return [m for m in self.fallback_movies() if needle in m.title.lower()]

    def get_popular_movies(self) -> list[schemas.Movie]:
        try:
            data = self._fetch("/movie/popular", page=1)
            return self._transform_results(data, POPULAR_LIMIT)
        except Exception as exc:
            logger.error("Popular movies fell back to built-in movies: %s", exc)
            return self.fallback_movies()

    def get_movie_by_id(self, tmdb_id: int) -> Optional[schemas.Movie]:
        """Full details: movie and credits are fetched concurrently."""
        try:
            with ThreadPoolExecutor(max_workers=2) as pool:
                details = pool.submit(self._fetch, f"/movie/{tmdb_id}")
                credits = pool.submit(self._fetch, f"/movie/{tmdb_id}/credits")
                return self._transform_detailed_movie(details.result(), credits.result())
        except Exception as exc:
            logger.error("Could not load movie %s from TMDB: %s", tmdb_id, exc)
            return None

    def get_random_popular_movie(self) -> Optional[schemas.Movie]:
        try:
            movies = self.get_popular_movies()
            if not movies:
                raise UpstreamServiceError("TMDB returned no popular movies")
            picked = self.rng.choice(movies)
            detailed = self.get_movie_by_id(picked.id)
            if detailed is None:
                raise UpstreamServiceError(f"No details for movie {picked.id}")
            return detailed
        except Exception as exc:
            logger.info("Using a fallback movie for the random pick (%s)", exc)
            fallback = self.fallback_movies()
            if not fallback:
                return None
            return self.rng.choice(fallback)

    def fallback_movies(self) -> list[schemas.Movie]:
        return [
            schemas.Movie(**m, platforms=self.mock_platforms())
            for m in FALLBACK_MOVIES
        ]

    def mock_platforms(self) -> list[schemas.Platform]:
        """2-4 random streaming platforms; there is no real availability source."""
        count = self.rng.randint(2, 4)
        return [schemas.Platform(**p) for p in self.rng.sample(MOCK_PLATFORMS, count)]

    # ---------- Normalization ----------

    def _transform_results(self, data: dict, limit: int) -> list[schemas.Movie]:
        # malformed rows raise here and send the caller down its fallback path
        results = data["results"]
        if not isinstance(results, list):
            raise UpstreamServiceError("Malformed TMDB listing")
        return [self._transform_movie(m) for m in results[:limit]]

    def _transform_movie(self, m: dict) -> schemas.Movie:
        return schemas.Movie(
            id=m["id"],
            title=m.get("title") or m.get("name") or "Untitled",
            year=_release_year(m.get("release_date")),
            director="Unknown",
            genre="Unknown",
            rating=derive_rating(m.get("adult", False), None),
            imdb_rating=_format_vote(m.get("vote_average")),
            poster=_poster_url(m.get("poster_path")),
            description=m.get("overview"),
            cast=[],
            platforms=self.mock_platforms(),
        )

    def _transform_detailed_movie(self, m: dict, credits: dict) -> schemas.Movie:
        director = next(
            (c.get("name") for c in credits.get("crew", []) or [] if c.get("job") == "Director"),
            None,
        ) or "Unknown"
        genre = ", ".join(g["name"] for g in m.get("genres", []) or []) or "Unknown"

        cast = []
        for actor in (credits.get("cast", []) or [])[:CAST_LIMIT]:
            profile = actor.get("profile_path")
            cast.append(schemas.CastMember(
                name=actor.get("name") or "",
                character=actor.get("character") or "",
                image=f"{PROFILE_BASE}{profile}" if profile else PLACEHOLDER_PROFILE,
            ))

        return schemas.Movie(
            id=m["id"],
            title=m.get("title") or "Untitled",
            year=_release_year(m.get("release_date")),
            director=director,
            genre=genre,
            rating=derive_rating(m.get("adult", False), m.get("runtime")),
            imdb_rating=_format_vote(m.get("vote_average")),
            poster=_poster_url(m.get("poster_path")),
            description=m.get("overview"),
            cast=cast,
            platforms=self.mock_platforms(),
        )


def derive_rating(adult: bool, runtime: Optional[int]) -> str:
    """Heuristic only; TMDB does not give us a certification here."""
    if adult or (runtime and runtime > LONG_RUNTIME_MINUTES):
        return "R"
    return "PG-13"


def _release_year(release_date: Optional[str]) -> int:
    if not release_date:
        return 0
    try:
        return int(release_date[:4])
    except ValueError:
        return 0


def _format_vote(vote_average) -> Optional[str]:
    if vote_average is None:
        return None
    return f"{float(vote_average):.1f}"


def _poster_url(poster_path: Optional[str]) -> Optional[str]:
    return f"{POSTER_BASE}{poster_path}" if poster_path else None
