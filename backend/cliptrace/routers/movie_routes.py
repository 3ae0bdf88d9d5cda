from typing import Optional

from fastapi import APIRouter, Depends, Query

from .. import schemas
from ..catalog import MovieCatalog
from ..deps import get_catalog, get_store, internal_errors
from ..errors import NotFoundError, ValidationError
from ..storage.base import Storage

router = APIRouter(prefix="/api", tags=["movies"])


@router.get("/movies", response_model=list[schemas.Movie])
def list_movies(store: Storage = Depends(get_store)):
    with internal_errors("Failed to fetch movies"):
        return store.get_movies()


@router.get("/movies/{movie_id}", response_model=schemas.MovieDetailOut)
def get_movie(movie_id: str, store: Storage = Depends(get_store)):
    try:
        movie_pk = int(movie_id)
    except ValueError:
        raise ValidationError("Invalid movie ID") from None

    with internal_errors("Failed to fetch movie details"):
        movie = store.get_movie(movie_pk)
        if movie is None:
            raise NotFoundError("Movie not found")
        scenes = store.get_scenes_by_movie_id(movie_pk)

    return schemas.MovieDetailOut(movie=movie, scenes=scenes)


@router.get("/search/movies", response_model=list[schemas.Movie])
def search_movies(
    q: Optional[str] = Query(None),
    catalog: MovieCatalog = Depends(get_catalog),
):
    """Free-text search against TMDB (fallback list when it is unavailable)."""
    if not q or not q.strip():
        raise ValidationError("Search query is required")

    with internal_errors("Failed to search movies"):
        return catalog.search_movies(q)
