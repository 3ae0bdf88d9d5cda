import abc
import logging
import random
import time
from datetime import datetime, timezone
from typing import Optional

from .. import schemas
from ..catalog import MovieCatalog
from ..errors import ConflictError, NotFoundError
from ..fixtures import SEED_HISTORY, SEED_MOVIE, SEED_SCENE
from ..matching import FIXED_CONFIDENCE, random_confidence, synthesize_scene

logger = logging.getLogger(__name__)


class Storage(abc.ABC):
    """Repository over users, movies, scenes, search history and uploads.

    Lookups return ``None`` for missing rows. ``analyze_video`` is the match
    stub and is shared by every backend.
    """

    def __init__(
        self,
        catalog: Optional[MovieCatalog] = None,
        rng: Optional[random.Random] = None,
        analysis_delay: float = 2.0,
    ):
        self.catalog = catalog
        self.rng = rng or random.Random()
        self.analysis_delay = analysis_delay
        self.ready = False

    # ---------- Lifecycle ----------

    def initialize(self) -> None:
        """Prepare the backend and seed demo data; marks the store ready."""
        self._prepare()
        if not self.get_movies():
            self._seed()
        self.ready = True
        logger.info("%s ready", type(self).__name__)

    def _prepare(self) -> None:
        pass

    def _seed(self) -> None:
        movie = self.create_movie(schemas.MovieCreate(**SEED_MOVIE))
        self.create_scene(schemas.SceneCreate(movie_id=movie.id, **SEED_SCENE))

        now = datetime.now(timezone.utc)
        for row, age in SEED_HISTORY:
            self._insert_search_history(
                schemas.SearchHistoryCreate(
                    file_name=row["file_name"],
                    movie_id=movie.id if row["linked"] else None,
                    confidence=row["confidence"],
                ),
                created_at=now - age,
            )

    # ---------- Users ----------

    @abc.abstractmethod
    def get_user(self, user_id: int) -> Optional[schemas.User]: ...

    @abc.abstractmethod
    def get_user_by_username(self, username: str) -> Optional[schemas.User]: ...

    @abc.abstractmethod
    def create_user(self, data: schemas.UserCreate) -> schemas.User: ...

    # ---------- Movies ----------

    @abc.abstractmethod
    def get_movie(self, movie_id: int) -> Optional[schemas.Movie]: ...

    @abc.abstractmethod
    def get_movies(self) -> list[schemas.Movie]: ...

    @abc.abstractmethod
    def create_movie(
        self, data: schemas.MovieCreate, movie_id: Optional[int] = None
    ) -> schemas.Movie:
        """Insert a movie; an explicit ``movie_id`` that exists raises ConflictError."""

    # ---------- Scenes ----------

    @abc.abstractmethod
    def get_scene(self, scene_id: int) -> Optional[schemas.Scene]: ...

    @abc.abstractmethod
    def get_scenes_by_movie_id(self, movie_id: int) -> list[schemas.Scene]: ...

    @abc.abstractmethod
    def create_scene(self, data: schemas.SceneCreate) -> schemas.Scene: ...

    # ---------- Search history ----------

    @abc.abstractmethod
    def get_search_history(self) -> list[schemas.SearchHistory]:
        """Newest first."""

    def create_search_history(self, data: schemas.SearchHistoryCreate) -> schemas.SearchHistory:
        return self._insert_search_history(data, created_at=None)

    @abc.abstractmethod
    def _insert_search_history(
        self, data: schemas.SearchHistoryCreate, created_at: Optional[datetime]
    ) -> schemas.SearchHistory: ...

    # ---------- Uploads ----------

    @abc.abstractmethod
    def create_video_upload(self, data: schemas.VideoUploadCreate) -> schemas.VideoUpload: ...

    @abc.abstractmethod
    def get_video_upload(self, upload_id: int) -> Optional[schemas.VideoUpload]: ...

    # ---------- Match stub ----------

    def analyze_video(self, video_id: int) -> schemas.AnalysisResult:
        upload = self.get_video_upload(video_id)
        if upload is None:
            raise NotFoundError("Video upload not found")

        # stands in for real processing time
        if self.analysis_delay > 0:
            time.sleep(self.analysis_delay)

        if self.catalog is None:
            result = self._fixed_match()
        else:
            result = self._random_match()

        logger.info(
            "Upload %s matched movie %s scene %s (%s%%)",
            video_id, result.movie_id, result.scene_id, result.confidence,
        )
        return result

    def _fixed_match(self) -> schemas.AnalysisResult:
        movies = self.get_movies()
        movie_id = movies[0].id if movies else 1
        scenes = self.get_scenes_by_movie_id(movie_id)
        scene_id = scenes[0].id if scenes else 1
        return schemas.AnalysisResult(
            movie_id=movie_id, scene_id=scene_id, confidence=FIXED_CONFIDENCE
        )

    def _random_match(self) -> schemas.AnalysisResult:
        picked = self.catalog.get_random_popular_movie()
        if picked is None:
            raise NotFoundError("No movie available to match against")

        movie = self._ensure_movie(picked)
        scene = self.create_scene(synthesize_scene(movie.id, self.rng))
        return schemas.AnalysisResult(
            movie_id=movie.id,
            scene_id=scene.id,
            confidence=random_confidence(self.rng),
        )

    def _ensure_movie(self, picked: schemas.Movie) -> schemas.Movie:
        existing = self.get_movie(picked.id)
        if existing is not None:
            return existing
        data = schemas.MovieCreate(**picked.model_dump(exclude={"id"}))
        try:
            return self.create_movie(data, movie_id=picked.id)
        except ConflictError:
            # another request stored it between the check and the insert
            return self.get_movie(picked.id)
