import threading
from datetime import datetime, timezone
from typing import Optional

from .. import schemas
from ..errors import ConflictError
from .base import Storage


class MemoryStorage(Storage):
    """Process-local store; everything is lost on restart."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._lock = threading.Lock()
        self._users: dict[int, schemas.User] = {}
        self._movies: dict[int, schemas.Movie] = {}
        self._scenes: dict[int, schemas.Scene] = {}
        self._history: dict[int, schemas.SearchHistory] = {}
        self._uploads: dict[int, schemas.VideoUpload] = {}
        self._next_id = {"user": 1, "movie": 1, "scene": 1, "history": 1, "upload": 1}

    def _allocate(self, kind: str) -> int:
        # caller holds self._lock
        new_id = self._next_id[kind]
        self._next_id[kind] = new_id + 1
        return new_id

    @staticmethod
    def _get(table: dict, key):
        row = table.get(key)
        return row.model_copy(deep=True) if row is not None else None

    # Users
    def get_user(self, user_id: int) -> Optional[schemas.User]:
        return self._get(self._users, user_id)

    def get_user_by_username(self, username: str) -> Optional[schemas.User]:
        for user in list(self._users.values()):
            if user.username == username:
                return user.model_copy()
        return None

    def create_user(self, data: schemas.UserCreate) -> schemas.User:
        with self._lock:
            if any(u.username == data.username for u in self._users.values()):
                raise ConflictError("Username already registered")
            user = schemas.User(id=self._allocate("user"), **data.model_dump())
            self._users[user.id] = user
        return user.model_copy()

    # Movies
    def get_movie(self, movie_id: int) -> Optional[schemas.Movie]:
        return self._get(self._movies, movie_id)

    def get_movies(self) -> list[schemas.Movie]:
        return [m.model_copy(deep=True) for m in list(self._movies.values())]

    def create_movie(
        self, data: schemas.MovieCreate, movie_id: Optional[int] = None
    ) -> schemas.Movie:
        with self._lock:
            if movie_id is None:
                movie_id = self._allocate("movie")
            elif movie_id in self._movies:
                raise ConflictError(f"Movie {movie_id} already exists")
            else:
                self._next_id["movie"] = max(self._next_id["movie"], movie_id + 1)
            movie = schemas.Movie(id=movie_id, **data.model_dump())
            self._movies[movie_id] = movie
        return movie.model_copy(deep=True)

    # Scenes
    def get_scene(self, scene_id: int) -> Optional[schemas.Scene]:
        return self._get(self._scenes, scene_id)

    def get_scenes_by_movie_id(self, movie_id: int) -> list[schemas.Scene]:
        return [s.model_copy() for s in list(self._scenes.values()) if s.movie_id == movie_id]

    def create_scene(self, data: schemas.SceneCreate) -> schemas.Scene:
        with self._lock:
            scene = schemas.Scene(id=self._allocate("scene"), **data.model_dump())
            self._scenes[scene.id] = scene
        return scene.model_copy()

    # Search history
    def get_search_history(self) -> list[schemas.SearchHistory]:
        rows = sorted(
            list(self._history.values()),
            key=lambda h: (h.created_at, h.id),
            reverse=True,
        )
        return [h.model_copy() for h in rows]

    def _insert_search_history(
        self, data: schemas.SearchHistoryCreate, created_at: Optional[datetime]
    ) -> schemas.SearchHistory:
        with self._lock:
            row = schemas.SearchHistory(
                id=self._allocate("history"),
                created_at=created_at or datetime.now(timezone.utc),
                **data.model_dump(),
            )
            self._history[row.id] = row
        return row.model_copy()

    # Uploads
    def create_video_upload(self, data: schemas.VideoUploadCreate) -> schemas.VideoUpload:
        with self._lock:
            upload = schemas.VideoUpload(
                id=self._allocate("upload"),
                created_at=datetime.now(timezone.utc),
                **data.model_dump(),
            )
            self._uploads[upload.id] = upload
        return upload.model_copy()

    def get_video_upload(self, upload_id: int) -> Optional[schemas.VideoUpload]:
        return self._get(self._uploads, upload_id)
