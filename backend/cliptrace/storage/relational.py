from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from .. import models, schemas
from ..database import Base, make_engine, make_session_factory
from ..errors import ConflictError
from .base import Storage


def _decimal_str(value) -> Optional[str]:
    if value is None:
        return None
    return f"{Decimal(str(value)):.1f}"


def _to_decimal(value: Optional[str]) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def _row_dict(row, *decimal_columns) -> dict:
    data = {c.key: getattr(row, c.key) for c in row.__table__.columns}
    for key in decimal_columns:
        data[key] = _decimal_str(data[key])
    return data


class DatabaseStorage(Storage):
    """SQLAlchemy-backed store; one session per operation."""

    def __init__(self, database_url: str = None, engine=None, **kwargs):
        super().__init__(**kwargs)
        self.engine = engine if engine is not None else make_engine(database_url)
        self.SessionLocal = make_session_factory(self.engine)

    def _prepare(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    # Users
    def get_user(self, user_id: int) -> Optional[schemas.User]:
        with self.SessionLocal() as db:
            user = db.get(models.User, user_id)
            return schemas.User.model_validate(_row_dict(user)) if user else None

    def get_user_by_username(self, username: str) -> Optional[schemas.User]:
        with self.SessionLocal() as db:
            user = (
                db.query(models.User).filter(models.User.username == username).first()
            )
            return schemas.User.model_validate(_row_dict(user)) if user else None

    def create_user(self, data: schemas.UserCreate) -> schemas.User:
        with self.SessionLocal() as db:
            user = models.User(username=data.username, password=data.password)
            db.add(user)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise ConflictError("Username already registered") from exc
            db.refresh(user)
            return schemas.User.model_validate(_row_dict(user))

    # Movies
    def _movie_out(self, movie: models.Movie) -> schemas.Movie:
        data = _row_dict(movie, "imdb_rating")
        data["cast"] = data["cast"] or []
        data["platforms"] = data["platforms"] or []
        return schemas.Movie.model_validate(data)

    def get_movie(self, movie_id: int) -> Optional[schemas.Movie]:
        with self.SessionLocal() as db:
            movie = db.get(models.Movie, movie_id)
            return self._movie_out(movie) if movie else None

    def get_movies(self) -> list[schemas.Movie]:
        with self.SessionLocal() as db:
            rows = db.execute(select(models.Movie).order_by(models.Movie.id)).scalars().all()
            return [self._movie_out(m) for m in rows]

    def create_movie(
        self, data: schemas.MovieCreate, movie_id: Optional[int] = None
    ) -> schemas.Movie:
        values = data.model_dump()
        values["imdb_rating"] = _to_decimal(values["imdb_rating"])
        with self.SessionLocal() as db:
            if movie_id is not None:
                if db.get(models.Movie, movie_id) is not None:
                    raise ConflictError(f"Movie {movie_id} already exists")
                values["id"] = movie_id
            movie = models.Movie(**values)
            db.add(movie)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise ConflictError(f"Movie {movie_id} already exists") from exc
            db.refresh(movie)
            return self._movie_out(movie)

    # Scenes
    def get_scene(self, scene_id: int) -> Optional[schemas.Scene]:
        with self.SessionLocal() as db:
            scene = db.get(models.Scene, scene_id)
            return schemas.Scene.model_validate(_row_dict(scene)) if scene else None

    def get_scenes_by_movie_id(self, movie_id: int) -> list[schemas.Scene]:
        with self.SessionLocal() as db:
            rows = (
                db.query(models.Scene)
                .filter(models.Scene.movie_id == movie_id)
                .order_by(models.Scene.id)
                .all()
            )
            return [schemas.Scene.model_validate(_row_dict(s)) for s in rows]

    def create_scene(self, data: schemas.SceneCreate) -> schemas.Scene:
        with self.SessionLocal() as db:
            scene = models.Scene(**data.model_dump())
            db.add(scene)
            db.commit()
            db.refresh(scene)
            return schemas.Scene.model_validate(_row_dict(scene))

    # Search history
    def get_search_history(self) -> list[schemas.SearchHistory]:
        with self.SessionLocal() as db:
            rows = (
                db.query(models.SearchHistory)
                .order_by(models.SearchHistory.created_at.desc(), models.SearchHistory.id.desc())
                .all()
            )
            return [
                schemas.SearchHistory.model_validate(_row_dict(h, "confidence"))
                for h in rows
            ]

    def _insert_search_history(
        self, data: schemas.SearchHistoryCreate, created_at: Optional[datetime]
    ) -> schemas.SearchHistory:
        values = data.model_dump()
        values["confidence"] = _to_decimal(values["confidence"])
        if created_at is not None:
            values["created_at"] = created_at
        with self.SessionLocal() as db:
            row = models.SearchHistory(**values)
            db.add(row)
            db.commit()
            db.refresh(row)
            return schemas.SearchHistory.model_validate(_row_dict(row, "confidence"))

    # Uploads
    def create_video_upload(self, data: schemas.VideoUploadCreate) -> schemas.VideoUpload:
        with self.SessionLocal() as db:
            upload = models.VideoUpload(**data.model_dump())
            db.add(upload)
            db.commit()
            db.refresh(upload)
            return schemas.VideoUpload.model_validate(_row_dict(upload))

    def get_video_upload(self, upload_id: int) -> Optional[schemas.VideoUpload]:
        with self.SessionLocal() as db:
            upload = db.get(models.VideoUpload, upload_id)
            return schemas.VideoUpload.model_validate(_row_dict(upload)) if upload else None
