from datetime import datetime
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict
from typing import Optional


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Users
class UserCreate(CamelModel):
    username: str
    password: str


class User(UserCreate):
    id: int


# Movies & scenes
class CastMember(CamelModel):
    name: str
    character: str
    image: str


class Platform(CamelModel):
    name: str
    type: str
    price: Optional[str] = None
    available: bool = True


class MovieCreate(CamelModel):
    title: str
    year: int
    director: str
    genre: str
    rating: str
    imdb_rating: Optional[str] = None
    poster: Optional[str] = None
    description: Optional[str] = None
    cast: list[CastMember] = []
    platforms: list[Platform] = []


class Movie(MovieCreate):
    id: int


class SceneCreate(CamelModel):
    movie_id: int
    timestamp: str
    description: str
    chapter: Optional[str] = None
    fingerprint: Optional[str] = None


class Scene(SceneCreate):
    id: int


# History & uploads
class SearchHistoryCreate(CamelModel):
    video_url: Optional[str] = None
    file_name: Optional[str] = None
    movie_id: Optional[int] = None
    confidence: Optional[str] = None


class SearchHistory(SearchHistoryCreate):
    id: int
    created_at: datetime


class VideoUploadCreate(CamelModel):
    file_name: str
    file_path: str
    file_size: int
    mime_type: str
    duration: Optional[int] = None


class VideoUpload(VideoUploadCreate):
    id: int
    created_at: datetime


# Match stub & API payloads
class AnalysisResult(CamelModel):
    movie_id: int
    scene_id: int
    confidence: int


class AnalyzeUrlIn(CamelModel):
    # Optional so a missing url is reported as a 400 by the route itself.
    url: Optional[str] = None


class AnalyzeOut(CamelModel):
    movie: Movie
    scene: Scene
    confidence: int
    upload_id: int


class UploadOut(CamelModel):
    upload_id: int


class MovieDetailOut(CamelModel):
    movie: Movie
    scenes: list[Scene]
