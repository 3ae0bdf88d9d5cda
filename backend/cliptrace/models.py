from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Numeric,
    JSON,
    func,
)

from .database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)


class Movie(Base):
    __tablename__ = "movies"

    # Catalog (TMDB) ids are reused as primary keys.
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    year = Column(Integer, nullable=False)
    director = Column(String, nullable=False)
    genre = Column(String, nullable=False)
    rating = Column(String, nullable=False)
    imdb_rating = Column(Numeric(3, 1))
    poster = Column(String)
    description = Column(Text)
    cast = Column(JSON)  # [{name, character, image}]
    platforms = Column(JSON)  # [{name, type, price?, available}]


class Scene(Base):
    __tablename__ = "scenes"

    id = Column(Integer, primary_key=True, index=True)
    # not a foreign key: scenes may be written before their movie row
    movie_id = Column(Integer, nullable=False, index=True)
    timestamp = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    chapter = Column(String)
    fingerprint = Column(String)


class SearchHistory(Base):
    __tablename__ = "search_history"

    id = Column(Integer, primary_key=True, index=True)
    video_url = Column(String)
    file_name = Column(String)
    movie_id = Column(Integer)
    confidence = Column(Numeric(3, 1))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)


class VideoUpload(Base):
    __tablename__ = "video_uploads"

    id = Column(Integer, primary_key=True, index=True)
    file_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String, nullable=False)
    duration = Column(Integer)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
