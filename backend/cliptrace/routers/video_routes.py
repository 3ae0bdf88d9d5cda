import logging
import os
import time
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from .. import config, schemas
from ..deps import get_store, get_upload_dir, internal_errors
from ..errors import NotFoundError, PayloadTooLargeError, ValidationError
from ..storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["videos"])

CHUNK_SIZE = 1024 * 1024


def _parse_id(raw: str, message: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(message) from None


def _save_upload(video: UploadFile, upload_dir: str) -> tuple[str, int]:
    """Stream the upload to disk under a generated name; returns (path, size)."""
    os.makedirs(upload_dir, exist_ok=True)
    path = os.path.join(upload_dir, uuid.uuid4().hex)
    size = 0
    try:
        with open(path, "wb") as out:
            while True:
                chunk = video.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > config.MAX_UPLOAD_BYTES:
                    raise PayloadTooLargeError("Video exceeds the 100MB limit")
                out.write(chunk)
    except BaseException:
        _discard(path)
        raise
    return path, size


def _discard(path: str) -> None:
    if os.path.exists(path):
        os.remove(path)


def _load_match(store: Storage, analysis: schemas.AnalysisResult):
    movie = store.get_movie(analysis.movie_id)
    scene = store.get_scene(analysis.scene_id)
    if movie is None or scene is None:
        raise NotFoundError("Movie or scene not found")
    return movie, scene


@router.get("/search-history", response_model=list[schemas.SearchHistory])
def get_search_history(store: Storage = Depends(get_store)):
    with internal_errors("Failed to fetch search history"):
        return store.get_search_history()


@router.post("/upload-video", response_model=schemas.UploadOut)
def upload_video(
    video: Optional[UploadFile] = File(None),
    store: Storage = Depends(get_store),
    upload_dir: str = Depends(get_upload_dir),
):
    if video is None or not video.filename:
        raise ValidationError("No video file provided")
    if video.content_type not in config.ALLOWED_VIDEO_TYPES:
        raise ValidationError("Invalid file type. Only video files are allowed.")

    with internal_errors("Failed to upload video"):
        path, size = _save_upload(video, upload_dir)
        try:
            upload = store.create_video_upload(
                schemas.VideoUploadCreate(
                    file_name=video.filename,
                    file_path=path,
                    file_size=size,
                    mime_type=video.content_type,
                    duration=None,
                )
            )
        except BaseException:
            # no row references the file
            _discard(path)
            raise

    logger.info("Stored upload %s (%s, %d bytes)", upload.id, upload.file_name, size)
    return schemas.UploadOut(upload_id=upload.id)


@router.post("/analyze-url", response_model=schemas.AnalyzeOut)
def analyze_url(
    payload: schemas.AnalyzeUrlIn,
    store: Storage = Depends(get_store),
):
    if not payload.url:
        raise ValidationError("Video URL is required")

    with internal_errors("Failed to analyze video URL"):
        upload = store.create_video_upload(
            schemas.VideoUploadCreate(
                file_name=f"url_video_{int(time.time() * 1000)}.mp4",
                file_path=payload.url,
                file_size=0,
                mime_type="video/mp4",
                duration=None,
            )
        )
        analysis = store.analyze_video(upload.id)

        # History is written before the movie/scene lookup on this path.
        store.create_search_history(
            schemas.SearchHistoryCreate(
                video_url=payload.url,
                file_name=None,
                movie_id=analysis.movie_id,
                confidence=f"{analysis.confidence:.1f}",
            )
        )
        movie, scene = _load_match(store, analysis)

    return schemas.AnalyzeOut(
        movie=movie,
        scene=scene,
        confidence=analysis.confidence,
        upload_id=upload.id,
    )


@router.post("/analyze-video/{upload_id}", response_model=schemas.AnalyzeOut)
def analyze_video(
    upload_id: str,
    store: Storage = Depends(get_store),
):
    video_id = _parse_id(upload_id, "Invalid upload ID")

    with internal_errors("Failed to analyze video"):
        upload = store.get_video_upload(video_id)
        if upload is None:
            raise NotFoundError("Video upload not found")

        analysis = store.analyze_video(video_id)
        movie, scene = _load_match(store, analysis)

        # History is written only once the match resolved on this path.
        store.create_search_history(
            schemas.SearchHistoryCreate(
                video_url=None,
                file_name=upload.file_name,
                movie_id=analysis.movie_id,
                confidence=f"{analysis.confidence:.1f}",
            )
        )

    return schemas.AnalyzeOut(
        movie=movie,
        scene=scene,
        confidence=analysis.confidence,
        upload_id=video_id,
    )
