import os
import re

import pytest
from fastapi.testclient import TestClient

from cliptrace import config
from cliptrace.main import create_app
from cliptrace.routers import video_routes
from cliptrace.storage.memory import MemoryStorage

TIMESTAMP_RE = re.compile(r"^\d+:\d{2}:\d{2} - \d+:\d{2}:\d{2}$")


def upload(client, name="clip.mp4", content=b"\x00" * 2048, mime="video/mp4"):
    return client.post("/api/upload-video", files={"video": (name, content, mime)})


def test_health(client):
    assert client.get("/api/health").json() == {"ok": True, "ready": True}


def test_search_history_lists_seeded_rows(client):
    r = client.get("/api/search-history")

    assert r.status_code == 200
    rows = r.json()
    assert [row["fileName"] for row in rows] == ["action_scene_clip.mp4", "romantic_dialogue.mp4"]
    assert rows[0]["confidence"] == "97.0"
    assert rows[1]["movieId"] is None
    assert rows[1]["videoUrl"] is None
    assert "createdAt" in rows[0]


@pytest.mark.parametrize("mime", config.ALLOWED_VIDEO_TYPES)
def test_upload_accepts_video_types(client, mime, tmp_path):
    r = upload(client, mime=mime)

    assert r.status_code == 200
    upload_id = r.json()["uploadId"]
    stored = client.app.state.store.get_video_upload(upload_id)
    assert stored.mime_type == mime
    assert stored.file_size == 2048
    assert os.path.dirname(stored.file_path) == str(tmp_path)
    assert os.path.getsize(stored.file_path) == 2048


def test_upload_ids_are_unique_and_increasing(client):
    ids = [upload(client).json()["uploadId"] for _ in range(3)]

    assert ids == sorted(set(ids))


def test_upload_rejects_other_types(client, tmp_path):
    r = upload(client, name="notes.txt", mime="text/plain")

    assert r.status_code == 400
    assert r.json() == {"message": "Invalid file type. Only video files are allowed."}
    assert os.listdir(tmp_path) == []


def test_upload_requires_file(client):
    r = client.post("/api/upload-video", data={"other": "field"})

    assert r.status_code == 400
    assert r.json() == {"message": "No video file provided"}


def test_upload_over_limit_is_rejected(client, monkeypatch, tmp_path):
    monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 1024)

    r = upload(client, content=b"\x00" * 4096)

    assert r.status_code == 413
    assert os.listdir(tmp_path) == []


def test_analyze_url_example(offline_catalog, rng, tmp_path):
    store = MemoryStorage(catalog=offline_catalog, rng=rng, analysis_delay=0)
    store._prepare()
    store.ready = True  # no seed: zero prior movies
    app = create_app(store=store, catalog=offline_catalog, upload_dir=str(tmp_path))

    with TestClient(app) as client:
        r = client.post("/api/analyze-url", json={"url": "https://youtube.com/shorts/abc"})

    assert r.status_code == 200
    body = r.json()
    assert body["movie"]["title"]
    assert TIMESTAMP_RE.match(body["scene"]["timestamp"])
    assert 80 <= body["confidence"] <= 99
    assert body["scene"]["movieId"] == body["movie"]["id"]
    assert body["uploadId"] == 1

    [history] = store.get_search_history()
    assert history.video_url == "https://youtube.com/shorts/abc"
    assert history.file_name is None
    assert history.movie_id == body["movie"]["id"]
    assert history.confidence == f"{body['confidence']:.1f}"

    url_upload = store.get_video_upload(body["uploadId"])
    assert url_upload.file_path == "https://youtube.com/shorts/abc"
    assert url_upload.file_size == 0
    assert url_upload.file_name.startswith("url_video_")


@pytest.mark.parametrize("payload", [{}, {"url": ""}, {"url": None}])
def test_analyze_url_requires_url(client, payload):
    r = client.post("/api/analyze-url", json=payload)

    assert r.status_code == 400
    assert r.json() == {"message": "Video URL is required"}


def test_analyze_uploaded_video(client):
    upload_id = upload(client, name="my_clip.mp4").json()["uploadId"]

    r = client.post(f"/api/analyze-video/{upload_id}")

    assert r.status_code == 200
    body = r.json()
    assert body["uploadId"] == upload_id
    assert 80 <= body["confidence"] <= 99
    assert body["scene"]["movieId"] == body["movie"]["id"]
    assert body["scene"]["chapter"] == "Random Scene"

    newest = client.get("/api/search-history").json()[0]
    assert newest["fileName"] == "my_clip.mp4"
    assert newest["videoUrl"] is None
    assert newest["movieId"] == body["movie"]["id"]


def test_analyze_unknown_upload_is_404_without_history(client):
    before = len(client.get("/api/search-history").json())

    r = client.post("/api/analyze-video/999")

    assert r.status_code == 404
    assert r.json() == {"message": "Video upload not found"}
    assert len(client.get("/api/search-history").json()) == before


def test_analyze_bad_upload_id(client):
    r = client.post("/api/analyze-video/abc")

    assert r.status_code == 400
    assert r.json() == {"message": "Invalid upload ID"}


def test_movie_lookup_is_404_after_history_write_on_url_path(client, monkeypatch):
    store = client.app.state.store
    monkeypatch.setattr(store, "get_scene", lambda scene_id: None)
    before = len(store.get_search_history())

    r = client.post("/api/analyze-url", json={"url": "https://example.com/v.mp4"})

    assert r.status_code == 404
    assert r.json() == {"message": "Movie or scene not found"}
    assert len(store.get_search_history()) == before + 1


def test_movie_lookup_is_404_before_history_write_on_upload_path(client, monkeypatch):
    store = client.app.state.store
    upload_id = upload(client).json()["uploadId"]
    monkeypatch.setattr(store, "get_scene", lambda scene_id: None)
    before = len(store.get_search_history())

    r = client.post(f"/api/analyze-video/{upload_id}")

    assert r.status_code == 404
    assert len(store.get_search_history()) == before


def test_unexpected_store_failure_is_generic_500(client, monkeypatch):
    def broken():
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(client.app.state.store, "get_search_history", broken)

    r = client.get("/api/search-history")

    assert r.status_code == 500
    assert r.json() == {"message": "Failed to fetch search history"}


def test_list_movies(client):
    r = client.get("/api/movies")

    assert r.status_code == 200
    assert [m["title"] for m in r.json()] == ["John Wick"]
    assert r.json()[0]["imdbRating"] == "7.4"


def test_movie_detail_includes_scenes(client):
    r = client.get("/api/movies/1")

    assert r.status_code == 200
    body = r.json()
    assert body["movie"]["title"] == "John Wick"
    assert [s["description"] for s in body["scenes"]] == ["Continental Hotel Fight"]


def test_movie_detail_is_idempotent(client):
    upload_id = upload(client).json()["uploadId"]
    movie_id = client.post(f"/api/analyze-video/{upload_id}").json()["movie"]["id"]

    first = client.get(f"/api/movies/{movie_id}").json()["movie"]
    second = client.get(f"/api/movies/{movie_id}").json()["movie"]

    assert first == second


def test_movie_detail_errors(client):
    assert client.get("/api/movies/abc").status_code == 400
    r = client.get("/api/movies/424242")
    assert r.status_code == 404
    assert r.json() == {"message": "Movie not found"}


def test_search_movies_uses_catalog(client):
    r = client.get("/api/search/movies", params={"q": "fight"})

    assert r.status_code == 200
    assert [m["title"] for m in r.json()] == ["Fight Club"]


def test_search_movies_requires_query(client):
    assert client.get("/api/search/movies").status_code == 400
    assert client.get("/api/search/movies", params={"q": ""}).status_code == 400


def test_requests_wait_for_store_initialization(offline_catalog, rng, tmp_path):
    store = MemoryStorage(catalog=offline_catalog, rng=rng, analysis_delay=0)
    app = create_app(store=store, catalog=offline_catalog, upload_dir=str(tmp_path))

    # without the context manager startup hooks never run
    client = TestClient(app)
    r = client.get("/api/movies")

    assert r.status_code == 503


def test_database_backend_serves_same_contract(db_client):
    upload_id = upload(db_client).json()["uploadId"]

    body = db_client.post(f"/api/analyze-video/{upload_id}").json()
    history = db_client.get("/api/search-history").json()

    assert body["scene"]["movieId"] == body["movie"]["id"]
    assert history[0]["fileName"] == "clip.mp4"
    assert history[0]["confidence"] == f"{body['confidence']:.1f}"
    assert history[-1]["confidence"] is None
    detail = db_client.get(f"/api/movies/{body['movie']['id']}").json()
    assert body["scene"] in detail["scenes"]


def test_upload_file_is_removed_when_row_creation_fails(client, monkeypatch, tmp_path):
    def broken(data):
        raise RuntimeError("disk full")

    monkeypatch.setattr(client.app.state.store, "create_video_upload", broken)

    r = upload(client)

    assert r.status_code == 500
    assert r.json() == {"message": "Failed to upload video"}
    assert os.listdir(tmp_path) == []


def test_upload_file_is_removed_when_write_fails(client, monkeypatch, tmp_path):
    real_open = open

    class FailingFile:
        def __init__(self, path):
            self.handle = real_open(path, "wb")

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            self.handle.close()

        def write(self, chunk):
            raise OSError("No space left on device")

    monkeypatch.setattr(video_routes, "open", lambda path, mode: FailingFile(path), raising=False)

    r = upload(client)

    assert r.status_code == 500
    assert os.listdir(tmp_path) == []


def test_chunked_upload_over_limit_is_rejected(client, monkeypatch, tmp_path):
    monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 1024)
    boundary = "cliptraceboundary"
    head = (
        f"--{boundary}\r\n"
        'Content-Disposition: form-data; name="video"; filename="big.mp4"\r\n'
        "Content-Type: video/mp4\r\n\r\n"
    ).encode()
    tail = f"\r\n--{boundary}--\r\n".encode()

    def body():
        yield head
        for _ in range(8):
            yield b"\x00" * 512
        yield tail

    r = client.post(
        "/api/upload-video",
        content=body(),
        headers={"content-type": f"multipart/form-data; boundary={boundary}"},
    )

    assert r.status_code == 413
    assert r.json() == {"message": "Video exceeds the 100MB limit"}
    assert os.listdir(tmp_path) == []
    assert client.app.state.store.get_video_upload(1) is None
