import logging
import random

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import config
from .catalog import MovieCatalog
from .errors import ClipTraceError
from .middleware import UploadSizeLimit
from .routers import movie_routes, video_routes
from .storage.base import Storage
from .storage.factory import build_storage

logger = logging.getLogger(__name__)


def create_app(
    store: Storage = None,
    catalog: MovieCatalog = None,
    upload_dir: str = None,
) -> FastAPI:
    logging.basicConfig(level=config.LOG_LEVEL)

    rng = random.Random(config.RANDOM_SEED)
    if catalog is None:
        catalog = MovieCatalog(
            config.TMDB_API_KEY,
            rng=rng,
            language=config.TMDB_LANG,
            timeout=config.TMDB_TIMEOUT,
        )
    if store is None:
        store = build_storage(
            catalog=catalog,
            rng=rng,
            analysis_delay=config.ANALYSIS_DELAY_SECONDS,
        )

    app = FastAPI(title="ClipTrace API")
    app.state.store = store
    app.state.catalog = catalog
    app.state.upload_dir = upload_dir or config.UPLOAD_DIR

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(UploadSizeLimit, path_suffix="/upload-video")

    @app.exception_handler(ClipTraceError)
    async def handle_cliptrace_error(request: Request, exc: ClipTraceError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": "Invalid request"})

    @app.on_event("startup")
    def on_startup():
        # Requests are refused (503) until seeding has finished.
        if not store.ready:
            store.initialize()

    @app.get("/api/health")
    def health():
        return {"ok": True, "ready": store.ready}

    app.include_router(video_routes.router)
    app.include_router(movie_routes.router)
    return app


app = create_app()


def run():
    uvicorn.run("cliptrace.main:app", host="0.0.0.0", port=config.PORT)


if __name__ == "__main__":
    run()
