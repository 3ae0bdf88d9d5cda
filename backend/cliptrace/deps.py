import logging
from contextlib import contextmanager

from fastapi import Request

from .catalog import MovieCatalog
from .errors import ClipTraceError, InternalError, StoreNotReadyError
from .storage.base import Storage

logger = logging.getLogger(__name__)


def get_store(request: Request) -> Storage:
    store = request.app.state.store
    if not store.ready:
        raise StoreNotReadyError("Storage is still initializing")
    return store


def get_catalog(request: Request) -> MovieCatalog:
    return request.app.state.catalog


def get_upload_dir(request: Request) -> str:
    return request.app.state.upload_dir


@contextmanager
def internal_errors(message: str):
    """Log unexpected failures and surface them as a generic 500."""
    try:
        yield
    except ClipTraceError:
        raise
    except Exception as exc:
        logger.exception(message)
        raise InternalError(message) from exc
