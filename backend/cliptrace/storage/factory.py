from .. import config
from .memory import MemoryStorage
from .relational import DatabaseStorage

BACKENDS = {
    "memory": MemoryStorage,
    "database": DatabaseStorage,
}


def build_storage(backend: str = None, **kwargs):
    """Construct the configured backend; ``initialize()`` is left to the caller."""
    backend = backend or config.STORAGE_BACKEND
    try:
        storage_cls = BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"Unknown STORAGE_BACKEND {backend!r}; expected one of {sorted(BACKENDS)}"
        ) from None

    if storage_cls is DatabaseStorage:
        kwargs.setdefault("database_url", config.DATABASE_URL)
    return storage_cls(**kwargs)
