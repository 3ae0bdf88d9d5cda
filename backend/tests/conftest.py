import random

import pytest
from fastapi.testclient import TestClient

from cliptrace.catalog import MovieCatalog
from cliptrace.main import create_app
from cliptrace.storage.memory import MemoryStorage
from cliptrace.storage.relational import DatabaseStorage


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def offline_catalog(rng):
    """No API key: every lookup takes the fallback path."""
    return MovieCatalog(api_key=None, rng=rng)


def make_store(kind, catalog, rng):
    if kind == "memory":
        return MemoryStorage(catalog=catalog, rng=rng, analysis_delay=0)
    return DatabaseStorage(
        database_url="sqlite:///:memory:", catalog=catalog, rng=rng, analysis_delay=0
    )


@pytest.fixture(params=["memory", "database"])
def store(request, offline_catalog, rng):
    s = make_store(request.param, offline_catalog, rng)
    s.initialize()
    return s


@pytest.fixture(params=["memory", "database"])
def empty_store(request, offline_catalog, rng):
    """Prepared but not seeded."""
    s = make_store(request.param, offline_catalog, rng)
    s._prepare()
    return s


@pytest.fixture
def client(offline_catalog, rng, tmp_path):
    store = MemoryStorage(catalog=offline_catalog, rng=rng, analysis_delay=0)
    app = create_app(store=store, catalog=offline_catalog, upload_dir=str(tmp_path))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_client(offline_catalog, rng, tmp_path):
    store = DatabaseStorage(
        database_url="sqlite:///:memory:",
        catalog=offline_catalog,
        rng=rng,
        analysis_delay=0,
    )
    app = create_app(store=store, catalog=offline_catalog, upload_dir=str(tmp_path))
    with TestClient(app) as c:
        yield c
