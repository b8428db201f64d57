"""
Shared fixtures: one store per backend, and a TestClient wired to a store.
The app lifespan is not run; the store dependency is overridden instead.
"""

import pytest
from fastapi.testclient import TestClient

from tutorlog.database import make_engine
from tutorlog.main import app
from tutorlog.routers.interactions import get_store
from tutorlog.store import CsvInteractionStore, SqlInteractionStore


@pytest.fixture
def csv_path(tmp_path):
    return tmp_path / "student_interactions.csv"


@pytest.fixture
def csv_store(csv_path):
    store = CsvInteractionStore(csv_path)
    store.initialize()
    return store


@pytest.fixture
def sql_store():
    store = SqlInteractionStore(make_engine("sqlite://"))
    store.initialize()
    yield store
    store.engine.dispose()


@pytest.fixture(params=["csv", "database"])
def store(request):
    """Runs the test once per backend."""
    return request.getfixturevalue("csv_store" if request.param == "csv" else "sql_store")


@pytest.fixture
def make_client():
    def _make(store):
        app.dependency_overrides[get_store] = lambda: store
        return TestClient(app)
    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(store, make_client):
    return make_client(store)
