"""
Pytest configuration for the PLEXPORT server tests.
Unit tests run the FastAPI app in-process against temporary SQLite files;
E2E tests talk to a running server through Playwright's API request context.
"""
import os
import tempfile

# Keep the application's own SQLite file out of the repository during tests
os.environ.setdefault(
    "PLEXPORT_SQLITE_PATH", os.path.join(tempfile.mkdtemp(prefix="plexport-tests-"), "app.sqlite")
)

import httpx
import pytest
import sqlalchemy
from fastapi.testclient import TestClient

from PLEXPORT.server.app import app
from PLEXPORT.server.configurations import build_explorer_settings
from PLEXPORT.server.database.dependencies import get_database_engine, get_explorer_settings

API_BASE_URL = os.environ.get("PLEXPORT_API_URL", "http://localhost:8000")

MEDIA_ROWS = [
    (1, "Alpha", 2020),
    (2, "Beta", 2021),
    (3, "Gamma", 2020),
]


# -----------------------------------------------------------------------------
def create_media_table(engine: sqlalchemy.engine.Engine, rows=MEDIA_ROWS) -> None:
    with engine.begin() as conn:
        conn.execute(
            sqlalchemy.text(
                "CREATE TABLE media (id INTEGER PRIMARY KEY, title TEXT, year INTEGER)"
            )
        )
        conn.execute(
            sqlalchemy.text("INSERT INTO media (id, title, year) VALUES (:id, :title, :year)"),
            [{"id": row[0], "title": row[1], "year": row[2]} for row in rows],
        )


@pytest.fixture
def sqlite_engine(tmp_path):
    """Empty SQLite database used as the explorer's connection handle."""
    engine = sqlalchemy.create_engine(f"sqlite:///{tmp_path / 'explorer.sqlite'}", future=True)
    yield engine
    engine.dispose()


@pytest.fixture
def media_engine(sqlite_engine):
    create_media_table(sqlite_engine)
    return sqlite_engine


@pytest.fixture
def explorer_settings():
    return build_explorer_settings({})


@pytest.fixture
def make_client(explorer_settings):
    """Factory returning a TestClient bound to the given engine and settings."""
    clients = []

    def factory(engine, settings=None):
        app.dependency_overrides[get_database_engine] = lambda: engine
        app.dependency_overrides[get_explorer_settings] = lambda: settings or explorer_settings
        client = TestClient(app)
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, media_engine):
    return make_client(media_engine)


@pytest.fixture(scope="session")
def api_base_url() -> str:
    """Returns the base URL of a running PLEXPORT server."""
    return API_BASE_URL


@pytest.fixture
def api_context(api_base_url):
    """
    Creates a Playwright API request context for direct HTTP calls against a
    running server. Skips when Playwright is missing or the server is down.
    """
    sync_api = pytest.importorskip("playwright.sync_api")
    try:
        httpx.get(f"{api_base_url}/health", timeout=2.0)
    except httpx.HTTPError:
        pytest.skip(f"PLEXPORT server is not reachable at {api_base_url}")
    with sync_api.sync_playwright() as playwright:
        context = playwright.request.new_context(base_url=api_base_url)
        yield context
        context.dispose()
