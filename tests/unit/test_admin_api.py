import pytest
import sqlalchemy

from PLEXPORT.server.configurations import build_database_settings
from PLEXPORT.server.database.sqlite import SQLiteRepository
from PLEXPORT.server.services.stats import format_bytes
from PLEXPORT.server.utils.logger import log_buffer, logger

LOGS_URL = "/admin/api/logs"


###############################################################################
class TestHealth:
    def test_health_reports_ok(self, client) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "ok"
        assert payload["timestamp"].endswith("Z")
        assert payload["environment"]

    def test_root_redirects_to_docs(self, client) -> None:
        response = client.get("/", follow_redirects=False)

        assert response.status_code in (302, 307)
        assert response.headers["location"] == "/docs"


###############################################################################
class TestLogs:
    def test_logs_are_buffered_and_filtered_by_level(self, client) -> None:
        log_buffer.clear()
        logger.info("Library scan started")
        logger.warning("Library scan is slow")
        logger.error("Library scan failed")

        everything = client.get(LOGS_URL).json()
        warnings = client.get(LOGS_URL, params={"level": "warn"}).json()

        assert [entry["message"] for entry in everything["logs"]] == [
            "Library scan started",
            "Library scan is slow",
            "Library scan failed",
        ]
        assert [entry["message"] for entry in warnings["logs"]] == ["Library scan is slow"]
        assert everything["stats"]["total"] == 3
        assert everything["stats"]["byLevel"]["error"] == 1
        assert everything["stats"]["maxSize"] == 500

    def test_limit_keeps_most_recent_entries(self, client) -> None:
        log_buffer.clear()
        for index in range(5):
            logger.info("entry %d", index)

        payload = client.get(LOGS_URL, params={"limit": 2}).json()

        assert [entry["message"] for entry in payload["logs"]] == ["entry 3", "entry 4"]

    def test_since_filters_older_entries(self, client) -> None:
        log_buffer.clear()
        log_buffer.add({"timestamp": "2024-01-01T00:00:00Z", "level": "info", "message": "old"})
        log_buffer.add({"timestamp": "2024-06-01T00:00:00Z", "level": "info", "message": "new"})

        payload = client.get(LOGS_URL, params={"since": "2024-03-01T00:00:00Z"}).json()

        assert [entry["message"] for entry in payload["logs"]] == ["new"]

    def test_clear_logs(self, client) -> None:
        logger.info("something worth clearing")

        response = client.delete(LOGS_URL)

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert log_buffer.get_all() == []


###############################################################################
class TestDatabaseCheck:
    def test_reports_table_count(self, client) -> None:
        response = client.post("/admin/api/test/database")

        assert response.status_code == 200
        payload = response.json()
        assert payload["success"] is True
        assert payload["tableCount"] == 1
        assert payload["recordCount"] is None

    def test_counts_media_items_when_present(self, make_client, sqlite_engine) -> None:
        with sqlite_engine.begin() as conn:
            conn.execute(sqlalchemy.text("CREATE TABLE media_items (id INTEGER PRIMARY KEY)"))
            conn.execute(sqlalchemy.text("INSERT INTO media_items (id) VALUES (1), (2)"))

        payload = make_client(sqlite_engine).post("/admin/api/test/database").json()

        assert payload["recordCount"] == 2

    def test_missing_store_returns_503(self, make_client) -> None:
        response = make_client(None).post("/admin/api/test/database")

        assert response.status_code == 503


###############################################################################
@pytest.fixture
def library_engine(tmp_path):
    repository = SQLiteRepository(build_database_settings({}), db_path=str(tmp_path / "library.sqlite"))
    statements = [
        "INSERT INTO media_items (id, tautulli_id, type, title) VALUES "
        "(1, '101', 'movie', 'Heat'), (2, '102', 'movie', 'Ronin'), (3, '201', 'tv', 'Severance')",
        "INSERT INTO seasons (id, media_item_id, tautulli_id, season_number, title) VALUES "
        "(1, 3, 's1', 1, 'Season 1'), (2, 3, 's2', 2, 'Season 2')",
        "INSERT INTO episodes (season_id, tautulli_id, episode_number, title) VALUES "
        "(1, 'e1', 1, 'Good News About Hell'), (1, 'e2', 2, 'Half Loop'), (2, 'e3', 1, 'Hello, Ms. Cobel')",
        "INSERT INTO cast_members (id, name) VALUES (1, 'Adam Scott'), (2, 'Britt Lower')",
        'INSERT INTO media_cast (media_item_id, cast_member_id, character, "order") VALUES '
        "(3, 2, 'Helly R.', 1), (3, 1, 'Mark S.', 0)",
        "INSERT INTO media_thumbnails (media_item_id, path) VALUES "
        "(1, 'heat.jpg'), (3, 'severance-1.jpg'), (3, 'severance-2.jpg')",
    ]
    with repository.engine.begin() as conn:
        for statement in statements:
            conn.execute(sqlalchemy.text(statement))
    yield repository.engine
    repository.dispose()


class TestDatabaseStats:
    def test_reports_library_counts(self, make_client, library_engine) -> None:
        response = make_client(library_engine).get("/admin/api/stats")

        assert response.status_code == 200
        payload = response.json()
        assert payload["media"] == {
            "total": 3,
            "movies": 2,
            "series": 1,
            "seasons": 2,
            "episodes": 3,
        }
        assert payload["cast"] == {"members": 2}
        assert payload["thumbnails"] == {"total": 3, "movies": 1, "series": 2}
        assert payload["database"]["path"].endswith("library.sqlite")
        assert payload["database"]["size"].endswith("KB")

    def test_samples_series_structure(self, make_client, library_engine) -> None:
        samples = make_client(library_engine).get("/admin/api/stats").json()["seriesSamples"]

        assert len(samples) == 1
        sample = samples[0]
        assert sample["title"] == "Severance"
        assert sample["ratingKey"] == "201"
        assert sample["seasonCount"] == 2
        assert sample["episodeCount"] == 3
        assert [season["episodeCount"] for season in sample["seasons"]] == [2, 1]
        assert [member["name"] for member in sample["cast"]] == ["Adam Scott", "Britt Lower"]

    def test_store_without_library_tables_returns_500(self, client) -> None:
        response = client.get("/admin/api/stats")

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to get database stats."

    def test_missing_store_returns_503(self, make_client) -> None:
        assert make_client(None).get("/admin/api/stats").status_code == 503


@pytest.mark.parametrize(
    "size, expected",
    [(0, "0 B"), (512, "512.00 B"), (1024, "1.00 KB"), (1536, "1.50 KB"), (5 * 1024**3, "5.00 GB")],
)
def test_format_bytes(size, expected) -> None:
    assert format_bytes(size) == expected
