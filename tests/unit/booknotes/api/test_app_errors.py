"""Tests for application-level error handling, store substitution and health probes."""

from unittest.mock import Mock

import pytest

from src.booknotes.api.http.deps import get_book_store, get_cover_url_template
from tests.fixtures.dummies import FailingBookStore, InMemoryBookStore


@pytest.fixture
def memory_store(client):
    from src.booknotes.api.http.app import app

    store = InMemoryBookStore()
    app.dependency_overrides[get_book_store] = lambda: store
    return store


@pytest.fixture
def failing_client(client):
    from src.booknotes.api.http.app import app

    app.dependency_overrides[get_book_store] = lambda: FailingBookStore()
    return client


class TestStoreFailures:
    """Store failures become 500 responses with a generic plain-text body."""

    @pytest.mark.parametrize(
        "method, path, data, message",
        [
            ("get", "/", None, "Error loading books from database"),
            ("get", "/edit/1", None, "Error loading book from database"),
            ("get", "/book/1", None, "Error loading book from database"),
            ("post", "/add", {"title": "Dune", "author": "Herbert"}, "Error adding book to database"),
            ("post", "/edit/1", {"title": "Dune", "author": "Herbert"}, "Error updating book in database"),
            ("post", "/delete/1", None, "Error deleting book from database"),
        ],
    )
    def test_store_error_returns_500(self, failing_client, method, path, data, message):
        if method == "get":
            response = failing_client.get(path)
        else:
            response = failing_client.post(path, data=data, follow_redirects=False)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == message
        assert "database" in response.text

    def test_validation_runs_before_store(self, failing_client):
        response = failing_client.post("/add", data={"title": "", "author": ""})

        assert response.status_code == 400
        assert response.text == "Title and author are required"


class TestStoreSubstitution:
    """The routes depend on the BookStore contract, not on SQL."""

    def test_routes_use_overridden_store(self, client, memory_store):
        response = client.post(
            "/add",
            data={"title": "Dune", "author": "Herbert"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert [b.title for b in memory_store.books.values()] == ["Dune"]

        listing = client.get("/")
        assert "Dune" in listing.text

    def test_detail_from_overridden_store(self, client, memory_store):
        from src.booknotes.entities.service.book import BookDraft

        book = memory_store.create(BookDraft(title="Emma", author="Austen", isbn="0141439580"))

        response = client.get(f"/book/{book.id}")

        assert response.status_code == 200
        assert "https://covers.openlibrary.org/b/isbn/0141439580-L.jpg" in response.text


class TestCoverTemplateConfig:
    """Cover URLs are built from the configured template."""

    def test_custom_cover_template(self, client, memory_store):
        from src.booknotes.api.http.app import app
        from src.booknotes.entities.service.book import BookDraft

        book = memory_store.create(BookDraft(title="Emma", author="Austen", isbn="0141439580"))
        app.dependency_overrides[get_cover_url_template] = lambda: "https://img.test/{isbn}.jpg"

        detail = client.get(f"/book/{book.id}")
        listing = client.get("/")

        assert "https://img.test/0141439580.jpg" in detail.text
        assert "https://img.test/0141439580.jpg" in listing.text

    def test_default_template_comes_from_config(self):
        from src.booknotes.runtime.config.config_data import ConfigData, CoversConfig
        from src.booknotes.runtime.context import with_context

        override = ConfigData(covers=CoversConfig(url_template="https://img.test/{isbn}"))
        with with_context(override):
            assert get_cover_url_template() == "https://img.test/{isbn}"


class TestRequestLogging:
    """Request middleware behaviour."""

    def test_request_id_is_generated(self, client):
        response = client.get("/health")
        assert response.headers.get("X-Request-ID")

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"


class TestHealth:
    """Liveness and readiness probes."""

    def test_liveness(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_readiness_with_database(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"]["database"]["status"] == "healthy"

    def test_readiness_without_database(self, client):
        from src.booknotes.api.http.app import app

        database_service = app.state.app_dependencies.database_service
        database_service.health_check = Mock(return_value=False)

        response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"
