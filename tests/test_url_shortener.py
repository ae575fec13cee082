import asyncio

from fastapi.testclient import TestClient

from main import app
from shortlink_app.dependencies import get_allocation_service
from shortlink_app.errors import AllocationExhausted, StoreFailure


class TestURLShortener:
    """Test the HTTP surface end to end"""

    def test_create_short_url(self, client: TestClient):
        """Test creating a short URL"""
        response = client.post("/url", json={"url": "https://example.com"})
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert len(data["id"]) == 8
        assert "message" not in data

    def test_create_same_url_twice(self, client: TestClient, memory_store):
        first = client.post("/url", json={"url": "https://example.com"}).json()
        second = client.post("/url", json={"url": "https://example.com"}).json()

        assert second["id"] == first["id"]
        assert second["success"] is True
        assert second["message"] == "URL already exists"
        assert asyncio.run(memory_store.count()) == 1

    def test_missing_url(self, client: TestClient):
        response = client.post("/url", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "URL is required", "success": False}

    def test_invalid_url(self, client: TestClient):
        """Test creating URL with invalid URL"""
        response = client.post("/url", json={"url": "ftp://example.com"})

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert "ftp://example.com" in data["error"]

    def test_malformed_body(self, client: TestClient):
        response = client.post("/url", content="not json", headers={"content-type": "application/json"})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_redirect_url(self, client: TestClient):
        """Test URL redirection"""
        short_id = client.post("/url", json={"url": "https://www.github.com/"}).json()["id"]

        response = client.get(f"/{short_id}", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

    def test_redirect_nonexistent_url(self, client: TestClient):
        """Test redirecting non-existent URL"""
        response = client.get("/nonexist", follow_redirects=False)

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_redirect_malformed_id(self, client: TestClient):
        for short_id in ("abc", "x" * 11):
            response = client.get(f"/{short_id}", follow_redirects=False)
            assert response.status_code == 400

    def test_end_to_end_analytics(self, client: TestClient):
        """Shorten, follow once, read analytics"""
        short_id = client.post("/url", json={"url": "https://example.com"}).json()["id"]

        redirect = client.get(f"/{short_id}", follow_redirects=False)
        assert redirect.headers["location"] == "https://example.com"

        response = client.get(f"/url/analytics/{short_id}")
        assert response.status_code == 200

        data = response.json()
        assert data["totalClicks"] == 1
        assert data["success"] is True
        assert len(data["analytics"]) == 1
        assert isinstance(data["analytics"][0]["timestamp"], int)
        assert "createdAt" in data

    def test_analytics_counts_every_redirect(self, client: TestClient):
        short_id = client.post("/url", json={"url": "https://www.stackoverflow.com/"}).json()["id"]

        for _ in range(4):
            client.get(f"/{short_id}", follow_redirects=False)

        assert client.get(f"/url/analytics/{short_id}").json()["totalClicks"] == 4

    def test_analytics_unknown_id(self, client: TestClient):
        response = client.get("/url/analytics/unknown1")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_cache_stats(self, client: TestClient):
        short_id = client.post("/url", json={"url": "https://www.python.org"}).json()["id"]
        client.get(f"/{short_id}", follow_redirects=False)
        client.get("/missing1", follow_redirects=False)

        data = client.get("/url/cache/stats").json()

        assert data == {"keys": 1, "hits": 1, "misses": 1, "success": True}

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert set(response.json()["cache"]) == {"keys", "hits", "misses"}


class FailingAllocator:
    def __init__(self, error):
        self.error = error

    async def allocate(self, long_url):
        raise self.error


class TestServerErrors:

    def test_allocation_exhausted_is_500(self, client: TestClient):
        app.dependency_overrides[get_allocation_service] = lambda: FailingAllocator(
            AllocationExhausted("Failed to generate unique short ID. Please try again.")
        )

        response = client.post("/url", json={"url": "https://example.com"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to generate unique short ID. Please try again.",
            "success": False,
        }

    def test_store_failure_is_500(self, client: TestClient):
        app.dependency_overrides[get_allocation_service] = lambda: FailingAllocator(
            StoreFailure("database is down")
        )

        response = client.post("/url", json={"url": "https://example.com"})

        assert response.status_code == 500
        assert response.json()["success"] is False

    def test_unexpected_error_keeps_error_body(self, client: TestClient):
        app.dependency_overrides[get_allocation_service] = lambda: FailingAllocator(
            RuntimeError("driver exploded")
        )
        # The server error middleware re-raises after responding
        quiet_client = TestClient(app, raise_server_exceptions=False)

        response = quiet_client.post("/url", json={"url": "https://example.com"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error", "success": False}
