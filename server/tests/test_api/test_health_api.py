# Service endpoints and middleware tests


class TestServiceEndpoints:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health(self, client):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["environment"] == "development"

    def test_api_info(self, client):
        endpoints = client.get("/api/info").json()["endpoints"]
        assert set(endpoints) == {"trains", "stations", "menu", "orders", "drafts"}

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404

    def test_security_headers(self, client):
        response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

