#tests\test_app.py

"""Test the static landing page."""

from fastapi.testclient import TestClient

from launchpad.server.app import app


class TestLandingPage:

    def test_root_returns_html(self):
        client = TestClient(app)

        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Launchpad is Live!" in response.text
        assert "Deployment Successful." in response.text

    def test_only_root_is_routed(self):
        client = TestClient(app)

        assert client.get("/docs").status_code == 404
        assert client.get("/openapi.json").status_code == 404
        assert client.get("/health").status_code == 404

    def test_root_rejects_post(self):
        client = TestClient(app)

        assert client.post("/").status_code == 405
