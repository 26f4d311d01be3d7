"""
Application wiring tests using FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    from envelope_printer.main import app
    return TestClient(app)


class TestHealth:

    def test_root_and_health(self, client):
        assert client.get("/").json()["message"] == "Envelope Printer API"
        assert client.get("/health").json() == {"status": "ok"}


class TestCorsOrigins:

    def test_extra_origins_are_deduplicated(self, monkeypatch):
        from envelope_printer.main import get_cors_origins

        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, http://localhost:3000,https://a.example")
        assert get_cors_origins() == ["http://localhost:3000", "https://a.example"]


class TestEnvelopeFlowOverHttp:
    """Upload a CSV, page through it and print, over real HTTP requests."""

    def test_upload_preview_print(self, client):
        csv_bytes = (
            b"Full Name,Address,City,State,Zip\n"
            b"Jane Doe,123 Main St,Springfield,IL,62704\n"
        )
        upload = client.post(
            "/api/envelopes/upload",
            files={"file": ("addresses.csv", csv_bytes, "text/csv")},
        )
        assert upload.status_code == 200
        upload_id = upload.json()["upload_id"]

        preview = client.post(
            f"/api/envelopes/{upload_id}/preview",
            json={"return_address": "Acme Corp", "layout": {"envelope_size": "custom", "custom_width": 9.5, "custom_height": 4}},
        )
        assert preview.status_code == 200
        body = preview.json()
        assert body["recipient_lines"] == ["Jane Doe", "123 Main St", "Springfield, IL, 62704"]
        assert body["content_box"] == {"width": 475.0, "height": 120.0}

        printed = client.post(f"/api/envelopes/{upload_id}/print", json={})
        assert printed.status_code == 200
        assert printed.headers["content-type"].startswith("text/html")
        assert "Jane Doe<br>123 Main St" in printed.text

        assert client.delete(f"/api/envelopes/{upload_id}").status_code == 204

    def test_bad_upload_returns_structured_error(self, client):
        response = client.post(
            "/api/envelopes/upload",
            files={"file": ("addresses.txt", b"hello", "text/plain")},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error_code"] == "unsupported_format"

    def test_invalid_envelope_size_rejected(self, client):
        csv_bytes = b"Name,City\nJane Doe,Springfield\n"
        upload_id = client.post(
            "/api/envelopes/upload",
            files={"file": ("a.csv", csv_bytes, "text/csv")},
        ).json()["upload_id"]

        response = client.post(
            f"/api/envelopes/{upload_id}/preview",
            json={"layout": {"envelope_size": "postcard"}},
        )
        assert response.status_code == 422
