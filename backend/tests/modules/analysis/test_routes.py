"""
Tests for the analysis API endpoint.

The analysis service is replaced with a real AnalysisService over a fake
model caller, so routing, validation and serialization are exercised end
to end without network calls.
"""

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_analysis_service
from modules.analysis.routes import is_allowed_image
from modules.analysis.service import AnalysisService
from shared.config import Settings, get_settings
from tests.conftest import FakeModelCaller

PNG = ("q1.png", b"\x89PNG fake", "image/png")
PNG_2 = ("q2.png", b"\x89PNG two", "image/png")


@pytest.fixture
def caller() -> FakeModelCaller:
    return FakeModelCaller({
        "openai/o4-mini": "Image q1.png: A\nImage q2.png: B",
        "anthropic/claude": "Image q1.png: a\nImage q2.png: C",
    })


@pytest.fixture
def app(caller):
    app = create_app()
    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(caller)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


class TestIsAllowedImage:
    @pytest.mark.parametrize("filename,content_type", [
        ("a.png", "image/png"),
        ("a.JPG", "image/jpeg"),
        ("a.webp", "image/webp"),
    ])
    def test_allowed(self, filename, content_type):
        assert is_allowed_image(filename, content_type)

    @pytest.mark.parametrize("filename,content_type", [
        ("a.pdf", "application/pdf"),
        ("a.png", "text/plain"),
        ("a", "image/png"),
        ("a.png", None),
    ])
    def test_rejected(self, filename, content_type):
        assert not is_allowed_image(filename, content_type)


class TestAnalyzeEndpoint:
    def test_individual_mode(self, client, caller):
        caller.replies = {"openai/o4-mini": "B", "anthropic/claude": "b"}

        response = client.post("/api/analyze", files=[("images", PNG)])

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "individual"
        assert data["api_calls_saved"] is None
        assert data["models"] == ["openai/o4-mini", "anthropic/claude"]
        result = data["results"][0]
        assert result["filename"] == "q1.png"
        assert len(result["answers"]) == 2
        assert all(a["status"] == "consensus" for a in result["answers"])
        assert all(kind == "single" for kind, *_ in caller.calls)

    def test_batch_mode(self, client, caller):
        response = client.post(
            "/api/analyze",
            files=[("images", PNG), ("images", PNG_2)],
            data={"mode": "batch"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "batch"
        assert data["api_calls_saved"] == 2
        first, second = data["results"]
        assert [a["text"] for a in first["answers"]] == ["A", "a"]
        assert [a["status"] for a in first["answers"]] == ["consensus", "consensus"]
        assert [a["status"] for a in second["answers"]] == ["different", "different"]
        assert all(a["extraction"] == "labeled" for a in second["answers"])
        assert len(caller.calls) == 2

    def test_custom_prompt_forwarded(self, client, caller):
        client.post("/api/analyze", files=[("images", PNG)], data={"prompt": "Which option?"})

        assert {c[3] for c in caller.calls} == {"Which option?"}

    def test_invalid_mode(self, client):
        response = client.post("/api/analyze", files=[("images", PNG)], data={"mode": "parallel"})
        assert response.status_code == 422

    def test_missing_images(self, client):
        response = client.post("/api/analyze", data={"prompt": "x"})
        assert response.status_code == 422

    def test_rejects_non_image(self, client, caller):
        response = client.post(
            "/api/analyze",
            files=[("images", ("notes.pdf", b"%PDF", "application/pdf"))],
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "UNSUPPORTED_IMAGE_TYPE"
        assert body["details"]["filename"] == "notes.pdf"
        assert caller.calls == []

    def test_rejects_too_many_images(self, client):
        files = [("images", (f"q{i}.png", b"x", "image/png")) for i in range(9)]

        response = client.post("/api/analyze", files=files)

        assert response.status_code == 400
        assert response.json()["error"] == "TOO_MANY_IMAGES"

    def test_rejects_oversized_image(self, app, client):
        app.dependency_overrides[get_settings] = lambda: Settings(max_file_size_bytes=4)

        response = client.post(
            "/api/analyze",
            files=[("images", ("big.png", b"12345", "image/png"))],
        )

        assert response.status_code == 413
        assert response.json()["error"] == "IMAGE_TOO_LARGE"

    def test_empty_image_reported_per_image(self, client):
        response = client.post(
            "/api/analyze",
            files=[("images", ("empty.png", b"", "image/png")), ("images", PNG)],
        )

        assert response.status_code == 200
        empty, ok = response.json()["results"]
        assert empty["processing_error"] == "Failed to process image"
        assert ok["processing_error"] is None
        assert len(ok["answers"]) == 2
