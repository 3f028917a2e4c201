"""
Tests for the generation API routes.

The shared gateway instances are given a fake chat model so no request
ever reaches the completion provider.
"""

from unittest.mock import patch

import pytest

from src.generation import COVER_LETTER_GATEWAY, RESUME_GATEWAY

VALID_BODY = {"resume": "Jane Doe\nPython developer", "jobDescription": "Senior Python Engineer"}


@pytest.fixture
def patched_gateways(fake_llm):
    with patch.object(RESUME_GATEWAY, "_llm", fake_llm), \
            patch.object(COVER_LETTER_GATEWAY, "_llm", fake_llm):
        yield fake_llm


class TestGenerateResume:
    """Tests for POST /api/generate-resume."""

    def test_success(self, client, patched_gateways):
        response = client.post("/api/generate-resume", json=VALID_BODY)

        assert response.status_code == 200
        assert response.get_json() == {"result": "Tailored output"}
        patched_gateways.invoke.assert_called_once()

    @pytest.mark.parametrize("body", [
        {},
        {"resume": "Jane Doe"},
        {"jobDescription": "Engineer"},
        {"resume": "", "jobDescription": "Engineer"},
    ])
    def test_missing_fields_returns_400(self, client, patched_gateways, body):
        response = client.post("/api/generate-resume", json=body)

        assert response.status_code == 400
        assert response.get_json() == {"error": "Missing resume or job description"}
        patched_gateways.invoke.assert_not_called()

    def test_non_json_body_returns_400(self, client, patched_gateways):
        response = client.post("/api/generate-resume", data="not json", content_type="text/plain")

        assert response.status_code == 400
        assert response.get_json()["error"] == "Missing resume or job description"

    def test_provider_failure_returns_500(self, client, patched_gateways):
        patched_gateways.invoke.side_effect = RuntimeError("upstream 503")

        response = client.post("/api/generate-resume", json=VALID_BODY)

        assert response.status_code == 500
        assert response.get_json() == {"error": "Something went wrong generating the resume."}

    def test_get_not_allowed(self, client):
        assert client.get("/api/generate-resume").status_code == 405


class TestGenerateCoverLetter:
    """Tests for POST /api/generate-cover-letter."""

    def test_success(self, client, patched_gateways):
        response = client.post("/api/generate-cover-letter", json=VALID_BODY)

        assert response.status_code == 200
        assert response.get_json()["result"] == "Tailored output"

    def test_provider_failure_returns_500(self, client, patched_gateways):
        patched_gateways.invoke.side_effect = TimeoutError("timed out")

        response = client.post("/api/generate-cover-letter", json=VALID_BODY)

        assert response.status_code == 500
        assert response.get_json() == {"error": "Something went wrong generating the cover letter."}


class TestExportPdf:
    """Tests for POST /api/export-pdf."""

    def test_resume_pdf_download(self, client):
        response = client.post("/api/export-pdf", json={"kind": "resume", "text": "Jane Doe\nSummary"})

        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        assert "ai-optimized-resume.pdf" in response.headers["Content-Disposition"]
        assert response.data.startswith(b"%PDF")

    def test_cover_letter_file_name(self, client):
        response = client.post("/api/export-pdf", json={"kind": "cover", "text": "Dear hiring manager"})

        assert "ai-cover-letter.pdf" in response.headers["Content-Disposition"]

    def test_unknown_kind_returns_400(self, client):
        response = client.post("/api/export-pdf", json={"kind": "portfolio", "text": "x"})
        assert response.status_code == 400

    def test_missing_text_returns_400(self, client):
        response = client.post("/api/export-pdf", json={"kind": "resume"})
        assert response.status_code == 400

    @pytest.mark.parametrize("body", [["resume", "x"], "resume", 42])
    def test_non_object_json_returns_400(self, client, body):
        response = client.post("/api/export-pdf", json=body)

        assert response.status_code == 400
        assert "error" in response.get_json()


class TestHealth:
    """Tests for GET /health."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert data["model"] == "gpt-4o-mini"
