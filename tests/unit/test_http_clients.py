"""
Unit tests for the generation API client and the resume upload client.

Both use httpx.MockTransport so requests are answered in-process.
"""

import json

import httpx
import pytest

from src.common.error_handling import ExtractionError, GatewayError
from src.common.types import ArtifactKind, GenerationRequest
from src.workflow.extraction_client import (
    EMPTY_MESSAGE,
    UNREADABLE_MESSAGE,
    UNSUPPORTED_MESSAGE,
    ExtractionClient,
    is_pdf,
    is_plain_text,
)
from src.workflow.gateway_client import GatewayClient, default_failure_message

REQUEST = GenerationRequest(resume_text="Jane Doe", job_description_text="Backend Engineer")


def gateway_client(handler):
    return GatewayClient(base_url="http://api.test/", transport=httpx.MockTransport(handler))


def extraction_client(handler=None):
    def unexpected(request):
        raise AssertionError(f"Unexpected request to {request.url}")
    return ExtractionClient(
        base_url="http://parser.test",
        transport=httpx.MockTransport(handler or unexpected),
    )


class TestGatewayClient:
    """Tests for GatewayClient.generate()."""

    @pytest.mark.asyncio
    async def test_posts_payload_to_resume_endpoint(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"result": "Tailored resume"})

        text = await gateway_client(handler).generate(ArtifactKind.RESUME, REQUEST)

        assert text == "Tailored resume"
        assert seen["path"] == "/api/generate-resume"
        assert seen["body"] == {"resume": "Jane Doe", "jobDescription": "Backend Engineer"}

    @pytest.mark.asyncio
    async def test_cover_letter_endpoint(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(200, json={"result": "Dear hiring manager"})

        await gateway_client(handler).generate(ArtifactKind.COVER, REQUEST)

        assert paths == ["/api/generate-cover-letter"]

    @pytest.mark.asyncio
    async def test_server_error_message_is_surfaced(self):
        def handler(request):
            return httpx.Response(500, json={"error": "Something went wrong generating the resume."})

        with pytest.raises(GatewayError) as exc_info:
            await gateway_client(handler).generate(ArtifactKind.RESUME, REQUEST)

        assert exc_info.value.message == "Something went wrong generating the resume."
        assert exc_info.value.detail == "HTTP 500"

    @pytest.mark.asyncio
    async def test_non_json_error_uses_fallback(self):
        def handler(request):
            return httpx.Response(502, text="<html>Bad gateway</html>")

        with pytest.raises(GatewayError) as exc_info:
            await gateway_client(handler).generate(ArtifactKind.COVER, REQUEST)

        assert exc_info.value.message == "Failed to generate cover letter"

    @pytest.mark.asyncio
    async def test_transport_error_uses_fallback(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GatewayError) as exc_info:
            await gateway_client(handler).generate(ArtifactKind.RESUME, REQUEST)

        assert exc_info.value.message == default_failure_message(ArtifactKind.RESUME)

    @pytest.mark.asyncio
    async def test_empty_result_is_a_failure(self):
        def handler(request):
            return httpx.Response(200, json={"result": ""})

        with pytest.raises(GatewayError):
            await gateway_client(handler).generate(ArtifactKind.RESUME, REQUEST)


class TestFileTypeDetection:
    """Tests for is_pdf() / is_plain_text()."""

    def test_detects_by_extension(self):
        assert is_pdf("CV.PDF")
        assert is_plain_text("resume.txt")
        assert is_plain_text("notes.md")
        assert not is_pdf("resume.docx")
        assert not is_plain_text("resume.docx")

    def test_detects_by_content_type(self):
        assert is_pdf("upload", "application/pdf")
        assert is_plain_text("upload", "text/plain; charset=utf-8")


class TestExtractionClient:
    """Tests for ExtractionClient.extract_text()."""

    @pytest.mark.asyncio
    async def test_plain_text_is_decoded_locally(self):
        content = "\ufeffJane Doe\nPython developer".encode("utf-8")

        text = await extraction_client().extract_text("resume.txt", content)

        assert text == "Jane Doe\nPython developer"

    @pytest.mark.asyncio
    async def test_pdf_is_sent_to_extraction_service(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = request.content
            return httpx.Response(200, json={"text": "Jane Doe\nPython developer"})

        text = await extraction_client(handler).extract_text("cv.pdf", b"%PDF-1.4 fake")

        assert text == "Jane Doe\nPython developer"
        assert seen["method"] == "POST"
        assert seen["path"] == "/extract-text"
        assert b'name="file"; filename="cv.pdf"' in seen["body"]
        assert b"%PDF-1.4 fake" in seen["body"]

    @pytest.mark.asyncio
    async def test_error_payload_is_unreadable(self):
        def handler(request):
            return httpx.Response(200, json={"error": "Could not read PDF"})

        with pytest.raises(ExtractionError) as exc_info:
            await extraction_client(handler).extract_text("cv.pdf", b"%PDF")

        assert exc_info.value.message == UNREADABLE_MESSAGE
        assert exc_info.value.detail == "Could not read PDF"

    @pytest.mark.asyncio
    async def test_service_status_error_is_unreadable(self):
        def handler(request):
            return httpx.Response(422, json={"error": "No text found in PDF"})

        with pytest.raises(ExtractionError) as exc_info:
            await extraction_client(handler).extract_text("cv.pdf", b"%PDF")

        assert exc_info.value.message == UNREADABLE_MESSAGE

    @pytest.mark.asyncio
    async def test_service_unreachable_is_unreadable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ExtractionError) as exc_info:
            await extraction_client(handler).extract_text("cv.pdf", b"%PDF")

        assert exc_info.value.message == UNREADABLE_MESSAGE

    @pytest.mark.asyncio
    async def test_unsupported_type_is_rejected_without_request(self):
        with pytest.raises(ExtractionError) as exc_info:
            await extraction_client().extract_text("resume.docx", b"PK\x03\x04")

        assert exc_info.value.message == UNSUPPORTED_MESSAGE

    @pytest.mark.asyncio
    async def test_whitespace_only_file_is_empty(self):
        with pytest.raises(ExtractionError) as exc_info:
            await extraction_client().extract_text("resume.txt", b"  \n\t ")

        assert exc_info.value.message == EMPTY_MESSAGE

    @pytest.mark.asyncio
    async def test_invalid_utf8_is_unreadable(self):
        with pytest.raises(ExtractionError) as exc_info:
            await extraction_client().extract_text("resume.txt", b"\xff\xfe\xfa")

        assert exc_info.value.message == UNREADABLE_MESSAGE
