"""
Resume upload handling.

Plain-text files are decoded locally; PDFs are delegated to the external
text-extraction service. Anything else is rejected.
"""

import logging
import os
from typing import Optional

import httpx

from src.common.config import Config
from src.common.error_handling import ExtractionError

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {".txt", ".md", ".text"}
PDF_EXTENSION = ".pdf"
PDF_CONTENT_TYPE = "application/pdf"

UNSUPPORTED_MESSAGE = "Unsupported file type. Please upload a .txt or .pdf file."
UNREADABLE_MESSAGE = (
    "Could not read that file. Please upload a .txt or .pdf file or paste your resume manually."
)
EMPTY_MESSAGE = "No text could be extracted from that file."


def is_pdf(filename: str, content_type: Optional[str] = None) -> bool:
    _, ext = os.path.splitext(filename.lower())
    return ext == PDF_EXTENSION or (content_type or "").lower() == PDF_CONTENT_TYPE


def is_plain_text(filename: str, content_type: Optional[str] = None) -> bool:
    _, ext = os.path.splitext(filename.lower())
    return ext in TEXT_EXTENSIONS or (content_type or "").lower().startswith("text/")


class ExtractionClient:
    """Turns an uploaded file into resume text."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or Config.PARSER_SERVICE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else Config.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    async def extract_text(self, filename: str, content: bytes, content_type: Optional[str] = None) -> str:
        """
        Extract text from an uploaded file.

        Returns:
            Non-empty text

        Raises:
            ExtractionError: Unsupported type, unreadable file, service error,
                or nothing left after extraction
        """
        if is_pdf(filename, content_type):
            text = await self._extract_pdf(filename, content)
        elif is_plain_text(filename, content_type):
            try:
                text = content.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise ExtractionError(UNREADABLE_MESSAGE, detail=str(e)) from e
        else:
            raise ExtractionError(UNSUPPORTED_MESSAGE, detail=f"{filename} ({content_type})")

        if not text.strip():
            raise ExtractionError(EMPTY_MESSAGE, detail=filename)
        return text

    async def _extract_pdf(self, filename: str, content: bytes) -> str:
        url = f"{self.base_url}/extract-text"
        files = {"file": (filename, content, PDF_CONTENT_TYPE)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, files=files)
        except httpx.HTTPError as e:
            logger.warning(f"Text extraction request failed: {e}")
            raise ExtractionError(UNREADABLE_MESSAGE, detail=str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if data.get("error") or not response.is_success:
            detail = data.get("error") or f"HTTP {response.status_code}"
            logger.warning(f"Text extraction failed for {filename}: {detail}")
            raise ExtractionError(UNREADABLE_MESSAGE, detail=detail)

        text = data.get("text")
        return text if isinstance(text, str) else ""
