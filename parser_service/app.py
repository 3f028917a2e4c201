"""
Parser Service - FastAPI application for resume text extraction.

Provides an endpoint that accepts a multipart PDF upload and returns its
plain text, used by the resume upload flow.
"""

import asyncio
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, File, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import settings
from .extractor import UnreadablePDFError, extract_pdf_text

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Parser Service",
    version="0.3.0",
    description="Resume text extraction for uploaded PDFs"
)

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}

# Semaphore for rate limiting
_extract_semaphore = asyncio.Semaphore(settings.max_concurrent_extractions)
_active_extractions = 0


# ============================================================================
# Request/Response Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    timestamp: datetime
    active_extractions: int
    max_concurrent: int


class ExtractTextResponse(BaseModel):
    """Extracted text for one upload."""
    text: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _is_pdf(upload: UploadFile) -> bool:
    filename = (upload.filename or "").lower()
    content_type = (upload.content_type or "").lower()
    return filename.endswith(".pdf") or content_type in PDF_CONTENT_TYPES


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for container orchestration."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        active_extractions=_active_extractions,
        max_concurrent=settings.max_concurrent_extractions,
    )


@app.post("/extract-text", response_model=ExtractTextResponse)
async def extract_text(file: UploadFile = File(...)):
    """
    Extract plain text from an uploaded PDF.

    Returns:
        200 {"text": "..."}
        413 {"error": ...} when the upload is too large
        415 {"error": ...} when the upload is not a PDF
        422 {"error": ...} when the PDF is unreadable or has no text layer
    """
    global _active_extractions

    if not _is_pdf(file):
        return _error(415, "Only PDF files are supported")

    data = await file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        return _error(413, f"File exceeds {settings.max_upload_bytes} bytes")
    if not data:
        return _error(422, "Uploaded file is empty")

    async with _extract_semaphore:
        _active_extractions += 1
        try:
            text = await asyncio.to_thread(extract_pdf_text, data, settings.max_pages)
        except UnreadablePDFError as e:
            logger.warning(f"Unreadable PDF {file.filename!r}: {e}")
            return _error(422, "Could not read PDF")
        except Exception as e:
            logger.error(f"Text extraction failed for {file.filename!r}: {e}", exc_info=True)
            return _error(500, "Text extraction failed")
        finally:
            _active_extractions -= 1

    if not text:
        logger.info(f"No text layer found in {file.filename!r}")
        return _error(422, "No text found in PDF")

    logger.info(f"Extracted {len(text)} chars from {file.filename!r}")
    return ExtractTextResponse(text=text)
