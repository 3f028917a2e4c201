"""
Helper functions for turning uploaded PDFs into plain text.
"""

import re
from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PdfReadError


class UnreadablePDFError(Exception):
    """The upload is not a PDF pypdf can open, or it is encrypted."""


def normalize_whitespace(text: str) -> str:
    """
    Collapse runs of spaces and blank lines left by PDF text extraction.

    Example:
        >>> normalize_whitespace("Senior   Engineer\\n\\n\\n\\nSkills ")
        'Senior Engineer\\n\\nSkills'
    """
    lines = [re.sub(r"[ \t\u00a0]+", " ", line).strip() for line in text.splitlines()]
    collapsed = re.sub(r"\n{3,}", "\n\n", "\n".join(lines))
    return collapsed.strip()


def extract_pdf_text(data: bytes, max_pages: int = 30) -> str:
    """
    Extract text from the first ``max_pages`` pages of a PDF.

    Returns:
        Normalized text; empty if the PDF has no text layer (e.g. scans)

    Raises:
        UnreadablePDFError: If the bytes are not a readable PDF
    """
    try:
        reader = PdfReader(BytesIO(data))
        if reader.is_encrypted:
            raise UnreadablePDFError("PDF is encrypted")
        pages = reader.pages[:max_pages]
        text = "\n".join(page.extract_text() or "" for page in pages)
    except (PdfReadError, ValueError, KeyError, TypeError) as e:
        raise UnreadablePDFError(str(e)) from e

    return normalize_whitespace(text)
