"""
Export Adapter.

Lays result text out as fixed-size lines on A4 pages and writes the PDF.
Lines are wrapped to the usable width; a new page starts whenever the next
line would cross the bottom margin.
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import List, Tuple, Union

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from src.common.error_handling import ExportError
from src.common.types import ArtifactKind

logger = logging.getLogger(__name__)

MARGIN = 40
LINE_HEIGHT = 16
FONT_NAME = "Helvetica"
FONT_SIZE = 12

EXPORT_FAILED_MESSAGE = "Could not generate PDF"

FILE_NAMES = {
    ArtifactKind.RESUME: "ai-optimized-resume.pdf",
    ArtifactKind.COVER: "ai-cover-letter.pdf",
}


def file_name_for(kind: ArtifactKind) -> str:
    return FILE_NAMES[ArtifactKind(kind)]


class ExportAdapter:
    """Paginates plain text into a PDF document."""

    def __init__(
        self,
        page_size: Tuple[float, float] = A4,
        margin: float = MARGIN,
        line_height: float = LINE_HEIGHT,
        font_name: str = FONT_NAME,
        font_size: float = FONT_SIZE,
    ):
        self.page_width, self.page_height = page_size
        self.margin = margin
        self.line_height = line_height
        self.font_name = font_name
        self.font_size = font_size

    @property
    def usable_width(self) -> float:
        return self.page_width - self.margin * 2

    def wrap_lines(self, text: str) -> List[str]:
        """Split text into lines that fit the usable width. Blank lines are kept."""
        lines: List[str] = []
        for paragraph in text.replace("\r\n", "\n").split("\n"):
            paragraph = paragraph.expandtabs(4)
            if not paragraph.strip():
                lines.append("")
                continue
            lines.extend(simpleSplit(paragraph, self.font_name, self.font_size, self.usable_width))
        return lines

    def paginate(self, text: str) -> List[List[str]]:
        """
        Group wrapped lines into pages.

        ``y`` is the distance of the next baseline from the top edge.
        """
        pages: List[List[str]] = [[]]
        y = self.margin
        for line in self.wrap_lines(text):
            if y + self.line_height > self.page_height - self.margin:
                pages.append([])
                y = self.margin
            pages[-1].append(line)
            y += self.line_height
        return pages

    def render(self, text: str) -> bytes:
        """
        Render text to PDF bytes.

        Raises:
            ExportError: If rendering fails for any reason
        """
        try:
            buffer = BytesIO()
            pdf = canvas.Canvas(buffer, pagesize=(self.page_width, self.page_height))
            pdf.setFont(self.font_name, self.font_size)

            pages = self.paginate(text)
            for index, page in enumerate(pages):
                if index > 0:
                    pdf.showPage()
                    pdf.setFont(self.font_name, self.font_size)
                y = self.margin
                for line in page:
                    # reportlab's origin is the bottom-left corner
                    pdf.drawString(self.margin, self.page_height - y, line)
                    y += self.line_height

            pdf.save()
            return buffer.getvalue()
        except Exception as e:
            logger.error(f"PDF rendering failed: {e}", exc_info=True)
            raise ExportError(EXPORT_FAILED_MESSAGE, detail=str(e)) from e

    def export(self, kind: ArtifactKind, text: str, directory: Union[str, Path]) -> Path:
        """
        Render and write the PDF for an artifact.

        Returns:
            Path of the written file (name derived from the artifact kind)

        Raises:
            ExportError: If rendering or writing fails
        """
        data = self.render(text)
        path = Path(directory) / file_name_for(kind)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error(f"Could not write {path}: {e}")
            raise ExportError(EXPORT_FAILED_MESSAGE, detail=str(e)) from e

        logger.info(f"Exported {kind.value} PDF to {path} ({len(data)} bytes)")
        return path
