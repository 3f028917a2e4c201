"""
Flask application for the Resume Studio generation API.

Provides:
- POST /api/generate-resume        Tailored resume rewrite
- POST /api/generate-cover-letter  Tailored cover letter
- POST /api/export-pdf             Result text as a downloadable PDF
- GET  /health                     Public health check

Stack: Flask + LangChain/OpenAI
"""

import logging
import os
import sys
from io import BytesIO

from dotenv import load_dotenv
from flask import Flask, jsonify, request, send_file

# Load environment variables
load_dotenv()

# Import version (from parent directory)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
try:
    from version import __version__
    APP_VERSION = __version__
except ImportError:
    APP_VERSION = "dev"

from src.common.config import Config
from src.common.error_handling import ExportError
from src.common.types import ArtifactKind
from src.generation.gateway import get_gateway
from src.workflow.export import ExportAdapter, file_name_for

app = Flask(__name__)

# Configure logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

exporter = ExportAdapter()


# ============================================================================
# Generation Endpoints
# ============================================================================

def _generate(kind: ArtifactKind):
    payload = request.get_json(silent=True)
    body, status = get_gateway(kind).handle(payload)
    return jsonify(body), status


@app.route("/api/generate-resume", methods=["POST"])
def generate_resume():
    """
    Rewrite a resume for a specific job description.

    Request Body:
        resume: Candidate's current resume text
        jobDescription: Target job description text

    Returns:
        200 {"result": str} | 400 {"error": str} | 500 {"error": str}
    """
    return _generate(ArtifactKind.RESUME)


@app.route("/api/generate-cover-letter", methods=["POST"])
def generate_cover_letter():
    """
    Write a cover letter for a specific job description.

    Request Body and Returns: same as /api/generate-resume.
    """
    return _generate(ArtifactKind.COVER)


# ============================================================================
# Export
# ============================================================================

@app.route("/api/export-pdf", methods=["POST"])
def export_pdf():
    """
    Render result text as a PDF attachment.

    Request Body:
        kind: "resume" or "cover"
        text: Text to render

    Returns:
        application/pdf named ai-optimized-resume.pdf / ai-cover-letter.pdf
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        kind = ArtifactKind(data.get("kind"))
    except ValueError:
        return jsonify({"error": "kind must be 'resume' or 'cover'"}), 400

    text = data.get("text")
    if not isinstance(text, str) or not text:
        return jsonify({"error": "text is required"}), 400

    try:
        pdf_bytes = exporter.render(text)
    except ExportError as e:
        return jsonify({"error": e.message}), 500

    return send_file(
        BytesIO(pdf_bytes),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=file_name_for(kind),
    )


# ============================================================================
# Health
# ============================================================================

@app.route("/health", methods=["GET"])
def public_health_check():
    """Public health check for load balancers and uptime monitors."""
    return jsonify({
        "status": "healthy",
        "version": APP_VERSION,
        "model": Config.GENERATION_MODEL,
        "ai_enabled": bool(Config.OPENAI_API_KEY),
    })


if __name__ == "__main__":
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=os.getenv("FLASK_DEBUG") == "1")
