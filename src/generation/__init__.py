"""
Generation gateway: prompt formatting and completion-provider calls for
the resume rewrite and the cover letter.
"""

from src.generation.gateway import (
    COVER_LETTER_GATEWAY,
    RESUME_GATEWAY,
    GenerationGateway,
    get_gateway,
)
from src.generation.prompts import format_prompt

__all__ = [
    "GenerationGateway",
    "RESUME_GATEWAY",
    "COVER_LETTER_GATEWAY",
    "get_gateway",
    "format_prompt",
]
