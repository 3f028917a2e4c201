"""
Generation Gateway.

Receives ``{resume, jobDescription}``, validates presence, sends the fixed
system + user prompt pair to the completion provider and returns the
trimmed text of the first message. One class, two instances: the resume
rewrite and the cover letter.

Response contract (payload, HTTP status):
    200 {"result": "<non-empty trimmed text>"}
    400 {"error": "Missing resume or job description"}
    500 {"error": "Something went wrong generating the <artifact>."}

No retry, no backoff, no streaming.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from src.common.error_handling import EmptyCompletionError
from src.common.llm_factory import create_llm
from src.common.types import ArtifactKind, GenerationRequest
from src.generation.prompts import format_prompt

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing resume or job description"


class GenerationGateway:
    """
    Pass-through from a generation request to the completion provider.

    The chat model is created lazily on first use so that importing the
    web app never requires provider credentials.
    """

    def __init__(
        self,
        kind: ArtifactKind,
        llm_factory: Callable[..., BaseChatModel] = create_llm,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ):
        self.kind = ArtifactKind(kind)
        self._llm_factory = llm_factory
        self._model = model
        self._temperature = temperature
        self._llm: Optional[BaseChatModel] = None

    @property
    def failure_message(self) -> str:
        return f"Something went wrong generating the {self.kind.label}."

    def _get_llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = self._llm_factory(model=self._model, temperature=self._temperature)
        return self._llm

    @staticmethod
    def parse_request(payload: Any) -> Optional[GenerationRequest]:
        """
        Extract a complete request from a JSON body.

        Returns None when the body is not an object or either field is
        absent, empty or not a string.
        """
        if not isinstance(payload, dict):
            return None

        resume = payload.get("resume")
        job_description = payload.get("jobDescription")
        if not isinstance(resume, str) or not isinstance(job_description, str):
            return None

        request = GenerationRequest(resume_text=resume, job_description_text=job_description)
        return request if request.is_complete else None

    def complete(self, request: GenerationRequest) -> str:
        """
        Run one completion and return the trimmed text.

        Raises:
            EmptyCompletionError: If the provider returned no text
            Exception: Any provider/transport error, unchanged
        """
        system_prompt, user_prompt = format_prompt(
            self.kind, request.resume_text, request.job_description_text
        )

        response = self._get_llm().invoke([
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ])

        content = response.content if isinstance(response.content, str) else ""
        text = content.strip()
        if not text:
            raise EmptyCompletionError(f"Completion provider returned no text for {self.kind.value}")
        return text

    def handle(self, payload: Any) -> Tuple[Dict[str, str], int]:
        """Validate, complete and shape the HTTP response."""
        request = self.parse_request(payload)
        if request is None:
            return {"error": MISSING_FIELDS_MESSAGE}, 400

        try:
            text = self.complete(request)
        except Exception as e:
            logger.error(f"Error generating {self.kind.value}: {e}", exc_info=True)
            return {"error": self.failure_message}, 500

        logger.info(f"Generated {self.kind.value} ({len(text)} chars)")
        return {"result": text}, 200


RESUME_GATEWAY = GenerationGateway(ArtifactKind.RESUME)
COVER_LETTER_GATEWAY = GenerationGateway(ArtifactKind.COVER)

_GATEWAYS = {
    ArtifactKind.RESUME: RESUME_GATEWAY,
    ArtifactKind.COVER: COVER_LETTER_GATEWAY,
}


def get_gateway(kind: ArtifactKind) -> GenerationGateway:
    """Return the shared gateway instance for an artifact kind."""
    return _GATEWAYS[ArtifactKind(kind)]
