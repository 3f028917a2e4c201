"""
Async client for the two generation endpoints.

Every failure (transport error, non-2xx, malformed or empty body) is
converted into a single GatewayError carrying a user-facing message.
"""

import logging
from typing import Optional

import httpx

from src.common.config import Config
from src.common.error_handling import GatewayError
from src.common.types import ArtifactKind, GenerationRequest

logger = logging.getLogger(__name__)

ENDPOINTS = {
    ArtifactKind.RESUME: "/api/generate-resume",
    ArtifactKind.COVER: "/api/generate-cover-letter",
}


def default_failure_message(kind: ArtifactKind) -> str:
    return f"Failed to generate {ArtifactKind(kind).label}"


class GatewayClient:
    """POSTs generation requests to the generation API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or Config.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else Config.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    async def generate(self, kind: ArtifactKind, request: GenerationRequest) -> str:
        """
        Request one artifact.

        Returns:
            The generated, non-empty text

        Raises:
            GatewayError: With the server's error message when present,
                otherwise a generic per-artifact message
        """
        kind = ArtifactKind(kind)
        fallback = default_failure_message(kind)
        url = f"{self.base_url}{ENDPOINTS[kind]}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=request.to_payload())
        except httpx.HTTPError as e:
            logger.warning(f"Generation request for {kind.value} failed: {e}")
            raise GatewayError(fallback, detail=str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.is_success:
            message = data.get("error") or fallback
            logger.warning(f"Generation endpoint returned {response.status_code} for {kind.value}: {message}")
            raise GatewayError(message, detail=f"HTTP {response.status_code}")

        result = data.get("result")
        if not isinstance(result, str) or not result:
            raise GatewayError(fallback, detail="Response did not contain a result")

        return result
