"""
TokenPulse - Analysis API Client

Async HTTP client for the analysis endpoint. Every failure, whatever its
cause, surfaces as AnalysisRequestError carrying a user-facing message.
"""

from __future__ import annotations

import httpx

from tokenpulse.config import settings
from tokenpulse.errors import AnalysisRequestError
from tokenpulse.logging import get_client_logger
from tokenpulse.models import AnalysisResponse, AnalysisResult

logger = get_client_logger()


class AnalysisClient:
    """Client for ``POST /api/ai-analysis``."""

    ENDPOINT = "/api/ai-analysis"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.client.api_url).rstrip("/")
        self.timeout = timeout or settings.client.timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def analyze(self, token_address: str, prompt: str | None = None) -> AnalysisResult:
        """
        Request an analysis for a token.

        Raises:
            AnalysisRequestError: on any non-2xx answer, transport failure
                or unparseable body
        """
        payload = {"tokenIdentifier": token_address, "userPrompt": prompt or ""}

        try:
            response = await self._client().post(
                f"{self.base_url}{self.ENDPOINT}",
                json=payload,
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.warning("analysis_transport_error", token_address=token_address, error=str(e))
            raise AnalysisRequestError(str(e) or "Failed to fetch AI analysis") from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning(
                "analysis_request_rejected",
                token_address=token_address,
                status=response.status_code,
                error=message,
            )
            raise AnalysisRequestError(message, status=response.status_code)

        try:
            return AnalysisResponse.model_validate(response.json()).to_result()
        except ValueError as e:
            logger.warning("analysis_response_invalid", token_address=token_address, error=str(e))
            raise AnalysisRequestError("Invalid response from analysis API", status=response.status_code) from e

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


def _error_message(response: httpx.Response) -> str:
    """The server's ``error`` text, or a generic status message."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("error"), str) and data["error"]:
        return data["error"]
    return f"API Error: {response.status_code}"
