"""
TokenPulse - Error Taxonomy

Typed failures raised by the analysis pipeline and the analysis client.
Server-side errors carry the HTTP status they map to.
"""

from __future__ import annotations


class TokenPulseError(Exception):
    """Base class for analysis pipeline failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(TokenPulseError):
    """The token address is missing or malformed."""

    status_code = 400


class Misconfigured(TokenPulseError):
    """A required setting (the model credential) is absent."""

    status_code = 500


class NotFound(TokenPulseError):
    """The market-data provider knows no tradable pair for the token."""

    status_code = 404


class UpstreamUnavailable(TokenPulseError):
    """An external provider answered with an error or could not be reached."""

    status_code = 500

    def __init__(self, provider: str, status: int | None = None, message: str | None = None) -> None:
        self.provider = provider
        self.status = status
        if message is None:
            message = f"Failed to fetch token data from {provider}"
            if status is not None:
                message = f"{message} (HTTP {status})"
        super().__init__(message)


class InferenceFailed(TokenPulseError):
    """The model provider failed; the message is the provider's own text."""

    status_code = 500


# =============================================================================
# Client-side errors
# =============================================================================

class AnalysisRequestError(Exception):
    """An analysis request failed as seen from the client."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class RequestCancelled(Exception):
    """A request was superseded or its controller released; never shown."""
