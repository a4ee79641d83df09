"""Errors raised by chat providers."""

from __future__ import annotations


class LLMError(Exception):
    """Base class for provider failures."""


class ConfigError(LLMError):
    """Missing or invalid provider settings (credentials, provider name)."""

    def __str__(self) -> str:
        return f"Configuration error: {super().__str__()}"


class NetworkError(LLMError):
    """The provider could not be reached or the connection dropped."""

    def __str__(self) -> str:
        return f"Network error: {super().__str__()}"


class InvalidRequestError(LLMError):
    """The outgoing request was malformed or rejected as such."""

    def __str__(self) -> str:
        return f"Invalid request: {super().__str__()}"


class ApiError(LLMError):
    """The provider answered with an error status.

    Attributes:
        status: HTTP status code, None when the error arrived in-stream.
        body: Response body or provider error message.
    """

    def __init__(self, status: int | None, body: str) -> None:
        super().__init__(status, body)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        if self.status is None:
            return f"API error: {self.body}"
        return f"API error ({self.status}): {self.body}"
