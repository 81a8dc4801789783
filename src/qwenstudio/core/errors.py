"""Failure kinds raised while serving a generation request.

Each class carries the HTTP status it maps to and renders the JSON payload the
client sees.  Route handlers raise these and let a single boundary in
:mod:`qwenstudio.api.main` turn them (and any other exception) into a response.
"""

from __future__ import annotations

from typing import Any

_NO_DETAILS = object()


class StudioError(Exception):
    """Base class for errors with a known status and client-facing message."""

    status_code: int = 500

    def __init__(self, message: str, *, details: Any = _NO_DETAILS) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def has_details(self) -> bool:
        return self.details is not _NO_DETAILS

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON error body, ``{"error": ...}`` plus optional ``details``."""
        payload: dict[str, Any] = {"error": self.message}
        if self.has_details:
            payload["details"] = self.details
        return payload


class PromptRequiredError(StudioError):
    """The request carried no prompt text after trimming."""

    status_code = 400

    def __init__(self) -> None:
        super().__init__("Prompt is required")


class MissingCredentialError(StudioError):
    """No provider access token is configured."""

    def __init__(self) -> None:
        super().__init__("Missing HF_TOKEN in .env.local")


class ProviderOutputError(StudioError):
    """The provider returned something that breaks its output contract."""


class MalformedDataUrlError(ProviderOutputError):
    def __init__(self) -> None:
        super().__init__("Bad data URL returned from provider")


class UnexpectedOutputError(ProviderOutputError):
    def __init__(self, details: Any) -> None:
        super().__init__("Unexpected provider output format", details=details)


class UpstreamFetchError(StudioError):
    """Dereferencing a provider-returned image URL did not succeed."""

    def __init__(self, status: int) -> None:
        super().__init__(f"Failed to fetch generated image: {status}")
        self.status = status
