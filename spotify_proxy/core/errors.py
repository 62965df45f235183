"""
Exception taxonomy shared by the OAuth coordinator and the data relay.

Each error carries the HTTP status it is surfaced with; the translation into
responses happens in the exception handlers registered by ``create_app``.
"""

from __future__ import annotations

from http import HTTPStatus


class SpotifyProxyError(Exception):
    """Base class for errors that terminate the current request."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(SpotifyProxyError):
    """Raised when the Spotify application credentials are not configured."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


class CallbackValidationError(SpotifyProxyError):
    """Raised when an OAuth callback is malformed or its state is unknown."""

    status_code = HTTPStatus.BAD_REQUEST


class UpstreamAuthError(SpotifyProxyError):
    """Raised when the Spotify token endpoint rejects the code exchange."""

    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str, *, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class NoCredentialError(SpotifyProxyError):
    """Raised when no stored, unexpired credential is available."""

    status_code = HTTPStatus.UNAUTHORIZED


class UpstreamDataError(SpotifyProxyError):
    """Raised when a Spotify Web API call answers with a non-success status."""

    def __init__(self, message: str, *, upstream_status: int) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.status_code = upstream_status


__all__ = [
    "CallbackValidationError",
    "ConfigurationError",
    "NoCredentialError",
    "SpotifyProxyError",
    "UpstreamAuthError",
    "UpstreamDataError",
]
