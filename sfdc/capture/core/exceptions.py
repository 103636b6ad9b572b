"""Custom exception hierarchy."""

from __future__ import annotations


class CaptureError(Exception):
    """Base exception for all library errors."""

    pass


class TransportError(CaptureError):
    """Network-level failure: connection refused, reset, timed out."""

    pass


class ResponseError(CaptureError):
    """Server answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthError(ResponseError):
    """Credentials rejected (401/403).

    The caller needs to re-authenticate before retrying; the captured
    session or bearer token is no longer accepted.
    """

    pass


class ServerError(ResponseError):
    """Non-success status other than an auth failure, or an action-level error."""

    pass


class ParseError(CaptureError):
    """Response body is not valid JSON or not the expected shape."""

    pass


class ProtocolError(CaptureError):
    """Replay context is missing, incomplete, or the server looped."""

    pass


def error_for_status(status: int, message: str) -> ResponseError:
    """Map an HTTP status to the matching ResponseError subclass."""
    if status in (401, 403):
        return AuthError(message, status_code=status)
    return ServerError(message, status_code=status)
