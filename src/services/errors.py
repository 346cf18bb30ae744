"""Error types raised by the indexing, vision and search services."""

from typing import Optional


class VideoSearchError(Exception):
    """Base error for video search operations."""

    pass


class AuthFailure(VideoSearchError):
    """Access token could not be acquired or was unparsable."""

    pass


class InputFailure(VideoSearchError):
    """Request payload was missing or malformed (e.g. no file attached)."""

    pass


class UpstreamFailure(VideoSearchError):
    """A remote service returned a non-success response.

    Carries the status code, status text and raw response body so callers can
    log full diagnostics while showing the user a short message.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        status_text: Optional[str] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.status_text = status_text
        self.body = body

    def to_dict(self) -> dict:
        """Diagnostic fields for structured logging."""
        return {
            "message": str(self),
            "status": self.status,
            "status_text": self.status_text,
            "body": self.body,
        }
