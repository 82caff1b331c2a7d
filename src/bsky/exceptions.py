"""
Custom exceptions for the Bluesky action client.

Callers only ever see two kinds of failure: AuthExpiredError when the
session's access token is no longer accepted, and RequestFailedError for
everything else. Both derive from BskyAPIError so a single except clause
can catch any client failure.
"""

from typing import Optional


def _with_detail(summary: str, detail: Optional[str]) -> str:
    """Append "(detail)" to summary when a detail is available."""
    if detail is None:
        return summary
    return f"{summary} ({detail})"


class BskyAPIError(Exception):
    """
    Base exception for all Bluesky API related errors.

    Use this for catching any failure raised by the action client.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> None:
        """
        Initialize BskyAPIError.

        Args:
            message: Error description
            status_code: HTTP status code, or None when the failure never
                produced a response
            detail: Server-provided (or synthetic) error detail
        """
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(self.message)


class AuthExpiredError(BskyAPIError):
    """
    Raised when the remote service rejects the session credential (HTTP 401).

    The caller should re-authenticate and must not retry the same call
    with the same Session.

    Example:
        >>> raise AuthExpiredError(detail="ExpiredToken: Token has expired")
    """

    def __init__(self, detail: Optional[str] = None, status_code: int = 401) -> None:
        """
        Initialize AuthExpiredError.

        Args:
            detail: Server-provided error detail
            status_code: HTTP status code (always 401 in practice)
        """
        super().__init__(
            _with_detail(f"Unauthorized: {status_code}", detail),
            status_code=status_code,
            detail=detail,
        )


class RequestFailedError(BskyAPIError):
    """
    Raised for every failure that is not an expired credential.

    This covers non-401 HTTP statuses, network failures and responses
    that could not be parsed. status_code is None when no HTTP status
    was observed.

    Example:
        >>> raise RequestFailedError(status_code=400, detail="InvalidRequest: bad cursor")
    """

    def __init__(
        self,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        """
        Initialize RequestFailedError.

        Args:
            status_code: HTTP status code, if any
            detail: Server-provided or synthetic error detail
            message: Optional custom error message
        """
        if message is None:
            if status_code is None:
                message = _with_detail("Request failed", detail)
            else:
                message = _with_detail(f"HttpError: {status_code}", detail)

        super().__init__(message, status_code=status_code, detail=detail)


class InvalidRecordUriError(RequestFailedError):
    """
    Raised when a record key cannot be derived from a record uri.

    Detected locally before any request is sent, so status_code is None.

    Example:
        >>> raise InvalidRecordUriError("at://did:plc:abc/app.bsky.feed.post/")
    """

    def __init__(self, uri: str) -> None:
        """
        Initialize InvalidRecordUriError.

        Args:
            uri: The offending record uri
        """
        self.uri = uri
        super().__init__(
            detail=f"invalid record uri: {uri!r}",
            message=f"Cannot derive record key from uri {uri!r}",
        )
