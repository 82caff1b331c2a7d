"""
Failure normalization for Bluesky XRPC calls.

Whatever action produced it, a failed TransportResult is classified
here and nowhere else:

- HttpFailure with status 401 -> AuthExpiredError
- HttpFailure with any other status -> RequestFailedError
- UnknownFailure -> RequestFailedError without a status code
"""

from typing import NoReturn

import structlog

from .exceptions import AuthExpiredError, BskyAPIError, RequestFailedError
from .transport import HttpFailure, TransportFailure, UnknownFailure


logger = structlog.get_logger(__name__)

UNAUTHORIZED = 401


class ErrorNormalizer:
    """
    Maps transport failures onto the client's two error kinds.

    All methods are static and can be called without instantiation.

    Example:
        >>> error = ErrorNormalizer.classify(HttpFailure(401, "ExpiredToken"))
        >>> isinstance(error, AuthExpiredError)
        True
    """

    @staticmethod
    def classify(failure: TransportFailure) -> BskyAPIError:
        """
        Classify a transport failure without raising it.

        Args:
            failure: HttpFailure or UnknownFailure

        Returns:
            AuthExpiredError or RequestFailedError carrying the status and
            detail available on the failure
        """
        if isinstance(failure, HttpFailure):
            if failure.status_code == UNAUTHORIZED:
                return AuthExpiredError(detail=failure.error, status_code=failure.status_code)
            return RequestFailedError(status_code=failure.status_code, detail=failure.error)

        if isinstance(failure, UnknownFailure):
            return RequestFailedError(detail=f"unknown failure: {failure.detail}")

        return RequestFailedError(detail=f"unknown failure: {failure!r}")

    @staticmethod
    def raise_for_failure(failure: TransportFailure, operation: str) -> NoReturn:
        """
        Log and raise the domain error for a transport failure.

        Args:
            failure: HttpFailure or UnknownFailure
            operation: Name of the client action that failed

        Raises:
            AuthExpiredError: If the service answered 401
            RequestFailedError: For every other failure
        """
        error = ErrorNormalizer.classify(failure)
        log = logger.warning if isinstance(error, AuthExpiredError) else logger.error
        log(
            "bsky_request_failed",
            operation=operation,
            error_kind=type(error).__name__,
            status_code=error.status_code,
            detail=error.detail,
        )

        cause = failure.cause if isinstance(failure, UnknownFailure) else None
        raise error from cause


# Singleton instance for convenient import
normalizer = ErrorNormalizer()


def classify_failure(failure: TransportFailure) -> BskyAPIError:
    """Convenience function for ErrorNormalizer.classify."""
    return ErrorNormalizer.classify(failure)


def raise_for_failure(failure: TransportFailure, operation: str) -> NoReturn:
    """Convenience function for ErrorNormalizer.raise_for_failure."""
    ErrorNormalizer.raise_for_failure(failure, operation)
