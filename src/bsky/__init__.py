"""
Bluesky action client.

This package provides the complete authenticated client including:
- BskyActionClient: timeline, vote, repost, post, reply, delete, upload
- XrpcTransport: httpx-backed request executor with three-way results
- ErrorNormalizer: maps every failure onto AuthExpiredError or RequestFailedError
- Custom exception hierarchy for error handling

Example:
    >>> from src.bsky import BskyActionClient, XrpcTransport
    >>> async with XrpcTransport() as transport:
    ...     client = BskyActionClient(transport)
    ...     timeline = await client.get_timeline(session)
"""

from src.bsky.client import BskyActionClient
from src.bsky.exceptions import (
    BskyAPIError,
    AuthExpiredError,
    RequestFailedError,
    InvalidRecordUriError,
)
from src.bsky.normalizer import (
    ErrorNormalizer,
    normalizer,
    classify_failure,
    raise_for_failure,
)
from src.bsky.record_keys import record_key_from_uri
from src.bsky.transport import (
    Success,
    HttpFailure,
    UnknownFailure,
    Transport,
    TransportResult,
    XrpcTransport,
)

__all__ = [
    # Client
    "BskyActionClient",
    # Exceptions
    "BskyAPIError",
    "AuthExpiredError",
    "RequestFailedError",
    "InvalidRecordUriError",
    # Normalizer
    "ErrorNormalizer",
    "normalizer",
    "classify_failure",
    "raise_for_failure",
    # Record keys
    "record_key_from_uri",
    # Transport
    "Success",
    "HttpFailure",
    "UnknownFailure",
    "Transport",
    "TransportResult",
    "XrpcTransport",
]
