"""Record key derivation from at:// record uris."""

from .exceptions import InvalidRecordUriError


def record_key_from_uri(uri: str) -> str:
    """
    Return the record key (final path segment) of a record uri.

    Args:
        uri: Record uri such as "at://did:plc:abc/app.bsky.feed.post/3k2x7y"

    Returns:
        The record key, e.g. "3k2x7y"

    Raises:
        InvalidRecordUriError: If the uri has no "/" or ends with one
    """
    if "/" not in uri:
        raise InvalidRecordUriError(uri)

    rkey = uri.rsplit("/", 1)[-1]
    if not rkey:
        raise InvalidRecordUriError(uri)

    return rkey
