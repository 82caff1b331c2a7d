"""
XRPC transport built on httpx.

Every call resolves to one of three outcomes instead of raising:

- Success: the request completed with a 2xx status and a parseable body
- HttpFailure: the service answered with a non-2xx status
- UnknownFailure: no usable response (network error, undecodable body)

Turning those outcomes into domain errors is the job of
src.bsky.normalizer; the transport itself never raises for them.
"""

import os
from dataclasses import dataclass
from typing import Any, Generic, Optional, Protocol, TypeVar, Union

import httpx
import structlog
from pydantic import BaseModel, ValidationError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_SERVICE_URL = "https://bsky.social"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "bsky-action-client/1.0"


@dataclass(frozen=True)
class Success(Generic[T]):
    """Request completed; value is the decoded (and validated) body."""

    value: T


@dataclass(frozen=True)
class HttpFailure:
    """Service answered with a non-2xx status."""

    status_code: int
    error: Optional[str] = None


@dataclass(frozen=True)
class UnknownFailure:
    """Request produced no usable response."""

    detail: str
    cause: Optional[BaseException] = None


TransportFailure = Union[HttpFailure, UnknownFailure]
TransportResult = Union[Success[Any], HttpFailure, UnknownFailure]


class Transport(Protocol):
    """Contract the action client needs from a request executor."""

    async def query(
        self,
        nsid: str,
        *,
        authorization: str,
        params: Optional[dict[str, Any]] = None,
        response_model: Optional[type[BaseModel]] = None,
    ) -> TransportResult:
        """Execute an XRPC query (HTTP GET)."""
        ...

    async def procedure(
        self,
        nsid: str,
        *,
        authorization: str,
        json: Optional[dict[str, Any]] = None,
        content: Optional[bytes] = None,
        content_type: Optional[str] = None,
        response_model: Optional[type[BaseModel]] = None,
    ) -> TransportResult:
        """Execute an XRPC procedure (HTTP POST)."""
        ...


def _error_detail(response: httpx.Response) -> Optional[str]:
    """
    Extract a human-readable error detail from a failed XRPC response.

    XRPC errors are JSON objects of the form {"error": ..., "message": ...}.
    Anything else falls back to the raw body text.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and (body.get("error") or body.get("message")):
        error = body.get("error")
        message = body.get("message")
        if error and message:
            return f"{error}: {message}"
        return str(error or message)

    text = response.text.strip()
    return text or None


class XrpcTransport:
    """
    httpx-backed XRPC transport.

    Builds requests against {service_url}/xrpc/{nsid} and reports every
    outcome as a TransportResult. Connection pooling and timeouts belong
    to the underlying httpx.AsyncClient.

    Example:
        >>> async with XrpcTransport() as transport:
        ...     result = await transport.query(
        ...         "app.bsky.feed.getTimeline",
        ...         authorization=session.authorization,
        ...     )
    """

    def __init__(
        self,
        service_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize XrpcTransport.

        Args:
            service_url: PDS base url (default: BSKY_SERVICE_URL or https://bsky.social)
            timeout: Request timeout in seconds (default: BSKY_TIMEOUT_SECONDS or 30)
            user_agent: User-Agent header (default: BSKY_USER_AGENT)
            client: Pre-built httpx.AsyncClient; the transport will not close it
        """
        self.service_url = (
            service_url or os.getenv("BSKY_SERVICE_URL", DEFAULT_SERVICE_URL)
        ).rstrip("/")

        if timeout is None:
            timeout = float(os.getenv("BSKY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
        self.timeout = timeout

        user_agent = user_agent or os.getenv("BSKY_USER_AGENT", DEFAULT_USER_AGENT)

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": user_agent},
        )

        logger.info(
            "xrpc_transport_initialized",
            service_url=self.service_url,
            timeout=self.timeout,
        )

    def _url(self, nsid: str) -> str:
        return f"{self.service_url}/xrpc/{nsid}"

    async def query(
        self,
        nsid: str,
        *,
        authorization: str,
        params: Optional[dict[str, Any]] = None,
        response_model: Optional[type[BaseModel]] = None,
    ) -> TransportResult:
        """
        Execute an XRPC query (HTTP GET).

        Args:
            nsid: Method id, e.g. "app.bsky.feed.getTimeline"
            authorization: Authorization header value
            params: Query parameters; entries whose value is None are not sent
            response_model: Optional pydantic model to validate the body into

        Returns:
            TransportResult
        """
        query_params = {k: v for k, v in (params or {}).items() if v is not None}
        return await self._send(
            "GET",
            nsid,
            response_model=response_model,
            headers={"Authorization": authorization},
            params=query_params,
        )

    async def procedure(
        self,
        nsid: str,
        *,
        authorization: str,
        json: Optional[dict[str, Any]] = None,
        content: Optional[bytes] = None,
        content_type: Optional[str] = None,
        response_model: Optional[type[BaseModel]] = None,
    ) -> TransportResult:
        """
        Execute an XRPC procedure (HTTP POST).

        Send either a JSON body or raw bytes. For raw bytes, content_type
        sets the Content-Type header.

        Args:
            nsid: Method id, e.g. "com.atproto.repo.createRecord"
            authorization: Authorization header value
            json: JSON body
            content: Raw body
            content_type: Content-Type of the raw body
            response_model: Optional pydantic model to validate the body into

        Returns:
            TransportResult
        """
        headers = {"Authorization": authorization}
        if content_type is not None:
            headers["Content-Type"] = content_type

        return await self._send(
            "POST",
            nsid,
            response_model=response_model,
            headers=headers,
            json=json,
            content=content,
        )

    async def _send(
        self,
        method: str,
        nsid: str,
        *,
        response_model: Optional[type[BaseModel]],
        **request_kwargs: Any,
    ) -> TransportResult:
        try:
            request = self._client.build_request(
                method, self._url(nsid), **request_kwargs
            )
            response = await self._client.send(request)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            logger.debug(
                "xrpc_request_error",
                nsid=nsid,
                error=str(e),
                error_type=type(e).__name__,
            )
            return UnknownFailure(detail=f"{type(e).__name__}: {e}", cause=e)

        if not response.is_success:
            return HttpFailure(
                status_code=response.status_code,
                error=_error_detail(response),
            )

        try:
            body = response.json() if response.content else None
            if response_model is not None:
                return Success(response_model.model_validate(body))
            return Success(body)
        except (ValueError, ValidationError) as e:
            logger.debug(
                "xrpc_response_unparseable",
                nsid=nsid,
                status_code=response.status_code,
                error_type=type(e).__name__,
            )
            return UnknownFailure(
                detail=f"unparseable response from {nsid} ({response.status_code})",
                cause=e,
            )

    async def aclose(self) -> None:
        """Close the underlying httpx client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
            logger.info("xrpc_transport_closed")

    async def __aenter__(self) -> "XrpcTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
