"""Transport layer for form submissions.

The submission coordinator never talks to the network itself; it calls an
injected transport implementing the ``Transport`` protocol. ``HttpxTransport``
is the default implementation, built on ``httpx.AsyncClient``.

A transport resolves with a response object on success. On failure it raises
an exception which, when the server answered, carries a ``response``
attribute exposing the decoded payload as ``response.data``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx
from typing_extensions import Protocol, runtime_checkable

from formbinder.errors import FormBinderError

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Capability performing a single HTTP exchange.

    ``data`` is the request body (non-get methods); ``params`` the query
    parameters (get). Any extra keyword options are transport specific.
    """

    async def request(
        self,
        *,
        url: str,
        method: str,
        data: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        **extra: Any,
    ) -> Any:
        ...


def decode_body(response: httpx.Response) -> Any:
    """Decode an httpx response body: JSON when possible, else text, None if empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


@dataclass(frozen=True)
class TransportResponse:
    """Response returned (or carried by a failure) from HttpxTransport.

    Attributes:
        status_code: HTTP status code
        data: Decoded body (JSON value, text, or None when empty)
        headers: Response headers
        url: Final request URL
    """
    status_code: int
    data: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    url: str = ""

    @property
    def ok(self) -> bool:
        """True for non-error status codes."""
        return self.status_code < 400

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "TransportResponse":
        """Create TransportResponse from an httpx response."""
        return cls(
            status_code=response.status_code,
            data=decode_body(response),
            headers=dict(response.headers),
            url=str(response.request.url),
        )


class TransportError(FormBinderError):
    """Raised by a transport when a request fails.

    Attributes:
        response: The server response, or None when no response was received
            (connection failure, timeout...)
    """

    def __init__(self, message: str, response: Optional[TransportResponse] = None):
        self.response = response
        super().__init__(message)


class HttpxTransport:
    """Default transport backed by ``httpx.AsyncClient``.

    Non-get payloads are sent as JSON bodies. HTTP error statuses raise
    TransportError carrying the decoded response; network failures raise
    TransportError without one.

    Examples:
        >>> transport = HttpxTransport(base_url="https://api.example.com")
        >>> # response = await transport.request(url="/users", method="post", data={"name": "Ada"})
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, **client_options: Any):
        """Initialize the transport.

        Args:
            client: Existing client to use; it is not closed by ``aclose``
            **client_options: Options for a client created by the transport
        """
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(**client_options)

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def request(
        self,
        *,
        url: str,
        method: str,
        data: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        **extra: Any,
    ) -> TransportResponse:
        """Perform the request and decode the response.

        Raises:
            TransportError: On HTTP error status or network failure
        """
        try:
            response = await self._client.request(
                method.upper(), url, json=data, params=params, **extra
            )
        except httpx.RequestError as exc:
            logger.debug("Request %s %s failed: %s", method.upper(), url, exc)
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        result = TransportResponse.from_httpx(response)
        if response.is_error:
            raise TransportError(
                f"{method.upper()} {url} returned HTTP {response.status_code}",
                response=result,
            )
        return result

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = [
    "Transport",
    "TransportResponse",
    "TransportError",
    "HttpxTransport",
    "decode_body",
]
