"""HTTP transport used to download pages, manifests and favicons.

`Client` is the interface the favicon pipeline depends on. `HttpClient` is the
default implementation on top of `httpx.Client`.
"""

import logging
from types import MappingProxyType
from typing import Mapping, Optional, Protocol

import httpx

from faviconkit.configs import settings
from faviconkit.exceptions import TransportError
from faviconkit.models import HttpResponse

logger = logging.getLogger(__name__)


class Client(Protocol):
    """Protocol for the HTTP transport the favicon pipeline depends on.

    Implementations must be safe to share between threads and must not keep
    per-request state.
    """

    def get(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:  # pragma: no cover
        """Issue a GET request. Raise TransportError if no response was received."""
        ...


def create_http_client(
    connect_timeout: float = 1.0,
    request_timeout: float = 5.0,
    retries: int = 0,
) -> httpx.Client:
    """Create a new `httpx.Client` with common configurations.

    Args:
      - `connect_timeout` {float}: The timeout for establishing a connection to the host.
      - `request_timeout` {float}: The timeout for handling a request to the host,
        also used for acquiring a connection from the pool.
      - `retries` {int}: How many times the transport retries a failed connection attempt.
    Returns:
      - {httpx.Client}: A synchronous HTTP client.
    """
    return httpx.Client(
        timeout=httpx.Timeout(request_timeout, connect=connect_timeout),
        transport=httpx.HTTPTransport(retries=retries),
    )


class HttpClient:
    """Default `Client`: immutable transport configuration around a pooled `httpx.Client`.

    Use as context manager, or call `close()` when done.
    """

    def __init__(
        self,
        timeout: float = 15.0,
        connect_timeout: float = 5.0,
        headers: Optional[Mapping[str, str]] = None,
        retries: int = 0,
        follow_redirects: bool = True,
    ) -> None:
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.retries = retries
        self.follow_redirects = follow_redirects
        self.headers: Mapping[str, str] = MappingProxyType(dict(headers or {}))
        self.session = create_http_client(
            request_timeout=timeout,
            connect_timeout=connect_timeout,
            retries=retries,
        )

    @classmethod
    def from_settings(cls, headers: Optional[Mapping[str, str]] = None) -> "HttpClient":
        """Build a client from the `http` settings, with `headers` overriding the defaults."""
        http_settings = settings.http
        default_headers = {"User-Agent": http_settings.user_agent}
        default_headers.update(headers or {})
        return cls(
            timeout=float(http_settings.timeout_sec),
            connect_timeout=float(http_settings.connect_timeout_sec),
            headers=default_headers,
            retries=int(http_settings.retries),
            follow_redirects=bool(http_settings.follow_redirects),
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def get(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """Fetch URL and return its status and body, whatever the status code."""
        request_headers = {**self.headers, **(headers or {})}
        request_timeout = httpx.Timeout(
            timeout if timeout is not None else self.timeout, connect=self.connect_timeout
        )
        # Header values httpx can't encode raise UnicodeEncodeError, a ValueError
        try:
            response = self.session.get(
                url,
                headers=request_headers,
                timeout=request_timeout,
                follow_redirects=self.follow_redirects,
            )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.debug(f"Failed to fetch URL {url}: {e}")
            raise TransportError(f"GET {url} failed: {e}") from e

        return HttpResponse(
            url=str(response.url),
            status_code=response.status_code,
            content=response.content,
            content_type=response.headers.get("Content-Type"),
        )

    def close(self) -> None:
        """Close HTTP session and release resources."""
        self.session.close()
