"""HTTP transport for the Graph API.

Every request the library issues goes through a RestCall built by
``new_call``. The call is bound to the configured endpoint and has the
authorizer's credentials stamped on it before it is handed back, so callers
only set the method, the function path and their own parameters.

Configuration:
- FBGRAPH_ENDPOINT: Base URL (default: https://graph.facebook.com)
- FBGRAPH_TIMEOUT: Request timeout in seconds
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import httpx

from .config import get_settings
from .errors import RemoteError, TransportFailure

if TYPE_CHECKING:
    from .authorizer import Authorizer

logger = logging.getLogger(__name__)


class RestProxy:
    """Factory for HTTP clients bound to one Graph endpoint."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the proxy.

        Args:
            endpoint: Graph API base URL. If None, loaded from settings.
            timeout: Request timeout in seconds. If None, loaded from settings.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        settings = get_settings()

        self.endpoint = (endpoint or settings.endpoint).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.timeout
        self.transport = transport

    def client(self) -> httpx.Client:
        """Create a new HTTP client. Callers own (and must close) it."""
        return httpx.Client(timeout=self.timeout, transport=self.transport)

    def new_call(self) -> "RestCall":
        return RestCall(self)


def get_proxy() -> RestProxy:
    """Return a proxy configured from the current settings."""
    return RestProxy()


def new_call(authorizer: "Authorizer", proxy: Optional[RestProxy] = None) -> "RestCall":
    """Create a call bound to the Graph endpoint with credentials applied.

    Args:
        authorizer: Authorizer whose process_call stamps the call.
        proxy: Proxy to bind to. If None, one is built from settings.

    Returns:
        A RestCall ready for method, function and parameters.
    """
    call = (proxy or get_proxy()).new_call()
    authorizer.process_call(call)
    return call


class RestCall:
    """A single Graph API request and, once sent, its response."""

    METHODS = ("GET", "POST", "DELETE")

    def __init__(self, proxy: RestProxy):
        self.proxy = proxy
        self.method = "GET"
        self.function = ""
        self._params: List[Tuple[str, str]] = []
        self._payload: Optional[bytes] = None
        self.status_code: Optional[int] = None

    def set_method(self, method: str) -> None:
        method = method.upper()
        if method not in self.METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        self.method = method

    def set_function(self, function: str) -> None:
        """Set the path appended to the endpoint (e.g. "me" or "10/albums")."""
        self.function = function

    def add_param(self, key: str, value: str) -> None:
        # Keys may repeat; insertion order is kept on the wire.
        self._params.append((key, value))

    @property
    def params(self) -> List[Tuple[str, str]]:
        return list(self._params)

    def get_param(self, key: str) -> Optional[str]:
        """Return the first value added for ``key``."""
        for name, value in self._params:
            if name == key:
                return value
        return None

    @property
    def url(self) -> str:
        return f"{self.proxy.endpoint}/{self.function}"

    def _form_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for key, value in self._params:
            if key in data:
                existing = data[key]
                data[key] = existing + [value] if isinstance(existing, list) else [existing, value]
            else:
                data[key] = value
        return data

    def build_request(self) -> httpx.Request:
        """Build the httpx request for this call.

        GET and DELETE carry parameters in the query string; POST sends
        them as a form-encoded body.
        """
        if self.method == "POST":
            return httpx.Request(self.method, self.url, data=self._form_data())
        return httpx.Request(self.method, self.url, params=self._params)

    def send_sync(self) -> bool:
        """Send the call and block until the response arrives.

        Returns:
            True once a 2xx response has been received.

        Raises:
            RemoteError: If the Graph API answered with an error envelope.
            TransportFailure: On network errors or any other non-2xx status.
        """
        request = self.build_request()
        logger.debug(f"Graph call {self.method} /{self.function}")

        try:
            with self.proxy.client() as client:
                response = client.send(request)
                response.read()
        except httpx.TimeoutException as e:
            raise TransportFailure(f"Request timed out after {self.proxy.timeout}s") from e
        except httpx.HTTPError as e:
            raise TransportFailure(f"Network error: {e}") from e

        self.status_code = response.status_code
        self._payload = response.content

        if response.is_success:
            return True

        raise _error_from_response(response)

    def get_payload(self) -> Optional[bytes]:
        """Response body of the last send, or None if not sent yet."""
        return self._payload


def _error_from_response(response: httpx.Response) -> TransportFailure:
    """Map a non-2xx response to the matching exception."""
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = None

    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]
        return RemoteError(
            error.get("message", f"HTTP {response.status_code}"),
            status_code=response.status_code,
            error_type=error.get("type"),
            code=error.get("code"),
            detail=error,
        )

    return TransportFailure(
        f"HTTP {response.status_code}: {response.text[:200]}",
        status_code=response.status_code,
    )


__all__ = ["RestProxy", "RestCall", "get_proxy", "new_call"]
