"""
HTTP transport for the Gett API.

Thin wrapper around ``httpx.Client`` performing the handful of verbs the
service needs and turning failures into Gett exceptions.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import httpx

from gett.config import GettConfig
from gett.exceptions import ProtocolError, RemoteError, ValidationError, raise_for_status


logger = logging.getLogger(__name__)

TOKEN_PARAM = "accesstoken"


def display_url(url: httpx.URL) -> str:
    """Render a URL for messages and logs with the access token masked."""
    if TOKEN_PARAM in url.params:
        url = url.copy_set_param(TOKEN_PARAM, "***")
    return str(url)


class Transport:
    """
    Performs requests against the API root and decodes responses.

    Endpoints are paths appended to ``config.base_url``; absolute URLs
    (such as upload URLs handed out by the service) are used as-is.
    """

    def __init__(
        self,
        config: GettConfig,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.config = config
        if http_client is not None:
            self._client = http_client
            self._owns_client = False
        else:
            self._client = httpx.Client(
                timeout=config.timeout,
                headers={"User-Agent": config.user_agent},
                transport=transport,
            )
            self._owns_client = True

    def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def url_for(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> httpx.URL:
        """
        Resolve an endpoint against the API root.

        Raises:
            ValidationError: If the endpoint does not form a valid URL
        """
        raw = endpoint if endpoint.startswith(("http://", "https://")) else self.config.base_url + endpoint
        try:
            url = httpx.URL(raw)
        except httpx.InvalidURL as e:
            raise ValidationError(f"Invalid request URL {raw!r}: {e}") from e
        if params:
            url = url.copy_merge_params(params)
        return url

    def _check(self, method: str, response: httpx.Response) -> httpx.Response:
        if not response.is_success:
            raise_for_status(
                method,
                display_url(response.request.url),
                response.status_code,
                response.reason_phrase,
            )
        return response

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        content: Optional[bytes] = None,
    ) -> httpx.Response:
        """
        Send a request and return the successful response.

        Raises:
            RemoteError: On a non-2xx status or a transport failure
            ValidationError: If the endpoint does not form a valid URL
        """
        url = self.url_for(endpoint, params)
        logger.debug("%s %s", method, display_url(url))
        try:
            response = self._client.request(method, url, json=json, content=content)
        except httpx.HTTPError as e:
            raise RemoteError(method, display_url(url), None, str(e) or type(e).__name__) from e
        return self._check(method, response)

    def send(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request with an optional JSON body and decode the JSON reply.

        Returns:
            The decoded response, or None when the body is empty

        Raises:
            RemoteError: On a non-2xx status or a transport failure
            ProtocolError: If the body is not valid JSON
        """
        response = self.request(method, endpoint, params=params, json=data)
        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError(
                f"{method} {display_url(response.request.url)} returned a body that is not JSON"
            ) from e

    def get_bytes(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        """GET an endpoint and return the raw body."""
        return self.request("GET", endpoint, params=params).content

    def put(self, url: str, content: bytes) -> httpx.Response:
        """PUT raw bytes to an absolute URL."""
        return self.request("PUT", url, content=content)

    @contextmanager
    def stream(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Iterator[httpx.Response]:
        """Stream a GET response; the status is checked before the body is read."""
        url = self.url_for(endpoint, params)
        logger.debug("GET %s (stream)", display_url(url))
        try:
            with self._client.stream("GET", url) as response:
                self._check("GET", response)
                yield response
        except httpx.HTTPError as e:
            raise RemoteError("GET", display_url(url), None, str(e) or type(e).__name__) from e
