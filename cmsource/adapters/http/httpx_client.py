"""httpx transport adapter.

Implements HttpClientPort with an ``httpx.AsyncClient``. Non-2xx answers
raise ``httpx.HTTPStatusError`` and network failures raise the matching
``httpx.HTTPError`` subclass; both are logged and re-raised unchanged.
"""

import logging
from typing import Any

import httpx

from cmsource.core.models import HttpRequest, HttpResponse
from cmsource.core.ports import HttpClientPort

logger = logging.getLogger(__name__)


class HttpxClient(HttpClientPort):
    """HttpClientPort backed by httpx."""

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (e.g. ``httpx.MockTransport``).
        """
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "HttpxClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the httpx client and clean up resources."""
        await self.client.aclose()

    async def send(self, request: HttpRequest) -> HttpResponse:
        """Send a request through httpx.

        ``with_credentials`` has no browser semantics here; the credential
        itself travels in the ``Authorization`` header.

        Raises:
            httpx.HTTPStatusError: On non-2xx responses.
            httpx.HTTPError: On network failures.
        """
        logger.debug(
            f"Sending {request.method} {request.url}",
            extra={"inspect": dict(request.inspect), "params": dict(request.params)},
        )
        try:
            response = await self.client.request(
                request.method,
                request.url,
                params=dict(request.params),
                headers=dict(request.headers),
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Request to {request.url} failed: {e}")
            raise

        return HttpResponse(
            status=response.status_code,
            data=self._decode_body(response, request.raw_body),
            headers=dict(response.headers),
        )

    @staticmethod
    def _decode_body(response: httpx.Response, raw_body: bool) -> Any:
        """Return the text body for raw requests, otherwise decoded JSON.

        A body that is not valid JSON is returned as text; the converter
        treats it as an empty result.
        """
        if raw_body or not response.content:
            return response.text
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Response from {response.request.url} is not valid JSON")
            return response.text
