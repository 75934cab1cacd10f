"""HTTP communication abstractions for the SOAP client.

Separates HTTP transport layer from business logic (envelope building,
fault mapping, response parsing). Allows easy mocking of the transport in tests.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass
class HttpResponse:
    """HTTP response data container."""

    status_code: int
    body: str  # Raw response text (SOAP XML)
    headers: dict[str, str]
    url: str


class IHttpClient(Protocol):
    """Abstraction for HTTP client.

    Single Responsibility: Execute HTTP requests and return responses.
    Does NOT handle:
    - Response parsing
    - Error mapping
    - Retry logic
    - Session establishment
    """

    async def post(
        self,
        url: str,
        data: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Execute POST request with a text body.

        Args:
            url: Full URL to request
            data: Request body
            headers: HTTP headers
            timeout: Request timeout in seconds

        Raises:
            aiohttp.ClientError: On network or connection errors
        """
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...
