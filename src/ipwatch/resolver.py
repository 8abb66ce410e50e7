"""Public IP address discovery.

Asks a plain-text "what is my IP" web service for the address the
host is seen with from the internet.
"""

import asyncio
import logging
from typing import Optional, Protocol

import aiohttp

from ipwatch.config import DEFAULT_IP_SERVICE_URL
from ipwatch.errors import AddressResolutionError

logger = logging.getLogger(__name__)


class AddressResolver(Protocol):
    """Protocol for public IP address discovery."""

    async def resolve(self) -> str:
        """Get the current public IP address.

        Raises:
            AddressResolutionError: If the address cannot be determined.
        """
        ...


class HttpAddressResolver:
    """Resolves the public IP via a single HTTP GET.

    The service must answer with the address as the first line of a
    plain-text body (ipify, icanhazip, ifconfig.me and friends).
    Exactly one attempt is made per call.

    Example:
        async with HttpAddressResolver() as resolver:
            ip = await resolver.resolve()  # "203.0.113.50"
    """

    def __init__(
        self,
        url: str = DEFAULT_IP_SERVICE_URL,
        http_session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize resolver.

        Args:
            url: Address service URL.
            http_session: Optional aiohttp session (for testing).
        """
        self._url = url
        self._session = http_session
        self._owns_session = http_session is None

    async def __aenter__(self):
        """Enter async context, creating session if needed."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *args):
        """Exit async context, closing owned session."""
        if self._owns_session and self._session:
            await self._session.close()
            self._session = None

    @property
    def url(self) -> str:
        """The address service URL."""
        return self._url

    async def resolve(self) -> str:
        """Fetch the current public IP address.

        Returns:
            First line of the response body, surrounding whitespace removed.

        Raises:
            AddressResolutionError: On connection failure, malformed URL,
                non-200 status or an empty response.
        """
        if self._session is None:
            raise RuntimeError("Resolver not initialized - use async context manager")

        try:
            async with self._session.get(self._url) as resp:
                if resp.status != 200:
                    raise AddressResolutionError(
                        f"Cannot read external IP from '{self._url}': HTTP {resp.status}"
                    )
                body = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise AddressResolutionError(
                f"Cannot read external IP from '{self._url}': {e}"
            ) from e

        lines = body.splitlines()
        address = lines[0].strip() if lines else ""
        if not address:
            raise AddressResolutionError(
                f"Cannot read external IP from '{self._url}': empty response"
            )

        logger.info(f"The external IP read from '{self._url}' is {address}")
        return address
