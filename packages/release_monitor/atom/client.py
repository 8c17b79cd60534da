"""
Async Feed Client.

Features:
- Async HTTP with aiohttp
- Keep-alive connection pooling shared across calls
- Per-request timeouts
- Upstream status classification into FetchError kinds
"""

import asyncio
from typing import Any, Dict, Optional

import aiohttp

from core.config import get_settings
from core.constants import KEEP_ALIVE_MS, USER_AGENT
from core.logging import get_logger

from .errors import FetchError, classify

logger = get_logger("atom")


class FeedClient:
    """
    Shared HTTP client for Atom feeds and the global events endpoint.

    The underlying session is created on first use and reused by every
    request until ``close()``.

    Example:
        async with FeedClient() as client:
            xml = await client.fetch_text("https://github.com/owner/repo/tags.atom", 10000)
    """

    def __init__(
        self,
        keep_alive_ms: int = KEEP_ALIVE_MS,
        max_connections: int = 20,
    ):
        self.keep_alive_ms = keep_alive_ms
        self.max_connections = max_connections
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "FeedClient":
        self._get_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def is_open(self) -> bool:
        return self._session is not None and not self._session.closed

    def _get_session(self) -> aiohttp.ClientSession:
        """Create the pooled session lazily."""
        if not self.is_open:
            connector = aiohttp.TCPConnector(
                limit=self.max_connections,
                keepalive_timeout=self.keep_alive_ms / 1000,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                headers={"User-Agent": USER_AGENT},
            )
        return self._session  # type: ignore[return-value]

    async def close(self) -> None:
        """Close pooled connections. Idempotent, safe before first use."""
        session, self._session = self._session, None
        if session is not None and not session.closed:
            await session.close()

    async def _request(
        self,
        url: str,
        timeout_ms: int,
        headers: Optional[Dict[str, str]],
        as_json: bool,
    ) -> Any:
        session = self._get_session()
        try:
            async with session.get(
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout_ms / 1000),
            ) as response:
                if classify(response.status) is not None:
                    raise FetchError.from_status(response.status)
                if as_json:
                    return await response.json(content_type=None)
                return await response.text()
        except FetchError:
            raise
        except asyncio.TimeoutError as e:
            logger.debug("fetch_timeout", url=url, timeout_ms=timeout_ms)
            raise FetchError.from_exception(e) from e
        except aiohttp.ClientError as e:
            logger.debug("fetch_client_error", url=url, error=str(e))
            raise FetchError.from_exception(e) from e
        except ValueError as e:
            # Undecodable JSON body
            raise FetchError.from_exception(e) from e

    async def fetch_text(
        self,
        url: str,
        timeout_ms: int,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """GET a URL and return the body text on 200, else raise FetchError."""
        return await self._request(url, timeout_ms, headers, as_json=False)

    async def fetch_json(
        self,
        url: str,
        timeout_ms: int,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """GET a URL and return the decoded JSON body on 200, else raise FetchError."""
        return await self._request(url, timeout_ms, headers, as_json=True)


# Process-wide client (lazy-loaded)
_client: Optional[FeedClient] = None


def get_feed_client() -> FeedClient:
    """Get the process-wide FeedClient, creating it on first use."""
    global _client
    if _client is None:
        _client = FeedClient(keep_alive_ms=get_settings().keep_alive_ms)
    return _client


async def close_connections() -> None:
    """Close the process-wide client's pool. Idempotent."""
    global _client
    client, _client = _client, None
    if client is not None:
        await client.close()
