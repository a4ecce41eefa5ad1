"""Asynchronous fetch capability used to retrieve documents and schemas.

The pipeline only needs ``await fetcher(url) -> str``; anything with that
shape can be injected.  :class:`HttpxFetcher` is the default and wraps
:class:`httpx.AsyncClient`, mapping transport and status failures onto
:class:`~swank.exceptions.FetchError`.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

import httpx

from swank.exceptions import FetchError

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[str]]
"""Signature of a fetch capability: URL in, response text out."""


class HttpxFetcher:
    """Fetch text over HTTP(S) with :mod:`httpx`.

    Args:
        timeout: Request timeout in seconds.
        transport: Optional custom transport (``httpx.MockTransport`` in tests).
        headers: Extra headers sent with every request.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._headers = dict(headers or {})

    async def __call__(self, url: str) -> str:
        logger.debug("Fetching %s", url)
        async with httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
            headers=self._headers,
        ) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                raise FetchError(
                    f"HTTP {status} fetching {url}", url=url, status_code=status
                ) from exc
            except httpx.RequestError as exc:
                raise FetchError(f"Failed to fetch {url}: {exc}", url=url) from exc
            except httpx.InvalidURL as exc:
                raise FetchError(f"Invalid URL {url}: {exc}", url=url) from exc
        return response.text
