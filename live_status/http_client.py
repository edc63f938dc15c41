# Transport: the only place that talks to the network.

# Two flavours of client, picked by host environment:
#   - sandboxed: plain library user agent, ignores proxy env vars
#   - native:    desktop browser user agent and system proxy settings, for
#                hosts allowed to make unrestricted outbound calls (Kick's
#                Cloudflare front rejects obvious library clients)
#
# Both share the same HTTPTransport wrapper; adapters never see the
# difference. Errors are logged and re-raised, the adapters decide what a
# failure means for their unit of work.

import asyncio
import json
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import aiohttp

from live_status.config import (
    BROWSER_USER_AGENT,
    CONNECTION_POOL_LIMIT,
    LIBRARY_USER_AGENT,
    NATIVE_HTTP_ENV,
    REQUEST_TIMEOUT_SECONDS,
)

log = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def is_native_host() -> bool:
    return os.environ.get(NATIVE_HTTP_ENV, "").strip().lower() in _TRUTHY


@asynccontextmanager
async def open_session(native: bool | None = None) -> AsyncIterator[aiohttp.ClientSession]:
    """
    Create the shared aiohttp session for the detected (or forced) host mode.

    native=None means detect via is_native_host().
    """
    if native is None:
        native = is_native_host()

    connector = aiohttp.TCPConnector(limit=CONNECTION_POOL_LIMIT)
    user_agent = BROWSER_USER_AGENT if native else LIBRARY_USER_AGENT
    log.debug("Opening %s HTTP session", "native" if native else "sandboxed")

    async with aiohttp.ClientSession(
        connector=connector,
        headers={"User-Agent": user_agent, "Accept": "application/json"},
        trust_env=native,
    ) as session:
        yield session


class HTTPTransport:
    """
    Thin JSON GET/POST wrapper around a shared aiohttp.ClientSession.

    Raises:
        aiohttp.ClientResponseError  on non-2xx responses
        aiohttp.ClientError          on connection problems
        ValueError                   on bodies that are not valid JSON
                                     (json.JSONDecodeError)
        asyncio.TimeoutError         on request timeout
    """

    def __init__(self, session: aiohttp.ClientSession, timeout: float = REQUEST_TIMEOUT_SECONDS) -> None:
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str, headers: dict[str, str] | None = None) -> Any:
        return await self._request("GET", url, headers=headers)

    async def post_json(self, url: str, body: Any, headers: dict[str, str] | None = None) -> Any:
        merged = {"Content-Type": "application/json", **(headers or {})}
        return await self._request("POST", url, headers=merged, data=json.dumps(body))

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            async with self._session.request(method, url, timeout=self._timeout, **kwargs) as resp:
                resp.raise_for_status()
                # content_type=None: Kick serves JSON as text/html from some edges
                return await resp.json(content_type=None)

        except aiohttp.ClientResponseError as exc:
            log.warning("HTTP error on %s %s: %s %s", method, url, exc.status, exc.message)
            raise
        except asyncio.TimeoutError:
            log.warning("Timeout on %s %s", method, url)
            raise
