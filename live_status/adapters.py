# Platform adapters: one class per platform that supports status lookup.

# Every public coroutine here is fail-closed. Transport errors and payload
# shape errors are both collapsed by _settle() into the unit of work's
# default value (offline / empty), so callers never see an exception for a
# degraded third-party API.
#
#   Twitch: one GraphQL POST aliasing every channel, failure = whole batch offline
#   Kick:   one GET per channel, failure = only that channel offline

import asyncio
import logging
from typing import Awaitable, Collection, Protocol, TypeVar
from urllib.parse import quote

import aiohttp

from live_status.config import (
    KICK_CHANNELS_URL,
    KICK_FEATURED_URL,
    TWITCH_CLIENT_ID,
    TWITCH_DISCOVERY_PAGE_SIZE,
    TWITCH_GQL_URL,
)
from live_status.http_client import HTTPTransport
from live_status.models import OFFLINE, LiveStatus, Platform, status_key
from live_status.parser import (
    TaggedStream,
    is_twitch_login,
    parse_kick_featured,
    parse_kick_status,
    parse_twitch_statuses,
    parse_twitch_streams,
    twitch_status_query,
    twitch_streams_query,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

# transport failures and shape failures are handled identically
FETCH_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, ValueError)


async def _settle(work: Awaitable[T], default: T, what: str) -> T:
    """Await `work`; on any fetch error log it and return `default` instead."""
    try:
        return await work
    except FETCH_ERRORS as exc:
        log.warning("%s failed, treating as no data: %r", what, exc)
        return default


def _offline_map(platform: Platform, channels: Collection[str]) -> dict[str, LiveStatus]:
    return {status_key(platform, ch): OFFLINE for ch in channels}


class PlatformAdapter(Protocol):
    platform: Platform

    async def query_status(self, channels: Collection[str]) -> dict[str, LiveStatus]: ...


class TwitchAdapter:
    platform = Platform.TWITCH

    def __init__(self, transport: HTTPTransport) -> None:
        self._http = transport
        self._headers = {"Client-Id": TWITCH_CLIENT_ID}

    async def query_status(self, channels: Collection[str]) -> dict[str, LiveStatus]:
        unique = {ch.lower() for ch in channels}
        ordered = sorted(ch for ch in unique if is_twitch_login(ch))
        # names Twitch can never issue are offline without costing the batch
        result = _offline_map(self.platform, unique - set(ordered))
        if result:
            log.warning("Skipping invalid Twitch login(s): %s", sorted(result))
        if not ordered:
            return result
        result.update(await _settle(
            self._query_status(ordered),
            _offline_map(self.platform, ordered),
            f"Twitch status batch ({len(ordered)} channel(s))",
        ))
        return result

    async def _query_status(self, channels: list[str]) -> dict[str, LiveStatus]:
        data = await self._http.post_json(
            TWITCH_GQL_URL, {"query": twitch_status_query(channels)}, headers=self._headers,
        )
        return parse_twitch_statuses(channels, data)

    async def fetch_top_streams(self, first: int = TWITCH_DISCOVERY_PAGE_SIZE) -> list[TaggedStream]:
        """One page of live streams, platform-sorted by viewer count, language-tagged."""
        return await _settle(self._fetch_top_streams(first), [], "Twitch top streams")

    async def _fetch_top_streams(self, first: int) -> list[TaggedStream]:
        data = await self._http.post_json(
            TWITCH_GQL_URL, {"query": twitch_streams_query(first)}, headers=self._headers,
        )
        return parse_twitch_streams(data)


class KickAdapter:
    platform = Platform.KICK

    def __init__(self, transport: HTTPTransport) -> None:
        self._http = transport

    async def query_status(self, channels: Collection[str]) -> dict[str, LiveStatus]:
        unique = sorted({ch.lower() for ch in channels})
        statuses = await asyncio.gather(*(
            _settle(self._query_channel(ch), OFFLINE, f"Kick status for {ch!r}")
            for ch in unique
        ))
        return {status_key(self.platform, ch): st for ch, st in zip(unique, statuses)}

    async def _query_channel(self, channel: str) -> LiveStatus:
        data = await self._http.get_json(f"{KICK_CHANNELS_URL}/{quote(channel, safe='')}")
        return parse_kick_status(data)

    async def fetch_featured_page(self, language_code: str, page: int) -> list[TaggedStream]:
        return await _settle(
            self._fetch_featured_page(language_code, page), [], f"Kick featured page {page}",
        )

    async def _fetch_featured_page(self, language_code: str, page: int) -> list[TaggedStream]:
        url = f"{KICK_FEATURED_URL}/{quote(language_code, safe='')}?page={page}"
        return parse_kick_featured(await self._http.get_json(url))


def build_adapters(transport: HTTPTransport) -> dict[Platform, PlatformAdapter]:
    """Static platform -> adapter mapping. Platforms missing here have no status lookup."""
    return {
        Platform.TWITCH: TwitchAdapter(transport),
        Platform.KICK:   KickAdapter(transport),
    }
