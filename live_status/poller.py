# StatusPoller: runs one status poll cycle across every platform adapter.

# responsibilities:
#   - snapshot the tracked set and split it per platform
#   - query all adapters concurrently; a failing adapter contributes nothing
#   - publish the merged map as a single atomic replacement
#   - single-flight: a check_all() while one is running returns immediately

import asyncio
import logging
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from live_status.adapters import PlatformAdapter
from live_status.models import STATUS_PLATFORMS, ChannelRef, LiveStatus, Platform, StatusMap, status_key

log = logging.getLogger(__name__)

PublishListener = Callable[[StatusMap, StatusMap], None]

_EMPTY: StatusMap = MappingProxyType({})


def partition_by_platform(refs: Iterable[ChannelRef]) -> dict[Platform, set[str]]:
    """Lower-cased channel names per status-capable platform."""
    groups: dict[Platform, set[str]] = {}
    for ref in refs:
        if ref.platform in STATUS_PLATFORMS:
            groups.setdefault(ref.platform, set()).add(ref.channel.lower())
    return groups


class StatusPoller:

    def __init__(
        self,
        snapshot: Callable[[], Iterable[ChannelRef]],
        adapters: Mapping[Platform, PlatformAdapter],
    ) -> None:
        self._snapshot = snapshot
        self._adapters = adapters
        self._statuses: StatusMap = _EMPTY
        self._listeners: list[PublishListener] = []
        self.is_checking = False

    @property
    def statuses(self) -> StatusMap:
        """Read-only view of the last published map."""
        return self._statuses

    def subscribe(self, listener: PublishListener) -> None:
        """listener(previous, current) is called after every publication."""
        self._listeners.append(listener)

    def get_status(self, channel: str, platform: Platform | str) -> LiveStatus | None:
        """
        Last known status, or None when unknown.

        None is returned for platforms without a status adapter and for
        channels that have not been through a cycle yet; callers treat both
        as not live.
        """
        if not isinstance(platform, Platform):
            try:
                platform = Platform(str(platform).lower())
            except ValueError:
                return None
        if platform not in STATUS_PLATFORMS:
            return None
        return self._statuses.get(status_key(platform, channel))

    async def check_all(self) -> None:
        if self.is_checking:
            log.debug("Status check already in flight; skipping")
            return

        groups = partition_by_platform(self._snapshot())
        if not any(groups.values()):
            self._publish({})
            return

        self.is_checking = True
        try:
            platforms = [p for p in groups if p in self._adapters]
            results = await asyncio.gather(
                *(self._adapters[p].query_status(groups[p]) for p in platforms),
                return_exceptions=True,
            )

            merged: dict[str, LiveStatus] = {}
            for platform, result in zip(platforms, results):
                if isinstance(result, BaseException):
                    log.error("%s adapter raised during status check: %r", platform.value, result)
                    continue
                merged.update(result)

            live = sum(1 for st in merged.values() if st.is_live)
            log.info("Status check complete: %d/%d channel(s) live", live, len(merged))
            self._publish(merged)
        finally:
            self.is_checking = False

    def _publish(self, statuses: dict[str, LiveStatus]) -> None:
        previous, self._statuses = self._statuses, MappingProxyType(statuses)
        for listener in list(self._listeners):
            listener(previous, self._statuses)
