# In-memory tracked-channel collaborator.

# Storage of these lists is somebody else's job; the engine only needs:
#   - snapshot()   → the current channels, read once per poll cycle
#   - subscribe()  → a callback fired when the number of tracked channels changes
#
# RecentChannels and FavoriteChannels reproduce the list semantics the UI
# expects (move-to-top for recents, no duplicates for favorites, both capped).
# TrackedSet unions any number of lists and only notifies when the *union's*
# size changes, e.g. favouriting a channel that is already recent is silent.

import logging
from typing import Callable

from live_status.config import MAX_FAVORITES, MAX_RECENTS
from live_status.models import ChannelRef, Platform

log = logging.getLogger(__name__)

SizeListener = Callable[[int], None]


class _Notifier:
    def __init__(self) -> None:
        self._listeners: list[SizeListener] = []

    def subscribe(self, listener: SizeListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SizeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, size: int) -> None:
        for listener in list(self._listeners):
            listener(size)


class ChannelList(_Notifier):
    """Ordered, de-duplicated, capped list of ChannelRefs."""

    def __init__(self, max_size: int | None = None) -> None:
        super().__init__()
        self._items: list[ChannelRef] = []
        self._max_size = max_size

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, ref: object) -> bool:
        return ref in self._items

    def snapshot(self) -> tuple[ChannelRef, ...]:
        return tuple(self._items)

    def add(self, channel: str, platform: Platform | str) -> None:
        ref = ChannelRef(channel, Platform(platform))
        self._replace([ref, *(r for r in self._items if r != ref)])

    def remove(self, channel: str, platform: Platform | str) -> None:
        ref = ChannelRef(channel, Platform(platform))
        self._replace([r for r in self._items if r != ref])

    def clear(self) -> None:
        self._replace([])

    def _replace(self, items: list[ChannelRef]) -> None:
        if self._max_size is not None:
            items = items[: self._max_size]
        before = len(self._items)
        self._items = items
        if len(items) != before:
            self._notify(len(items))


class RecentChannels(ChannelList):
    """Most recently watched first. Re-adding moves a channel back to the top."""

    def __init__(self, max_size: int = MAX_RECENTS) -> None:
        super().__init__(max_size)


class FavoriteChannels(ChannelList):
    """Newest favourite first. Re-adding an existing favourite is a no-op."""

    def __init__(self, max_size: int = MAX_FAVORITES) -> None:
        super().__init__(max_size)

    def add(self, channel: str, platform: Platform | str) -> None:
        if ChannelRef(channel, Platform(platform)) in self:
            return
        super().add(channel, platform)


class TrackedSet(_Notifier):
    """
    Union of several ChannelLists, deduplicated by ChannelRef identity.

    Compares a size fingerprint after every change in a member list and
    notifies its own listeners only when that fingerprint moves.
    """

    def __init__(self, *lists: ChannelList) -> None:
        super().__init__()
        self._lists = lists
        self._last_size = len(self.snapshot())
        for member in lists:
            member.subscribe(self._on_member_changed)

    def __len__(self) -> int:
        return len(self.snapshot())

    def snapshot(self) -> tuple[ChannelRef, ...]:
        # dict keeps first-seen order while collapsing duplicates
        union: dict[ChannelRef, None] = {}
        for member in self._lists:
            for ref in member.snapshot():
                union.setdefault(ref, None)
        return tuple(union)

    def _on_member_changed(self, _size: int) -> None:
        size = len(self.snapshot())
        if size == self._last_size:
            return
        log.debug("Tracked set size changed %d -> %d", self._last_size, size)
        self._last_size = size
        self._notify(size)
