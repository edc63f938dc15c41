import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

log = logging.getLogger(__name__)


class Platform(str, Enum):
    TWITCH  = "twitch"
    KICK    = "kick"
    YOUTUBE = "youtube"


# platforms with a status adapter; anything else has no status entry at all
STATUS_PLATFORMS: frozenset[Platform] = frozenset({Platform.TWITCH, Platform.KICK})


def status_key(platform: Platform, channel: str) -> str:
    """StatusMap key, e.g. 'twitch:foobar'. Channel case is always folded here."""
    return f"{Platform(platform).value}:{channel.lower()}"


def parse_count(value: Any) -> int | None:
    """
    Coerce a viewer count into a non-negative int.

    Both platforms occasionally send counts as strings, and Kick has been seen
    sending null for streams that just went live.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        count = int(value)
    except (TypeError, ValueError):
        log.debug("Ignoring unparseable viewer count: %r", value)
        return None
    return max(count, 0)


@dataclass(frozen=True)
class ChannelRef:
    """
    A tracked (platform, channel) pair.

    Equality and hashing go through `key`, so 'FooBar' and 'foobar' on the
    same platform are the same channel while the original spelling is kept
    for display.
    """
    channel: str
    platform: Platform

    def __post_init__(self) -> None:
        object.__setattr__(self, "platform", Platform(self.platform))

    @property
    def key(self) -> str:
        return status_key(self.platform, self.channel)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChannelRef):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


@dataclass(frozen=True)
class LiveStatus:
    is_live: bool = False
    viewer_count: int | None = None
    title: str | None = None
    category: str | None = None


OFFLINE = LiveStatus()

StatusMap = Mapping[str, LiveStatus]


@dataclass(frozen=True)
class SuggestedStream:
    channel: str
    platform: Platform
    title: str
    category: str
    viewer_count: int
    thumbnail: str | None = None
