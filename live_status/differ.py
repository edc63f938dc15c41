from dataclasses import dataclass

from live_status.models import OFFLINE, LiveStatus, StatusMap


@dataclass(frozen=True)
class StatusTransition:
    key: str             # "platform:channel"
    went_live: bool
    status: LiveStatus


class StatusDiffer:
    """
    Compares consecutive published StatusMaps and reports live/offline flips.

    Only the is_live edge counts. Viewer count or title changes on a channel
    that stays live are not transitions; they would fire on nearly every cycle.

    A key that disappears (channel untracked) is not reported as going
    offline. A key seen for the first time is reported only if it is live.
    """

    def diff(self, previous: StatusMap, current: StatusMap) -> list[StatusTransition]:
        transitions: list[StatusTransition] = []
        for key in sorted(current):
            now    = current[key]
            before = previous.get(key, OFFLINE)
            if now.is_live != before.is_live:
                transitions.append(StatusTransition(key=key, went_live=now.is_live, status=now))
        return transitions
