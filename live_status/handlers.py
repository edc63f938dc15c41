# Output side of the status pipeline.

# A handler receives StatusTransition objects and decides what to do with
# them. To add another target (desktop notification, webhook, ...) implement
#     async def handle(self, transition: StatusTransition) -> None: ...
# and register it where main.py wires the ConsoleEventHandler.

import logging

from live_status.differ import StatusTransition

log = logging.getLogger(__name__)


class ConsoleEventHandler:
    """
    Logs one line per transition:

        twitch:alice | LIVE | Viewers=120 | Category=Just Chatting | Title=Chatting
        kick:bobby | OFFLINE
    """

    _MAX_TITLE_LEN = 80

    async def handle(self, transition: StatusTransition) -> None:
        log.info("%s", self._format(transition))

    def _format(self, t: StatusTransition) -> str:
        if not t.went_live:
            return f"{t.key} | OFFLINE"

        st = t.status
        viewers = st.viewer_count if st.viewer_count is not None else "?"
        return (
            f"{t.key} | LIVE | "
            f"Viewers={viewers} | "
            f"Category={st.category or 'N/A'} | "
            f"Title={self._truncate(st.title or '')}"
        )

    def _truncate(self, text: str) -> str:
        text = " ".join(text.split())
        if len(text) <= self._MAX_TITLE_LEN:
            return text
        return text[: self._MAX_TITLE_LEN - 1].rstrip() + "…"
