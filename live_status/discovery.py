# DiscoveryAggregator: builds the "suggested live channels" list.

# Twitch: one page of top streams (already viewer-sorted by Twitch), re-ordered
#         so the preferred language comes first. Nothing is discarded.
# Kick:   MAX_KICK_PAGES featured pages fetched concurrently, deduplicated by
#         slug, language-filtered unless too few match, sorted by viewers.
#
# The two ranked lists are interleaved so neither platform drowns the other
# purely on raw viewer numbers. The result replaces the previous list whole.

import asyncio
import logging
from typing import Callable

from live_status.adapters import KickAdapter, TwitchAdapter
from live_status.config import DEFAULT_LOCALE, EngineSettings, language_codes
from live_status.models import SuggestedStream
from live_status.ranking import (
    dedupe_by_slug,
    filter_language_with_fallback,
    interleave,
    prefer_language,
    rank_by_viewers,
)

log = logging.getLogger(__name__)


class DiscoveryAggregator:

    def __init__(
        self,
        twitch: TwitchAdapter,
        kick: KickAdapter,
        settings: EngineSettings | None = None,
        locale: Callable[[], str] = lambda: DEFAULT_LOCALE,
    ) -> None:
        self._twitch = twitch
        self._kick = kick
        self._settings = settings or EngineSettings()
        self._locale = locale
        self._suggestions: tuple[SuggestedStream, ...] = ()
        self.is_loading = False

    @property
    def suggestions(self) -> tuple[SuggestedStream, ...]:
        return self._suggestions

    async def refresh_suggestions(self) -> None:
        if self.is_loading:
            log.debug("Suggestion refresh already in flight; skipping")
            return

        self.is_loading = True
        try:
            codes = language_codes(self._locale())
            results = await asyncio.gather(
                self._twitch_picks(codes["twitch"]),
                self._kick_picks(codes["kick_code"], codes["kick_name"]),
                return_exceptions=True,
            )

            ranked: list[list[SuggestedStream]] = []
            for source, result in zip(("twitch", "kick"), results):
                if isinstance(result, BaseException):
                    log.error("%s discovery raised: %r", source, result)
                    ranked.append([])
                else:
                    ranked.append(result)

            self._suggestions = tuple(interleave(*ranked))
            log.info(
                "Suggestions refreshed: %d twitch + %d kick",
                len(ranked[0]), len(ranked[1]),
            )
        finally:
            self.is_loading = False

    async def _twitch_picks(self, language: str) -> list[SuggestedStream]:
        tagged = await self._twitch.fetch_top_streams(self._settings.twitch_page_size)
        return prefer_language(tagged, language)[: self._settings.suggestions_limit]

    async def _kick_picks(self, language_code: str, language_name: str) -> list[SuggestedStream]:
        pages = await asyncio.gather(*(
            self._kick.fetch_featured_page(language_code, page)
            for page in range(1, self._settings.max_kick_pages + 1)
        ))
        unique = dedupe_by_slug(tagged for page in pages for tagged in page)
        kept = filter_language_with_fallback(
            unique, language_name, self._settings.min_language_matches,
        )
        log.debug("Kick: %d unique featured stream(s), %d kept for ranking", len(unique), len(kept))
        return rank_by_viewers((t.stream for t in kept), self._settings.suggestions_limit)
