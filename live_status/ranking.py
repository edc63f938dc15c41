# Pure list policies used by the discovery aggregator. No I/O here, so each
# policy can be tested on plain lists.

from itertools import chain, zip_longest
from typing import Iterable, Sequence, TypeVar

from live_status.models import SuggestedStream
from live_status.parser import TaggedStream

T = TypeVar("T")

_MISSING = object()


def dedupe_by_slug(streams: Iterable[TaggedStream]) -> list[TaggedStream]:
    """
    Drop repeated slugs, keeping the first occurrence.

    Pages are concatenated in rank order, so first-wins means the
    higher-ranked page's data survives when a stream shifts between pages.
    """
    seen: set[str] = set()
    unique: list[TaggedStream] = []
    for tagged in streams:
        if tagged.slug in seen:
            continue
        seen.add(tagged.slug)
        unique.append(tagged)
    return unique


def prefer_language(streams: Sequence[TaggedStream], language: str) -> list[SuggestedStream]:
    """Stable partition: streams in `language` first, then the rest. Tags are dropped."""
    wanted = language.lower()
    matching = [t.stream for t in streams if t.language.lower() == wanted]
    others   = [t.stream for t in streams if t.language.lower() != wanted]
    return matching + others


def filter_language_with_fallback(
    streams: Sequence[TaggedStream],
    language_name: str,
    min_matches: int,
) -> list[TaggedStream]:
    """
    Keep streams whose language name matches, unless fewer than
    `min_matches` do; then keep everything.
    """
    wanted = language_name.lower()
    matching = [t for t in streams if t.language.lower() == wanted]
    if len(matching) < min_matches:
        return list(streams)
    return matching


def rank_by_viewers(streams: Iterable[SuggestedStream], limit: int) -> list[SuggestedStream]:
    """Highest viewer count first; ties keep their incoming order."""
    return sorted(streams, key=lambda s: s.viewer_count, reverse=True)[:limit]


def interleave(*lists: Sequence[T]) -> list[T]:
    """
    Round-robin merge: a[0], b[0], a[1], b[1], ...

    Continues past the shorter list until every list is drained.
    """
    return [item for item in chain.from_iterable(zip_longest(*lists, fillvalue=_MISSING))
            if item is not _MISSING]
