# Turns raw platform payloads into LiveStatus / SuggestedStream objects.

# Design decisions:
#   - Every field access goes through .get() on a verified dict, so a missing
#     key means "no data" instead of an AttributeError deep in a poll cycle.
#   - A payload whose overall shape is wrong raises PayloadError; the caller
#     treats that exactly like a transport failure.
#   - Absence means offline: a channel missing from the response, or present
#     without a stream/livestream object, is simply not live.

import re
from typing import Any, Iterable, NamedTuple

from live_status.models import (
    OFFLINE,
    LiveStatus,
    Platform,
    SuggestedStream,
    parse_count,
    status_key,
)


class PayloadError(ValueError):
    """Response parsed as JSON but did not have the expected shape."""


class TaggedStream(NamedTuple):
    """A discovered stream plus the bits ranking needs but the UI does not."""
    slug: str
    language: str
    stream: SuggestedStream


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _require_dict(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise PayloadError(f"{what}: expected JSON object, got {type(data).__name__}")
    return data


def _first_category(categories: Any) -> str | None:
    if isinstance(categories, list) and categories:
        return _dict(categories[0]).get("name")
    return None


_TWITCH_LOGIN = re.compile(r"[A-Za-z0-9_]+")


def is_twitch_login(value: str) -> bool:
    """Twitch logins are ASCII letters, digits and underscores only."""
    return bool(_TWITCH_LOGIN.fullmatch(value))


# ─── Twitch ───────────────────────────────────────────────────────────────────

def twitch_status_query(channels: list[str]) -> str:
    """
    One GraphQL document with one aliased user() lookup per channel (c0, c1, ...).

    Every channel must pass is_twitch_login(); anything else would be
    spliced into the document verbatim.
    """
    invalid = [ch for ch in channels if not is_twitch_login(ch)]
    if invalid:
        raise PayloadError(f"twitch status: invalid login(s) {invalid!r}")
    parts = [
        f'c{i}: user(login: "{ch.lower()}") '
        "{ stream { title viewersCount game { displayName } } }"
        for i, ch in enumerate(channels)
    ]
    return "{ " + "\n".join(parts) + " }"


def parse_twitch_statuses(channels: list[str], data: Any) -> dict[str, LiveStatus]:
    """
    Map the aliased response back onto channel keys.

    `channels` must be the same ordered list the query was built from,
    since alias cN refers to channels[N].
    """
    body = _require_dict(data, "twitch status")
    users = body.get("data")
    if not isinstance(users, dict):
        raise PayloadError("twitch status: response has no 'data' object")

    result: dict[str, LiveStatus] = {}
    for i, ch in enumerate(channels):
        stream = _dict(users.get(f"c{i}")).get("stream")
        key = status_key(Platform.TWITCH, ch)
        if not isinstance(stream, dict):
            result[key] = OFFLINE
            continue
        result[key] = LiveStatus(
            is_live=True,
            viewer_count=parse_count(stream.get("viewersCount")),
            title=stream.get("title"),
            category=_dict(stream.get("game")).get("displayName"),
        )
    return result


def twitch_streams_query(first: int) -> str:
    return (
        "{ streams(first: %d, options: {sort: VIEWER_COUNT}) { edges { node { "
        "title viewersCount previewImageURL(width: 440, height: 248) "
        "game { displayName } "
        "broadcaster { login broadcastSettings { language } } "
        "} } } }" % first
    )


def parse_twitch_streams(data: Any) -> list[TaggedStream]:
    body = _require_dict(data, "twitch streams")
    edges = _dict(_dict(body.get("data")).get("streams")).get("edges")
    if not isinstance(edges, list):
        raise PayloadError("twitch streams: response has no stream edges")

    result: list[TaggedStream] = []
    for edge in edges:
        node = _dict(_dict(edge).get("node"))
        broadcaster = _dict(node.get("broadcaster"))
        login = broadcaster.get("login")
        if not isinstance(login, str) or not login:
            continue
        language = _dict(broadcaster.get("broadcastSettings")).get("language") or ""
        result.append(TaggedStream(
            slug=login.lower(),
            language=str(language),
            stream=SuggestedStream(
                channel=login,
                platform=Platform.TWITCH,
                title=node.get("title") or "",
                category=_dict(node.get("game")).get("displayName") or "",
                viewer_count=parse_count(node.get("viewersCount")) or 0,
                thumbnail=node.get("previewImageURL"),
            ),
        ))
    return result


# ─── Kick ─────────────────────────────────────────────────────────────────────

def parse_kick_status(data: Any) -> LiveStatus:
    body = _require_dict(data, "kick channel")
    livestream = body.get("livestream")
    if not isinstance(livestream, dict):
        return OFFLINE
    return LiveStatus(
        is_live=True,
        viewer_count=parse_count(livestream.get("viewer_count")),
        title=livestream.get("session_title"),
        category=_first_category(livestream.get("categories")),
    )


def _kick_thumbnail(value: Any) -> str | None:
    if isinstance(value, str):
        return value or None
    thumb = _dict(value)
    return thumb.get("src") or thumb.get("url")


def _kick_items(data: Any) -> Iterable[Any]:
    # the featured feed has shipped both a bare list and a {"data": [...]} envelope
    if isinstance(data, list):
        return data
    items = _require_dict(data, "kick featured").get("data")
    if not isinstance(items, list):
        raise PayloadError("kick featured: response has no 'data' list")
    return items


def parse_kick_featured(data: Any) -> list[TaggedStream]:
    result: list[TaggedStream] = []
    for raw in _kick_items(data):
        item = _dict(raw)
        channel = _dict(item.get("channel"))
        slug = channel.get("slug") or item.get("slug")
        if not slug:
            continue
        result.append(TaggedStream(
            slug=str(slug).lower(),
            language=str(item.get("language") or ""),
            stream=SuggestedStream(
                channel=str(slug),
                platform=Platform.KICK,
                title=item.get("session_title") or "",
                category=_first_category(item.get("categories")) or "",
                viewer_count=parse_count(item.get("viewer_count")) or 0,
                thumbnail=_kick_thumbnail(item.get("thumbnail")),
            ),
        ))
    return result
