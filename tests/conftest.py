"""Shared test helpers: a recording stand-in for HTTPTransport and payload builders."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from live_status.models import ChannelRef, Platform

Responder = Callable[[str, str, Any], Any]


class FakeTransport:
    """
    Duck-typed HTTPTransport.

    `responder(method, url, body)` returns the decoded JSON payload or raises.
    When `gate` is set every request blocks on it, which lets a test hold a
    poll cycle open while it pokes at the engine.
    """

    def __init__(self, responder: Responder) -> None:
        self._responder = responder
        self.calls: list[tuple[str, str, Any]] = []
        self.gate: asyncio.Event | None = None

    async def get_json(self, url: str, headers: dict[str, str] | None = None) -> Any:
        return await self._handle("GET", url, None)

    async def post_json(self, url: str, body: Any, headers: dict[str, str] | None = None) -> Any:
        return await self._handle("POST", url, body)

    async def _handle(self, method: str, url: str, body: Any) -> Any:
        self.calls.append((method, url, body))
        if self.gate is not None:
            await self.gate.wait()
        return self._responder(method, url, body)

    def urls(self, method: str | None = None) -> list[str]:
        return [u for m, u, _ in self.calls if method is None or m == method]


class StaticSnapshot:
    """Tracked-set stand-in whose contents a test can swap freely."""

    def __init__(self, *refs: tuple[str, str]) -> None:
        self.refs = [ChannelRef(ch, Platform(p)) for ch, p in refs]

    def __call__(self) -> list[ChannelRef]:
        return list(self.refs)


def twitch_user(title: str, viewers: int, game: str | None = None) -> dict:
    stream: dict[str, Any] = {"title": title, "viewersCount": viewers}
    stream["game"] = {"displayName": game} if game else None
    return {"stream": stream}


def twitch_edge(login: str, viewers: int, language: str = "EN", title: str = "") -> dict:
    return {"node": {
        "title": title or f"{login} stream",
        "viewersCount": viewers,
        "previewImageURL": f"https://img.example/{login}.jpg",
        "game": {"displayName": "Just Chatting"},
        "broadcaster": {"login": login, "broadcastSettings": {"language": language}},
    }}


def kick_livestream(title: str, viewers: int, category: str | None = None) -> dict:
    return {"livestream": {
        "session_title": title,
        "viewer_count": viewers,
        "categories": [{"name": category}] if category else [],
    }}


def kick_featured(slug: str, viewers: int, language: str = "English") -> dict:
    return {
        "slug": f"{slug}-stream",
        "session_title": f"{slug} live",
        "viewer_count": viewers,
        "language": language,
        "categories": [{"name": "IRL"}],
        "thumbnail": {"src": f"https://img.example/{slug}.webp"},
        "channel": {"slug": slug},
    }
