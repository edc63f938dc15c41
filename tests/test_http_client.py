"""HTTPTransport against a real in-process aiohttp server."""

from __future__ import annotations

import asyncio

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from live_status.config import BROWSER_USER_AGENT, LIBRARY_USER_AGENT, NATIVE_HTTP_ENV
from live_status.http_client import HTTPTransport, is_native_host, open_session


async def _channel(request: web.Request) -> web.Response:
    return web.json_response({
        "slug": request.match_info["slug"],
        "user_agent": request.headers.get("User-Agent"),
    })


async def _gql(request: web.Request) -> web.Response:
    return web.json_response({
        "received": await request.json(),
        "client_id": request.headers.get("Client-Id"),
        "content_type": request.headers.get("Content-Type"),
    })


async def _html_json(request: web.Request) -> web.Response:
    return web.Response(text='{"ok": true}', content_type="text/html")


async def _not_json(request: web.Request) -> web.Response:
    return web.Response(text="<html>Just a moment...</html>", content_type="text/html")


async def _missing(request: web.Request) -> web.Response:
    return web.Response(status=404, text="not found")


async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(1)
    return web.json_response({})


@pytest.fixture(autouse=True)
def _no_proxy(monkeypatch):
    # the native session honours proxy env vars; keep requests on loopback
    for var in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(var, raising=False)


@pytest_asyncio.fixture
async def server():
    app = web.Application()
    app.router.add_get("/channels/{slug}", _channel)
    app.router.add_post("/gql", _gql)
    app.router.add_get("/html", _html_json)
    app.router.add_get("/missing", _missing)
    app.router.add_get("/not-json", _not_json)
    app.router.add_get("/slow", _slow)
    srv = test_utils.TestServer(app)
    await srv.start_server()
    yield srv
    await srv.close()


@pytest.mark.asyncio
class TestHTTPTransport:
    async def test_get_json(self, server) -> None:
        async with open_session(native=False) as session:
            data = await HTTPTransport(session).get_json(str(server.make_url("/channels/bobby")))
        assert data["slug"] == "bobby"
        assert data["user_agent"] == LIBRARY_USER_AGENT

    async def test_native_session_uses_browser_user_agent(self, server) -> None:
        async with open_session(native=True) as session:
            data = await HTTPTransport(session).get_json(str(server.make_url("/channels/bobby")))
        assert data["user_agent"] == BROWSER_USER_AGENT

    async def test_post_json_sends_body_and_headers(self, server) -> None:
        async with open_session(native=False) as session:
            data = await HTTPTransport(session).post_json(
                str(server.make_url("/gql")), {"query": "{ x }"}, headers={"Client-Id": "abc"},
            )
        assert data == {"received": {"query": "{ x }"}, "client_id": "abc", "content_type": "application/json"}

    async def test_json_served_with_wrong_content_type(self, server) -> None:
        async with open_session(native=False) as session:
            assert await HTTPTransport(session).get_json(str(server.make_url("/html"))) == {"ok": True}

    async def test_invalid_json_raises_value_error(self, server) -> None:
        async with open_session(native=False) as session:
            with pytest.raises(ValueError):
                await HTTPTransport(session).get_json(str(server.make_url("/not-json")))

    async def test_non_2xx_raises(self, server) -> None:
        async with open_session(native=False) as session:
            with pytest.raises(aiohttp.ClientResponseError) as info:
                await HTTPTransport(session).get_json(str(server.make_url("/missing")))
        assert info.value.status == 404

    async def test_timeout_raises(self, server) -> None:
        async with open_session(native=False) as session:
            with pytest.raises(asyncio.TimeoutError):
                await HTTPTransport(session, timeout=0.05).get_json(str(server.make_url("/slow")))


class TestIsNativeHost:
    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_truthy(self, monkeypatch, value) -> None:
        monkeypatch.setenv(NATIVE_HTTP_ENV, value)
        assert is_native_host() is True

    @pytest.mark.parametrize("value", ["", "0", "false", "nope"])
    def test_falsy(self, monkeypatch, value) -> None:
        monkeypatch.setenv(NATIVE_HTTP_ENV, value)
        assert is_native_host() is False

    def test_unset(self, monkeypatch) -> None:
        monkeypatch.delenv(NATIVE_HTTP_ENV, raising=False)
        assert is_native_host() is False
