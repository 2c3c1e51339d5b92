"""Tests for HttpClient against a local aiohttp server."""

import pytest

aiohttp = pytest.importorskip("aiohttp")
from aiohttp import web  # noqa: E402
from aiohttp.test_utils import TestServer  # noqa: E402

from podscribe.core.exceptions import ProviderError  # noqa: E402
from podscribe.source.http import HttpClient  # noqa: E402


def make_app() -> web.Application:
    async def feed(request: web.Request) -> web.Response:
        return web.Response(text=f"<rss>{request.headers.get('User-Agent')}</rss>")

    async def moved(request: web.Request) -> web.Response:
        raise web.HTTPFound("/feed")

    async def loop(request: web.Request) -> web.Response:
        raise web.HTTPFound("/loop")

    async def audio(request: web.Request) -> web.Response:
        return web.Response(body=b"\x00" * 200_000, content_type="audio/mpeg")

    async def missing(request: web.Request) -> web.Response:
        return web.Response(status=404)

    app = web.Application()
    app.router.add_get("/feed", feed)
    app.router.add_get("/moved", moved)
    app.router.add_get("/loop", loop)
    app.router.add_get("/audio.mp3", audio)
    app.router.add_get("/missing", missing)
    return app


@pytest.fixture
def client() -> HttpClient:
    return HttpClient(user_agent="TestAgent/1.0", max_redirects=3, lookup_timeout=5, download_timeout=5)


class TestFetchText:
    @pytest.mark.asyncio
    async def test_sends_user_agent(self, client):
        async with TestServer(make_app()) as server:
            text = await client.fetch_text(str(server.make_url("/feed")))
        assert text == "<rss>TestAgent/1.0</rss>"

    @pytest.mark.asyncio
    async def test_follows_redirects(self, client):
        async with TestServer(make_app()) as server:
            text = await client.fetch_text(str(server.make_url("/moved")))
        assert text.startswith("<rss>")

    @pytest.mark.asyncio
    async def test_redirect_loop_is_an_error(self, client):
        async with TestServer(make_app()) as server:
            with pytest.raises(ProviderError, match="http fetch failed"):
                await client.fetch_text(str(server.make_url("/loop")))

    @pytest.mark.asyncio
    async def test_http_error_status(self, client):
        async with TestServer(make_app()) as server:
            with pytest.raises(ProviderError, match="HTTP 404"):
                await client.fetch_text(str(server.make_url("/missing")))


class TestDownloadFile:
    @pytest.mark.asyncio
    async def test_streams_to_disk(self, client, tmp_path):
        dest = tmp_path / "episode.mp3"
        async with TestServer(make_app()) as server:
            result = await client.download_file(str(server.make_url("/audio.mp3")), dest)

        assert result == dest
        assert dest.stat().st_size == 200_000

    @pytest.mark.asyncio
    async def test_non_200_removes_partial_file(self, client, tmp_path):
        dest = tmp_path / "episode.mp3"
        async with TestServer(make_app()) as server:
            with pytest.raises(ProviderError, match="HTTP 404"):
                await client.download_file(str(server.make_url("/missing")), dest)

        assert not dest.exists()
