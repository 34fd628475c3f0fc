"""Tests for fetching remote buffers against a local mock server."""
import pytest
from aiohttp import web

from musicdl_cli.core import get_buffer_from_url
from musicdl_cli.exceptions import FetchError, MusicDlError
from musicdl_cli.media.fetcher import fetch_buffer, save_buffer

pytestmark = pytest.mark.usefixtures("fetch_pool")

PNG = b"\x89PNG\r\n\x1a\n" + b"\x01" * 64


@pytest.fixture
async def server(aiohttp_server):
    async def image(request):
        return web.Response(body=PNG, content_type="image/png")

    async def missing(request):
        return web.Response(status=404, text="not here")

    async def broken(request):
        return web.Response(status=500, text="boom")

    app = web.Application()
    app.router.add_get("/image.png", image)
    app.router.add_get("/missing.png", missing)
    app.router.add_get("/broken", broken)
    return await aiohttp_server(app)


async def test_fetch_returns_body(server):
    assert await fetch_buffer(str(server.make_url("/image.png"))) == PNG


async def test_entry_point_delegates(server):
    assert await get_buffer_from_url(str(server.make_url("/image.png"))) == PNG


async def test_404_raises_fetch_error(server):
    with pytest.raises(FetchError) as exc_info:
        await fetch_buffer(str(server.make_url("/missing.png")))
    assert "404" in str(exc_info.value)
    assert exc_info.value.kind == "fetch"


async def test_server_error_raises_fetch_error(server):
    with pytest.raises(FetchError):
        await fetch_buffer(str(server.make_url("/broken")))


async def test_transport_failure_raises_fetch_error():
    with pytest.raises(FetchError):
        await fetch_buffer("http://127.0.0.1:1/image.png")


async def test_save_buffer(tmp_path):
    target = tmp_path / "cover.png"
    await save_buffer(PNG, target)
    assert target.read_bytes() == PNG


async def test_save_buffer_failure(tmp_path):
    with pytest.raises(MusicDlError) as exc_info:
        await save_buffer(PNG, tmp_path / "missing" / "cover.png")
    assert exc_info.value.kind == "write"
