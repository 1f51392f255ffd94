# File: tests/test_fetcher.py
from __future__ import annotations

import gzip

import pytest
from aiohttp import ClientSession, web

from sitewatch.crawler.fetcher import Fetcher
from sitewatch.crawler.models import (
    ContentKind,
    FetchedResource,
    NonOkStatus,
    TransportError,
)


def _session() -> ClientSession:
    return ClientSession(auto_decompress=False, headers={"Accept-Encoding": "gzip"})


@pytest.mark.asyncio()
async def test_text_response(serve, make_config):
    async def page(_):
        return web.Response(text="<h1>Hello</h1>", content_type="text/html", charset="utf-8")

    base = await serve({"/": page})
    async with _session() as session:
        outcome = await Fetcher(session, make_config(base)).fetch(base)

    assert isinstance(outcome, FetchedResource)
    assert outcome.kind is ContentKind.TEXT
    assert outcome.content_type == "text/html"
    assert outcome.content == "<h1>Hello</h1>"


@pytest.mark.asyncio()
async def test_gzip_text_is_decompressed(serve, make_config):
    plain = '<p>compressed</p>\n<a href="/next">next</a>'

    async def page(_):
        return web.Response(
            body=gzip.compress(plain.encode("utf-8")),
            content_type="text/html",
            headers={"Content-Encoding": "gzip"},
        )

    base = await serve({"/": page})
    async with _session() as session:
        outcome = await Fetcher(session, make_config(base)).fetch(base)

    assert isinstance(outcome, FetchedResource)
    assert outcome.content == plain


@pytest.mark.asyncio()
async def test_gzip_binary_is_decompressed(serve, make_config):
    script = b"console.log('compressed');\n"

    async def app_js(_):
        return web.Response(
            body=gzip.compress(script),
            content_type="application/javascript",
            headers={"Content-Encoding": "gzip"},
        )

    base = await serve({"/static/app.js": app_js})
    async with _session() as session:
        outcome = await Fetcher(session, make_config(base)).fetch(f"{base}/static/app.js")

    assert isinstance(outcome, FetchedResource)
    assert outcome.kind is ContentKind.BINARY
    assert outcome.content == script


@pytest.mark.asyncio()
async def test_corrupt_gzip_is_transport_error(serve, make_config):
    async def page(_):
        return web.Response(
            body=b"not gzip at all",
            content_type="text/plain",
            headers={"Content-Encoding": "gzip"},
        )

    base = await serve({"/": page})
    async with _session() as session:
        outcome = await Fetcher(session, make_config(base)).fetch(base)

    assert isinstance(outcome, TransportError)


@pytest.mark.asyncio()
async def test_image_is_binary(serve, make_config):
    data = b"\xff\xd8\xff\xe0fakejpeg"

    async def avatar(_):
        return web.Response(body=data, content_type="image/jpeg")

    base = await serve({"/avatar": avatar})
    async with _session() as session:
        outcome = await Fetcher(session, make_config(base)).fetch(f"{base}/avatar")

    assert isinstance(outcome, FetchedResource)
    assert outcome.kind is ContentKind.BINARY
    assert outcome.content == data


@pytest.mark.asyncio()
async def test_unclassified_type_is_other(serve, make_config):
    async def video(_):
        return web.Response(body=b"\x00\x01", content_type="video/mp4")

    base = await serve({"/clip": video})
    async with _session() as session:
        outcome = await Fetcher(session, make_config(base)).fetch(f"{base}/clip")

    assert isinstance(outcome, FetchedResource)
    assert outcome.kind is ContentKind.OTHER


@pytest.mark.asyncio()
async def test_non_ok_status(serve, make_config):
    base = await serve({})
    async with _session() as session:
        outcome = await Fetcher(session, make_config(base)).fetch(f"{base}/missing")

    assert outcome == NonOkStatus(f"{base}/missing", 404)


@pytest.mark.asyncio()
async def test_connection_refused_is_transport_error(unused_tcp_port, make_config):
    url = f"http://127.0.0.1:{unused_tcp_port}"
    async with _session() as session:
        outcome = await Fetcher(session, make_config(url)).fetch(url)

    assert isinstance(outcome, TransportError)
    assert outcome.url == url


@pytest.mark.asyncio()
async def test_custom_header_is_sent(serve, make_config):
    seen = {}

    async def page(request):
        seen["token"] = request.headers.get("X-Token")
        return web.Response(text="ok", content_type="text/plain")

    base = await serve({"/": page})
    config = make_config(base, header_name="X-Token", header_value="secret")
    async with _session() as session:
        await Fetcher(session, config).fetch(base)

    assert seen["token"] == "secret"


@pytest.mark.asyncio()
async def test_header_needs_name_and_value(serve, make_config):
    seen = {}

    async def page(request):
        seen["present"] = "X-Token" in request.headers
        return web.Response(text="ok", content_type="text/plain")

    base = await serve({"/": page})
    config = make_config(base, header_name="X-Token", header_value="")
    async with _session() as session:
        await Fetcher(session, config).fetch(base)

    assert seen["present"] is False
