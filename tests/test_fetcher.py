# tests/test_fetcher.py
import asyncio

import pytest
from aiohttp import web
from conftest import _serve_app

from contact_scout.config import CrawlerConfig
from contact_scout.crawler.fetcher import XML_TYPES, Fetcher
from contact_scout.errors import ErrorCode, FetchError, FetchReason

BODY = "<html><body><a href='mailto:info@acme.de'>mail</a></body></html>"


def make_app(hits: dict) -> web.Application:
    async def ok(request):
        return web.Response(text=BODY, content_type="text/html")

    async def missing(request):
        return web.Response(status=404, text="nope", content_type="text/html")

    async def pdf(request):
        return web.Response(body=b"%PDF-1.4", content_type="application/pdf")

    async def big_declared(request):
        return web.Response(text="x" * 5000, content_type="text/html")

    async def big_streamed(request):
        resp = web.StreamResponse(headers={"Content-Type": "text/html"})
        resp.enable_chunked_encoding()
        await resp.prepare(request)
        for _ in range(10):
            await resp.write(b"y" * 1024)
        await resp.write_eof()
        return resp

    async def slow(request):
        await asyncio.sleep(1.0)
        return web.Response(text=BODY, content_type="text/html")

    async def flaky(request):
        hits["flaky"] = hits.get("flaky", 0) + 1
        if hits["flaky"] == 1:
            return web.Response(status=503, text="busy")
        return web.Response(text=BODY, content_type="text/html")

    async def broken(request):
        hits["broken"] = hits.get("broken", 0) + 1
        return web.Response(status=500, text="error")

    async def redirect(request):
        raise web.HTTPFound("/Contact/")

    async def sitemap(request):
        return web.Response(text="<urlset/>", content_type="application/xml")

    app = web.Application()
    app.router.add_get("/", ok)
    app.router.add_get("/Contact/", ok)
    app.router.add_get("/missing", missing)
    app.router.add_get("/file.pdf", pdf)
    app.router.add_get("/big", big_declared)
    app.router.add_get("/stream", big_streamed)
    app.router.add_get("/slow", slow)
    app.router.add_get("/flaky", flaky)
    app.router.add_get("/broken", broken)
    app.router.add_get("/go", redirect)
    app.router.add_get("/sitemap.xml", sitemap)
    return app


def config(**overrides) -> CrawlerConfig:
    values = {"user_agent": "TestAgent/1.0", "page_timeout": 2.0, "max_page_bytes": 2048}
    values.update(overrides)
    return CrawlerConfig(**values)


async def fetch_error(fetcher: Fetcher, url: str, **kwargs) -> FetchError:
    with pytest.raises(FetchError) as info:
        await fetcher.fetch(url, **kwargs)
    return info.value


@pytest.mark.asyncio()
async def test_fetch_ok_returns_body_and_size(unused_tcp_port):
    async for base in _serve_app(make_app({}), unused_tcp_port):
        async with Fetcher(config()) as fetcher:
            page = await fetcher.fetch(base + "/")
    assert page.body == BODY
    assert page.size == len(BODY.encode("utf-8"))
    assert page.url == f"http://localhost:{unused_tcp_port}"


@pytest.mark.asyncio()
async def test_redirect_target_is_normalized(unused_tcp_port):
    async for base in _serve_app(make_app({}), unused_tcp_port):
        async with Fetcher(config()) as fetcher:
            page = await fetcher.fetch(base + "/go")
    assert page.url == f"http://localhost:{unused_tcp_port}/contact"


@pytest.mark.asyncio()
async def test_fetch_failure_reasons(unused_tcp_port):
    async for base in _serve_app(make_app({}), unused_tcp_port):
        async with Fetcher(config()) as fetcher:
            missing = await fetch_error(fetcher, base + "/missing")
            pdf = await fetch_error(fetcher, base + "/file.pdf")
            declared = await fetch_error(fetcher, base + "/big")
            streamed = await fetch_error(fetcher, base + "/stream")
            slow = await fetch_error(fetcher, base + "/slow", timeout=0.2)

    assert (missing.reason, missing.code) == (FetchReason.BAD_STATUS, ErrorCode.FETCH_BAD_STATUS)
    assert "404" in missing.detail
    assert pdf.reason is FetchReason.NOT_HTML
    assert declared.reason is FetchReason.TOO_LARGE
    assert streamed.reason is FetchReason.TOO_LARGE
    assert slow.reason is FetchReason.TIMEOUT


@pytest.mark.asyncio()
async def test_closed_port_is_network_error(unused_tcp_port_factory):
    port = unused_tcp_port_factory()
    async with Fetcher(config()) as fetcher:
        error = await fetch_error(fetcher, f"http://localhost:{port}/")
    assert error.reason is FetchReason.NETWORK
    assert error.code is ErrorCode.FETCH_NETWORK


@pytest.mark.asyncio()
async def test_xml_accepted_only_when_asked(unused_tcp_port):
    async for base in _serve_app(make_app({}), unused_tcp_port):
        async with Fetcher(config()) as fetcher:
            error = await fetch_error(fetcher, base + "/sitemap.xml")
            page = await fetcher.fetch(base + "/sitemap.xml", accept=XML_TYPES)
    assert error.reason is FetchReason.NOT_HTML
    assert page.body == "<urlset/>"


@pytest.mark.asyncio()
async def test_server_error_without_retries(unused_tcp_port):
    hits = {}
    async for base in _serve_app(make_app(hits), unused_tcp_port):
        async with Fetcher(config(retry_times=0)) as fetcher:
            error = await fetch_error(fetcher, base + "/broken")
    assert error.reason is FetchReason.BAD_STATUS
    assert "500" in error.detail
    assert hits["broken"] == 1


@pytest.mark.asyncio()
async def test_retry_after_server_error(unused_tcp_port):
    hits = {}
    async for base in _serve_app(make_app(hits), unused_tcp_port):
        async with Fetcher(config(retry_times=1, page_timeout=5.0)) as fetcher:
            page = await fetcher.fetch(base + "/flaky")
    assert page.body == BODY
    assert hits["flaky"] == 2


@pytest.mark.asyncio()
async def test_fetch_without_session_fails():
    with pytest.raises(RuntimeError):
        await Fetcher(config()).fetch("http://localhost/")
