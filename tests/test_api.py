# tests/test_api.py
import pytest
from aiohttp import ClientSession
from conftest import FakeFetcher, _serve_app, html_page

from contact_scout.api import create_app
from contact_scout.engine import Engine

PAGES = {
    "https://acme.de": html_page(
        '<a href="mailto:info@acme.de">Mail</a><a href="tel:+49301234567">Call</a>', "Acme GmbH"
    ),
}


class NoSearch:
    async def search(self, query):
        return []


class BrokenSearch:
    async def search(self, query):
        raise RuntimeError("quota exceeded")


async def post(base: str, path: str, **kwargs):
    async with ClientSession() as session:
        async with session.post(base + path, **kwargs) as resp:
            return resp.status, await resp.json()


@pytest.mark.asyncio()
async def test_crawl_endpoint(unused_tcp_port, basic_config):
    async with Engine(basic_config, fetcher=FakeFetcher(PAGES), search=NoSearch()) as engine:
        async for base in _serve_app(create_app(engine), unused_tcp_port):
            status, body = await post(base, "/api/crawl", json={
                "items": [
                    {"homepage": "https://acme.de", "domain": "acme.de"},
                    {"homepage": "https://down.de", "domain": "down.de"},
                ],
                "maxPagesPerSite": 3,
            })

    assert status == 200
    assert set(body["results"]) == {"acme.de", "down.de"}
    assert body["results"]["acme.de"]["emails"] == ["info@acme.de"]
    assert body["results"]["acme.de"]["pagesAnalyzed"] == 1
    assert body["results"]["down.de"]["error"] == "HOMEPAGE_UNREACHABLE"


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "kwargs",
    [
        {"data": "{not json", "headers": {"Content-Type": "application/json"}},
        {"json": {"items": []}},
        {"json": {"items": [{"homepage": "https://acme.de"}]}},
        {"json": ["acme.de"]},
    ],
)
async def test_crawl_endpoint_rejects_bad_input(unused_tcp_port, basic_config, kwargs):
    async with Engine(basic_config, fetcher=FakeFetcher(PAGES), search=NoSearch()) as engine:
        async for base in _serve_app(create_app(engine), unused_tcp_port):
            status, body = await post(base, "/api/crawl", **kwargs)

    assert status == 400
    assert body["error"]["code"] == "INPUT_INVALID"


@pytest.mark.asyncio()
async def test_enrich_endpoint(unused_tcp_port, basic_config):
    async with Engine(basic_config, fetcher=FakeFetcher(PAGES), search=NoSearch()) as engine:
        async for base in _serve_app(create_app(engine), unused_tcp_port):
            status, body = await post(base, "/api/enrich/org", json={"email": "sales@acme.de"})
            bad_status, bad_body = await post(base, "/api/enrich/org", json={"name": "  "})

    assert status == 200
    assert body["suggestions"][0] == {"field": "domain", "value": "acme.de", "confidence": 0.9, "source": "email"}
    assert body["trace"]["stage"] == "email_domain"
    assert body["trace"]["attempts"] == 1
    assert bad_status == 400
    assert bad_body["error"]["code"] == "INPUT_INVALID"


@pytest.mark.asyncio()
async def test_enrich_endpoint_failure_is_json(unused_tcp_port, basic_config):
    async with Engine(basic_config, fetcher=FakeFetcher({}), search=BrokenSearch()) as engine:
        async for base in _serve_app(create_app(engine), unused_tcp_port):
            status, body = await post(base, "/api/enrich/org", json={"name": "Acme"})

    assert status == 500
    assert body == {"suggestions": [], "error": "quota exceeded"}


@pytest.mark.asyncio()
async def test_engine_requires_context(basic_config):
    engine = Engine(basic_config, fetcher=FakeFetcher({}), search=NoSearch())
    with pytest.raises(RuntimeError):
        await engine.crawl_sites([])
