# contact_scout/api.py
"""
HTTP endpoints (aiohttp.web):

* ``POST /api/crawl``      - ``{items: [{homepage, domain}], maxPagesPerSite?}``
* ``POST /api/enrich/org`` - ``{domain?, name?, email?, phone?}``

Invalid input answers 400 with ``{"error": {"code": "INPUT_INVALID", ...}}``.
"""
from __future__ import annotations

import json
from typing import Any, AsyncIterator, Awaitable, Callable, Dict

from aiohttp import web

from contact_scout.config import CrawlerConfig
from contact_scout.engine import Engine
from contact_scout.errors import InputInvalid
from contact_scout.logger import logger

__all__ = ["ENGINE_KEY", "build_app", "create_app"]

ENGINE_KEY = web.AppKey("engine", Engine)


async def _read_json(request: web.Request) -> Any:
    try:
        return await request.json()
    except json.JSONDecodeError as exc:
        raise InputInvalid(f"body is not valid JSON: {exc.msg}") from None


async def _handle(
    request: web.Request, action: Callable[[Engine, Any], Awaitable[Dict[str, Any]]]
) -> web.Response:
    engine = request.app[ENGINE_KEY]
    try:
        payload = await _read_json(request)
        body = await action(engine, payload)
    except InputInvalid as exc:
        logger.info("%s %s rejected: %s", request.method, request.path, exc)
        return web.json_response(exc.to_dict(), status=400)
    return web.json_response(body)


async def crawl_handler(request: web.Request) -> web.Response:
    return await _handle(request, lambda engine, payload: engine.handle_crawl(payload))


async def enrich_handler(request: web.Request) -> web.Response:
    try:
        return await _handle(request, lambda engine, payload: engine.handle_enrich(payload))
    except Exception as exc:  # noqa: BLE001 - always answer with a JSON body
        logger.exception("Enrichment failed: %s", exc)
        return web.json_response({"suggestions": [], "error": str(exc) or "enrich failed"}, status=500)


def create_app(engine: Engine) -> web.Application:
    """Application bound to an already started :class:`Engine`."""
    app = web.Application()
    app[ENGINE_KEY] = engine
    app.add_routes([
        web.post("/api/crawl", crawl_handler),
        web.post("/api/enrich/org", enrich_handler),
    ])
    return app


def build_app(config: CrawlerConfig) -> web.Application:
    """Application that owns its Engine for the lifetime of the server."""
    engine = Engine(config)
    app = create_app(engine)

    async def engine_ctx(_app: web.Application) -> AsyncIterator[None]:
        async with engine:
            yield

    app.cleanup_ctx.append(engine_ctx)
    return app
