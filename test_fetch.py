import asyncio
import os
import sys

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from scanner.scraper import fetch
from scanner.scraper.anti_block import AntiBlock
from scanner.scraper.fetch import fetch_json, ApiError


class RecordingAntiBlock(AntiBlock):
    def __init__(self):
        super().__init__()
        self.waits = []

    async def backoff(self, attempt: int, base: float):
        self.waits.append((attempt, base))


@pytest.fixture
def backoffs(monkeypatch):
    recorder = RecordingAntiBlock()
    monkeypatch.setattr(fetch, "_anti_block", recorder)
    return recorder


def serve(handler, **kwargs):
    """Runs fetch_json against a one-route local server."""
    async def _run():
        app = web.Application()
        app.router.add_route("*", "/api", handler)
        async with TestServer(app) as server:
            return await fetch_json(str(server.make_url("/api")), **kwargs)
    return asyncio.run(_run())


def test_success_returns_parsed_json(backoffs):
    async def handler(request):
        return web.json_response({"pairs": [1, 2]})

    assert serve(handler) == {"pairs": [1, 2]}
    assert backoffs.waits == []


def test_empty_success_body_is_none(backoffs):
    async def handler(request):
        return web.Response(status=200, text="")

    assert serve(handler) is None


def test_retries_then_succeeds_with_linear_backoff(backoffs):
    calls = {"n": 0}

    async def handler(request):
        calls["n"] += 1
        if calls["n"] < 3:
            return web.Response(status=500, text="boom")
        return web.json_response({"ok": True})

    assert serve(handler, max_retries=3, backoff=0.5) == {"ok": True}
    assert calls["n"] == 3
    assert backoffs.waits == [(1, 0.5), (2, 0.5)]


def test_exhausted_retries_raise_last_error_from_json_message(backoffs):
    calls = {"n": 0}

    async def handler(request):
        calls["n"] += 1
        return web.json_response({"message": f"nope {calls['n']}"}, status=502)

    with pytest.raises(ApiError) as info:
        serve(handler, max_retries=2, backoff=0.01)

    assert calls["n"] == 2
    assert info.value.status == 502
    assert "nope 2" in info.value.message
    # No wait after the final attempt
    assert backoffs.waits == [(1, 0.01)]


def test_error_message_falls_back_to_text_then_status(backoffs):
    async def text_handler(request):
        return web.Response(status=503, text="service down")

    async def empty_handler(request):
        return web.Response(status=404)

    with pytest.raises(ApiError) as info:
        serve(text_handler, max_retries=1)
    assert info.value.message.endswith("service down")

    with pytest.raises(ApiError) as info:
        serve(empty_handler, max_retries=1)
    assert info.value.status == 404
    assert info.value.message.endswith(": 404")


def test_json_error_without_message_is_serialized(backoffs):
    async def handler(request):
        return web.json_response({"code": 7}, status=400)

    with pytest.raises(ApiError) as info:
        serve(handler, max_retries=1)
    assert '{"code": 7}' in info.value.message


def test_headers_and_body_are_sent(backoffs):
    seen = {}

    async def handler(request):
        seen["method"] = request.method
        seen["auth"] = request.headers.get("Authorization")
        seen["accept"] = request.headers.get("Accept")
        seen["body"] = await request.json()
        return web.json_response({})

    serve(handler, method="POST", headers={"Authorization": "Bearer k"}, body={"a": 1})
    assert seen == {"method": "POST", "auth": "Bearer k", "accept": "application/json", "body": {"a": 1}}


def test_zero_retries_rejected():
    with pytest.raises(ValueError):
        asyncio.run(fetch_json("http://127.0.0.1:1/", max_retries=0))
