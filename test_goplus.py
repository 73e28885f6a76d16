import asyncio

from aiohttp import web
from aiohttp.test_utils import TestServer

from scanner.analyzer.goplus import GoPlusClient
from scanner.models.token import GoPlusPayload

USDC_ETH = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


def run_goplus(handler, address=USDC_ETH, chain_id="1", api_key="test-key"):
    calls = []

    async def recording(request):
        calls.append(request)
        return await handler(request)

    async def _run():
        app = web.Application()
        app.router.add_get("/api/v1/token_security/{chain_id}", recording)
        async with TestServer(app) as server:
            client = GoPlusClient(
                api_key=api_key,
                base_url=str(server.make_url("/api/v1/token_security")),
                max_retries=1,
                backoff=0,
            )
            return await client.check_token_security(chain_id, address)

    return asyncio.run(_run()), calls


def test_lookup_is_case_insensitive():
    seen = {}

    async def handler(request):
        seen["chain"] = request.match_info["chain_id"]
        seen["addresses"] = request.query["contract_addresses"]
        seen["auth"] = request.headers.get("Authorization")
        return web.json_response({
            "code": 1,
            "message": "OK",
            "result": {USDC_ETH.lower(): {"is_honeypot": "0", "buy_tax": "0", "owner_address": "0x1"}},
        })

    result, _ = run_goplus(handler)

    assert result.is_ok
    assert isinstance(result.payload, GoPlusPayload)
    assert result.payload.is_honeypot == "0"
    assert result.payload.extra == {"owner_address": "0x1"}
    assert seen == {"chain": "1", "addresses": USDC_ETH, "auth": "Bearer test-key"}


def test_missing_key_skips_the_call():
    async def handler(request):
        return web.json_response({"code": 1, "result": {}})

    result, calls = run_goplus(handler, api_key=None)

    assert result.status == "absent"
    assert result.reason == "missing credential"
    assert calls == []


def test_address_not_in_result():
    async def handler(request):
        return web.json_response({"code": 1, "message": "OK", "result": {}})

    result, _ = run_goplus(handler)
    assert result.status == "absent"
    assert result.reason == "not found"


def test_api_level_error_code():
    async def handler(request):
        return web.json_response({"code": 4029, "message": "too many requests"})

    result, _ = run_goplus(handler)
    assert result.status == "error"
    assert "too many requests" in result.reason


def test_unauthorized():
    async def handler(request):
        return web.json_response({"message": "bad key"}, status=401)

    result, _ = run_goplus(handler)
    assert result.status == "error"
    assert result.reason == "unauthorized"


def test_server_error_does_not_raise():
    async def handler(request):
        return web.Response(status=500, text="oops")

    result, _ = run_goplus(handler)
    assert result.status == "error"
    assert "oops" in result.reason
