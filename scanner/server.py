from aiohttp import web
import logging
from scanner.config import Config
from scanner.scan import Scanner, ScanState
from scanner.report.console import filter_tokens

logger = logging.getLogger("Server")

SCANNER_KEY = web.AppKey("scanner", Scanner)


async def root_handler(request):
    scanner = request.app[SCANNER_KEY]
    return web.json_response({"status": "ok", "state": scanner.state.value})


async def tokens_handler(request):
    scanner = request.app[SCANNER_KEY]
    tokens = filter_tokens(
        scanner.last_results,
        network=request.query.get("network", "all"),
        query=request.query.get("q", ""),
    )
    return web.json_response([t.to_dict() for t in tokens])


async def scan_handler(request):
    scanner = request.app[SCANNER_KEY]
    if scanner.state in (ScanState.LISTING, ScanState.ENRICHING):
        return web.json_response({"error": "scan already running"}, status=409)
    try:
        results = await scanner.run_scan()
    except Exception as e:
        logger.exception("Scan failed")
        return web.json_response({"error": str(e) or "An unknown error occurred during the scan."}, status=500)
    return web.json_response({"count": len(results)})


def create_app(scanner: Scanner) -> web.Application:
    app = web.Application()
    app[SCANNER_KEY] = scanner
    app.router.add_get("/", root_handler)
    app.router.add_get("/tokens", tokens_handler)
    app.router.add_post("/scan", scan_handler)
    return app


async def start_server(scanner: Scanner, port: int = Config.PORT) -> web.AppRunner:
    runner = web.AppRunner(create_app(scanner))
    await runner.setup()
    site = web.TCPSite(runner, "0.0.0.0", port)
    logger.info(f"🌍 Scan server started on port {port}")
    await site.start()
    return runner
