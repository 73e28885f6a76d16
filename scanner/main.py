import argparse
import asyncio
import json
import logging
import sys
import colorama
from colorama import Fore

from scanner.config import Config
from scanner.scan import Scanner
from scanner.storage.cache import TTLCache
from scanner.report.console import ConsoleReport, filter_tokens
from scanner.server import start_server

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("Main")

# Initialize Colorama
colorama.init(autoreset=True)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Scan new DEX pairs and score their risk.")
    parser.add_argument("--network", default="all", help="only show one network")
    parser.add_argument("--search", default="", help="filter by symbol, name or address")
    parser.add_argument("--json", action="store_true", help="print results as JSON")
    parser.add_argument("--watch", type=float, default=0, help="rescan every N seconds")
    parser.add_argument("--serve", action="store_true", help="serve results over HTTP")
    return parser.parse_args(argv)


def warn_missing_keys():
    status = Config.check_api_keys()
    if status.missing_keys:
        logger.warning(f"Missing keys for: {', '.join(status.missing_keys)}. Running in a degraded state.")
    if status.rugcheck_disabled:
        logger.warning("RugCheck is disabled for Solana. GoPlus will be used as the primary risk provider.")


async def run(args) -> int:
    warn_missing_keys()

    # One cache for the life of the process
    scanner = Scanner(cache=TTLCache())

    if args.serve:
        await start_server(scanner)

    while True:
        try:
            results = await scanner.run_scan()
        except Exception as e:
            print(f"{Fore.RED}Scan failed: {str(e) or 'An unknown error occurred during the scan.'}")
            if not (args.watch or args.serve):
                return 1
        else:
            shown = filter_tokens(results, network=args.network, query=args.search)
            if args.json:
                print(json.dumps([t.to_dict() for t in shown], indent=2))
            else:
                ConsoleReport.print_tokens(shown)

        if args.watch:
            await asyncio.sleep(args.watch)
        elif args.serve:
            # Keep serving; further scans come through POST /scan
            await asyncio.Event().wait()
        else:
            return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Stopping scanner...")
        return 0


if __name__ == "__main__":
    sys.exit(main())
