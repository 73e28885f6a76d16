import asyncio
import enum
import logging
from typing import List, Optional, Sequence
from scanner.config import Config
from scanner.models.token import Listing, EnrichedToken
from scanner.scraper.dex_api import DexAPI
from scanner.scraper.pool import run_limited
from scanner.analyzer.risk_flags import RiskEngine
from scanner.storage.cache import TTLCache

logger = logging.getLogger(__name__)


class ScanState(enum.Enum):
    IDLE = "idle"
    LISTING = "listing"
    ENRICHING = "enriching"
    DONE = "done"
    FAILED = "failed"


class Scanner:
    def __init__(
        self,
        cache: TTLCache,
        dex_api: Optional[DexAPI] = None,
        risk_engine: Optional[RiskEngine] = None,
        networks: Optional[Sequence[str]] = None,
        max_per_network: int = Config.SCAN_MAX_PER_NETWORK,
        concurrency: int = Config.API_CONCURRENCY_LIMIT,
    ):
        if risk_engine is not None and getattr(risk_engine, "cache", cache) is not cache:
            raise ValueError("risk_engine must share the scanner's cache")
        self.cache = cache
        self.dex_api = dex_api or DexAPI()
        self.risk_engine = risk_engine or RiskEngine(cache)
        self.networks = list(networks if networks is not None else Config.DS_NETWORKS)
        self.max_per_network = max_per_network
        self.concurrency = concurrency
        self.state = ScanState.IDLE
        self.last_results: List[EnrichedToken] = []

    async def run_scan(self) -> List[EnrichedToken]:
        """
        Full scan:
        1. Fetch recent pairs for every network (concurrently)
        2. Cap each network's slice at max_per_network
        3. Enrich every listing through the bounded pool
        """
        logger.info("Starting full scan across all networks...")
        try:
            self.state = ScanState.LISTING
            per_network = await asyncio.gather(*(self._list_network(n) for n in self.networks))
            listings = [listing for group in per_network for listing in group]

            self.state = ScanState.ENRICHING
            tasks = [self._enrich_task(listing) for listing in listings]
            results = await run_limited(tasks, self.concurrency)
        except Exception:
            self.state = ScanState.FAILED
            raise

        results = [r for r in results if r is not None]
        self.last_results = results
        self.state = ScanState.DONE
        logger.info(f"Scan complete. Processed {len(results)} tokens.")
        return results

    async def rescan_token(self, network: str, address: str) -> Optional[EnrichedToken]:
        """
        Re-scores one token, ignoring any cached result.
        """
        logger.info(f"Rescanning {address} on {network}...")
        pairs = await self.dex_api.get_pairs_by_token_address(address)
        for listing in pairs:
            if listing.network_id == network and listing.base_token_address.lower() == address.lower():
                return await self.risk_engine.enrich(listing, use_cache=False)
        logger.warning(f"No pair found for {address} on {network}")
        return None

    async def _list_network(self, network: str) -> List[Listing]:
        try:
            pairs = await self.dex_api.get_recent_pairs(network)
        except Exception as e:
            logger.error(f"Failed to get pairs for {network}: {e}")
            return []
        return list(pairs)[: self.max_per_network]

    def _enrich_task(self, listing: Listing):
        async def task() -> EnrichedToken:
            return await self.risk_engine.enrich(listing)
        return task
