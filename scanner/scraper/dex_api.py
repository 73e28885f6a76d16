import logging
from typing import List, Dict, Any, Optional
from scanner.config import Config
from scanner.models.token import Listing
from scanner.scraper.fetch import fetch_json, ApiError

logger = logging.getLogger(__name__)


class DexAPI:
    def __init__(
        self,
        pairs_url: str = Config.DEXSCREENER_API_URL,
        tokens_url: str = Config.DEXSCREENER_TOKENS_URL,
        max_retries: int = Config.MAX_RETRIES,
        backoff: float = Config.RETRY_BACKOFF,
    ):
        self.pairs_url = pairs_url.rstrip("/")
        self.tokens_url = tokens_url.rstrip("/")
        self.max_retries = max_retries
        self.backoff = backoff

    async def get_recent_pairs(self, network: str) -> List[Listing]:
        """
        Fetches the newest pairs on a network, newest first.
        Any failure yields an empty list so one network can't break a scan.
        """
        url = f"{self.pairs_url}/{network}?sort=pairCreatedAt&order=desc"
        try:
            data = await fetch_json(url, max_retries=self.max_retries, backoff=self.backoff)
        except ApiError as e:
            logger.error(f"DexScreener API Error for {network}: {e.message}")
            return []
        except Exception as e:
            logger.error(f"Failed to fetch pairs from DexScreener for {network}: {e}")
            return []
        return self._to_listings(data)

    async def get_pairs_by_token_address(self, token_address: str) -> List[Listing]:
        """
        Fetches every pair that trades a token, on any network.
        """
        url = f"{self.tokens_url}/{token_address}"
        try:
            data = await fetch_json(url, max_retries=self.max_retries, backoff=self.backoff)
        except Exception as e:
            logger.error(f"Failed to fetch pairs for token {token_address}: {e}")
            return []
        return self._to_listings(data)

    def _to_listings(self, data: Optional[Dict[str, Any]]) -> List[Listing]:
        if not isinstance(data, dict):
            return []
        listings = []
        for pair in data.get("pairs") or []:
            if not isinstance(pair, dict):
                continue
            try:
                listing = Listing.from_pair(pair)
            except Exception as e:
                logger.warning(f"Skipping malformed pair {pair.get('pairAddress')}: {e}")
                continue
            if not listing.base_token_address:
                logger.debug(f"Skipping pair without base token: {pair.get('pairAddress')}")
                continue
            listings.append(listing)
        return listings
