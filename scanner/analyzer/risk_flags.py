import asyncio
import logging
from typing import Optional, Tuple
from scanner.config import Config
from scanner.models.token import (
    Listing,
    EnrichedToken,
    ProviderResult,
    PROVIDER_GOPLUS,
    PROVIDER_RUGCHECK,
)
from scanner.analyzer.chains import select_providers, get_goplus_chain_id
from scanner.analyzer.goplus import GoPlusClient
from scanner.analyzer.rugcheck import RugCheckClient
from scanner.analyzer.signals import normalize, combine
from scanner.analyzer.scoring import score_listing
from scanner.storage.cache import TTLCache, cache_key

logger = logging.getLogger(__name__)


class RiskEngine:
    def __init__(
        self,
        cache: TTLCache,
        goplus: Optional[GoPlusClient] = None,
        rugcheck: Optional[RugCheckClient] = None,
        rugcheck_enabled: Optional[bool] = None,
        cache_ttl: Optional[float] = None,
    ):
        self.cache = cache
        self.goplus = goplus or GoPlusClient()
        self.rugcheck = rugcheck or RugCheckClient()
        self.rugcheck_enabled = Config.rugcheck_enabled() if rugcheck_enabled is None else rugcheck_enabled
        self.cache_ttl = cache_ttl

    async def enrich(self, listing: Listing, use_cache: bool = True) -> EnrichedToken:
        """
        Cache lookup -> provider calls -> normalize/merge -> score -> cache store.
        Never raises: an unexpected failure yields a listing-only score.
        """
        key = cache_key(listing.network_id, listing.base_token_address)
        if use_cache:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        try:
            result, crashed = await self._evaluate(listing)
        except Exception:
            logger.exception(f"Enrichment failed for {listing.token_id}")
            return EnrichedToken(
                id=listing.token_id,
                listing=listing,
                risk=score_listing(listing, None),
            )

        # Results with a crashed provider are not cached
        if not crashed:
            self.cache.set(key, result, ttl=self.cache_ttl)
        return result

    async def _evaluate(self, listing: Listing) -> Tuple[EnrichedToken, bool]:
        primary, secondary = select_providers(listing.network_id, self.rugcheck_enabled)

        # Both providers run side by side; an unmapped one is never called.
        outcomes = await asyncio.gather(
            self._call(primary, listing),
            self._call(secondary, listing),
            return_exceptions=True,
        )
        crashed = False
        results = []
        for provider, outcome in zip((primary, secondary), outcomes):
            if isinstance(outcome, Exception):
                logger.error(f"{provider} check crashed for {listing.token_id}: {outcome}")
                crashed = True
                outcome = ProviderResult.error(provider, str(outcome) or type(outcome).__name__)
            elif isinstance(outcome, BaseException):
                raise outcome
            results.append(outcome)
        primary_result, secondary_result = results

        primary_signals = normalize(primary_result.payload) if primary_result and primary_result.is_ok else None
        secondary_signals = normalize(secondary_result.payload) if secondary_result and secondary_result.is_ok else None
        signals = combine(primary_signals, secondary_signals)

        return EnrichedToken(
            id=listing.token_id,
            listing=listing,
            risk=score_listing(listing, signals),
            signals=signals,
            primary_provider=primary,
            primary_result=primary_result,
            secondary_provider=secondary,
            secondary_result=secondary_result,
        ), crashed

    async def _call(self, provider: Optional[str], listing: Listing) -> Optional[ProviderResult]:
        if provider == PROVIDER_RUGCHECK:
            return await self.rugcheck.get_report(listing.base_token_address)
        if provider == PROVIDER_GOPLUS:
            chain_id = get_goplus_chain_id(listing.network_id)
            return await self.goplus.check_token_security(chain_id, listing.base_token_address)
        return None
