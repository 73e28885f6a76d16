import logging
from typing import Optional
from scanner.config import Config
from scanner.models.token import RugCheckPayload, ProviderResult, PROVIDER_RUGCHECK
from scanner.scraper.fetch import fetch_json, ApiError

logger = logging.getLogger("RugCheck")


class RugCheckClient:
    def __init__(
        self,
        api_token: Optional[str] = Config.RUGCHECK_API_TOKEN,
        base_url: str = Config.RUGCHECK_API_URL,
        max_retries: int = Config.MAX_RETRIES,
        backoff: float = Config.RETRY_BACKOFF,
    ):
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.backoff = backoff

    async def get_report(self, mint: str) -> ProviderResult:
        if not self.api_token:
            logger.debug("RugCheck API token is missing. Skipping RugCheck.")
            return ProviderResult.absent(PROVIDER_RUGCHECK, "missing credential")

        url = f"{self.base_url}/{mint}"
        try:
            data = await fetch_json(
                url,
                headers={"Authorization": f"Bearer {self.api_token}"},
                max_retries=self.max_retries,
                backoff=self.backoff,
            )
        except ApiError as e:
            if e.status == 401:
                logger.error("RugCheck API Error: Unauthorized. Check your API token.")
                return ProviderResult.error(PROVIDER_RUGCHECK, "unauthorized")
            if e.status == 404:
                # Common for brand new mints
                logger.info(f"RugCheck: Token {mint} not found.")
                return ProviderResult.absent(PROVIDER_RUGCHECK, "not found")
            logger.error(f"Failed to fetch RugCheck data for {mint}: {e.message}")
            return ProviderResult.error(PROVIDER_RUGCHECK, e.message)
        except Exception as e:
            logger.error(f"Failed to fetch RugCheck data for {mint}: {e}")
            return ProviderResult.error(PROVIDER_RUGCHECK, str(e) or type(e).__name__)

        if not isinstance(data, dict):
            logger.error(f"RugCheck returned an unexpected body for {mint}")
            return ProviderResult.error(PROVIDER_RUGCHECK, "malformed response")

        return ProviderResult.ok(PROVIDER_RUGCHECK, RugCheckPayload.from_dict(data))
