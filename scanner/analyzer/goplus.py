import logging
from typing import Optional
from scanner.config import Config
from scanner.models.token import GoPlusPayload, ProviderResult, PROVIDER_GOPLUS
from scanner.scraper.fetch import fetch_json, ApiError

logger = logging.getLogger("GoPlus")


class GoPlusClient:
    def __init__(
        self,
        api_key: Optional[str] = Config.GOPLUS_API_KEY,
        base_url: str = Config.GOPLUS_API_URL,
        max_retries: int = Config.MAX_RETRIES,
        backoff: float = Config.RETRY_BACKOFF,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.backoff = backoff

    async def check_token_security(self, chain_id: str, address: str) -> ProviderResult:
        """
        Checks token security via GoPlus. chain_id is the GoPlus chain id, not
        the DexScreener network name.
        """
        if not self.api_key:
            logger.debug("GoPlus API key is missing. Skipping GoPlus check.")
            return ProviderResult.absent(PROVIDER_GOPLUS, "missing credential")

        url = f"{self.base_url}/{chain_id}?contract_addresses={address}"
        try:
            data = await fetch_json(
                url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                max_retries=self.max_retries,
                backoff=self.backoff,
            )
        except ApiError as e:
            if e.status == 401:
                logger.error("GoPlus API Error: Unauthorized. Check your API key.")
                return ProviderResult.error(PROVIDER_GOPLUS, "unauthorized")
            logger.error(f"Failed to fetch GoPlus data for {address} on chain {chain_id}: {e.message}")
            return ProviderResult.error(PROVIDER_GOPLUS, e.message)
        except Exception as e:
            logger.error(f"Failed to fetch GoPlus data for {address} on chain {chain_id}: {e}")
            return ProviderResult.error(PROVIDER_GOPLUS, str(e) or type(e).__name__)

        # Structure: {"code": 1, "message": "OK", "result": {"addr": {...}}}
        if not isinstance(data, dict) or data.get("code") != 1 or not isinstance(data.get("result"), dict):
            message = data.get("message") if isinstance(data, dict) else "empty response"
            logger.error(f"GoPlus API returned an error: {message}")
            return ProviderResult.error(PROVIDER_GOPLUS, f"api error: {message}")

        # The result is keyed by address; GoPlus lower-cases EVM addresses
        result = {k.lower(): v for k, v in data["result"].items()}
        entry = result.get(address.lower())
        if not isinstance(entry, dict):
            logger.info(f"GoPlus: Token {address} not found on chain {chain_id}.")
            return ProviderResult.absent(PROVIDER_GOPLUS, "not found")

        return ProviderResult.ok(PROVIDER_GOPLUS, GoPlusPayload.from_dict(entry))
