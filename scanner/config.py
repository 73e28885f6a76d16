import os
from dataclasses import dataclass, field
from typing import List


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    return [s.strip() for s in os.getenv(name, default).split(",") if s.strip()]


@dataclass
class ApiKeyStatus:
    missing_keys: List[str] = field(default_factory=list)
    rugcheck_disabled: bool = False


class Config:
    # --- API ---
    DEXSCREENER_API_URL = "https://api.dexscreener.com/latest/dex/pairs"
    DEXSCREENER_TOKENS_URL = "https://api.dexscreener.com/latest/dex/tokens"
    GOPLUS_API_URL = "https://api.gopluslabs.io/api/v1/token_security"
    RUGCHECK_API_URL = "https://api.rugcheck.xyz/v1/tokens"

    # --- CREDENTIALS ---
    # Both providers are optional; a missing key only degrades the signals.
    GOPLUS_API_KEY = os.getenv("GOPLUS_API_KEY") or None
    RUGCHECK_API_TOKEN = os.getenv("RUGCHECK_API_TOKEN") or None
    ENABLE_RUGCHECK_SOLANA = _env_bool("ENABLE_RUGCHECK_SOLANA", True)

    # --- SCAN ---
    DS_NETWORKS = _env_list(
        "DS_NETWORKS",
        "ethereum,bsc,base,arbitrum,optimism,polygon,avalanche,fantom,cronos,solana",
    )
    SCAN_MAX_PER_NETWORK = int(os.getenv("SCAN_MAX_PER_NETWORK", "20"))
    API_CONCURRENCY_LIMIT = int(os.getenv("API_CONCURRENCY_LIMIT", "5"))

    # --- CACHE ---
    CACHE_TTL = float(os.getenv("CACHE_TTL", str(2 * 60 * 60)))  # seconds

    # --- SCRAPER ---
    REQUEST_TIMEOUT = 10
    MAX_RETRIES = 3
    RETRY_BACKOFF = 0.3  # seconds, multiplied by the attempt number
    USER_AGENT_ROTATION = True

    # --- SYSTEM ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", "8080"))

    @classmethod
    def rugcheck_enabled(cls) -> bool:
        return cls.ENABLE_RUGCHECK_SOLANA and bool(cls.RUGCHECK_API_TOKEN)

    @classmethod
    def check_api_keys(cls) -> ApiKeyStatus:
        """
        Reports which provider credentials are missing so the app can warn
        that it is running in a degraded state.
        """
        missing = []
        if not cls.GOPLUS_API_KEY:
            missing.append("GoPlus")
        if not cls.RUGCHECK_API_TOKEN:
            missing.append("RugCheck")
        return ApiKeyStatus(missing_keys=missing, rugcheck_disabled=not cls.rugcheck_enabled())
