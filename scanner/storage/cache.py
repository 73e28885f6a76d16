import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from scanner.config import Config

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "token-data"


def cache_key(network_id: str, token_address: str) -> str:
    return f"{CACHE_KEY_PREFIX}:{network_id}-{token_address}"


class TTLCache:
    """
    In-memory key/value store with per-entry expiry.

    Expired entries are dropped lazily when read; there is no size bound and
    no background sweep. One instance is built at process start and handed to
    the scanner.
    """

    def __init__(self, default_ttl: float = Config.CACHE_TTL, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expiry = entry
        if self._clock() >= expiry:
            del self._entries[key]
            logger.debug(f"Cache entry expired: {key}")
            return None
        return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None):
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = (value, self._clock() + ttl)

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
