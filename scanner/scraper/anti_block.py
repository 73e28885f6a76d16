import asyncio
import random
import logging
from scanner.config import Config

logger = logging.getLogger(__name__)


class AntiBlock:
    def __init__(self, rotate: bool = Config.USER_AGENT_ROTATION):
        # Hardcoded list to avoid fake_useragent fetch failures/limitations
        self.user_agents = [
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        ]
        self.rotate = rotate

    def get_headers(self) -> dict:
        """
        JSON API headers with a (possibly rotated) User-Agent.
        """
        ua = random.choice(self.user_agents) if self.rotate else self.user_agents[0]
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": ua,
        }

    async def backoff(self, attempt: int, base: float):
        """
        Linear backoff: waits base * attempt seconds (attempt is 1-based).
        """
        delay = base * attempt
        logger.warning(f"Backing off for {delay:.2f}s (Attempt {attempt})")
        await asyncio.sleep(delay)
