import asyncio
import json
import logging
from typing import Optional, Dict, Any

import aiohttp

from scanner.config import Config
from scanner.scraper.anti_block import AntiBlock

logger = logging.getLogger(__name__)

_anti_block = AntiBlock()


class ApiError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


def _error_message(status: int, text: str) -> str:
    """
    Builds the error detail from the JSON body if there is one, else the raw
    text, else the bare status code.
    """
    if text:
        try:
            body = json.loads(text)
        except ValueError:
            return text
        if isinstance(body, dict) and "message" in body:
            return str(body["message"])
        return json.dumps(body)
    return str(status)


async def _request_once(
    session: aiohttp.ClientSession,
    url: str,
    method: str,
    headers: Dict[str, str],
    body: Optional[Any],
    timeout: float,
) -> Optional[Any]:
    async with session.request(
        method,
        url,
        headers=headers,
        json=body,
        timeout=aiohttp.ClientTimeout(total=timeout),
    ) as response:
        text = await response.text()
        if response.status < 200 or response.status >= 300:
            detail = _error_message(response.status, text)
            raise ApiError(
                f"API request failed with status {response.status}: {detail}",
                status=response.status,
            )
        # Some endpoints answer 200 with an empty body
        if not text:
            return None
        return json.loads(text)


async def fetch_json(
    url: str,
    method: str = "GET",
    headers: Optional[Dict[str, str]] = None,
    body: Optional[Any] = None,
    max_retries: int = Config.MAX_RETRIES,
    backoff: float = Config.RETRY_BACKOFF,
    timeout: float = Config.REQUEST_TIMEOUT,
    session: Optional[aiohttp.ClientSession] = None,
) -> Optional[Any]:
    """
    Performs a JSON request, retrying up to max_retries times with a
    backoff * attempt pause between attempts. The last error is re-raised
    once the retries are exhausted.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    merged_headers = _anti_block.get_headers()
    if headers:
        merged_headers.update(headers)

    own_session = session is None
    if own_session:
        session = aiohttp.ClientSession()

    try:
        for attempt in range(1, max_retries + 1):
            try:
                return await _request_once(session, url, method, merged_headers, body, timeout)
            except (ApiError, aiohttp.ClientError, ValueError, asyncio.TimeoutError) as e:
                if attempt == max_retries:
                    raise
                logger.warning(f"Request to {url} failed ({e}). Retrying...")
                await _anti_block.backoff(attempt, backoff)
    finally:
        if own_session:
            await session.close()
