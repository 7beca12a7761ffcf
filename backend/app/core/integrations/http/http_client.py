"""
Async HTTP client wrapper using aiohttp.
Pushes JSON payloads to outbound automation webhooks.
"""

import asyncio
from typing import Optional, Dict, Any
import aiohttp
import logging

logger = logging.getLogger(__name__)


class HttpClient:
    """
    Async HTTP client wrapper using aiohttp.
    Holds one ClientSession for the life of the application.
    """

    def __init__(self, timeout: float = 30):
        """
        Initialize HTTP client.

        Args:
            timeout: Total request timeout in seconds
        """
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> int:
        """
        POST a JSON body once, without retrying.

        Returns:
            HTTP status code of the response

        Raises:
            ValueError: If the URL is not an http(s) URL
            aiohttp.ClientError, asyncio.TimeoutError: On transport failure
        """
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid url: {url}")

        logger.debug(f"Sending to url: {url}, JSON: {payload}")
        session = await self._get_session()
        try:
            async with session.post(url, json=payload, headers=headers) as response:
                if 200 <= response.status < 300:
                    logger.info(f"Successfully sent to {url}")
                else:
                    body = await response.text()
                    logger.error(
                        f"Failed, bad response received from {url}: {response.status}, {body}"
                    )
                return response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to send data to URL: {url}: {e}")
            raise
