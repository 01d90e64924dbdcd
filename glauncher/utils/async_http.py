"""Async HTTP client utilities."""

import aiohttp
from typing import Optional, Dict, Any


class AsyncHTTPClient:
    """Reusable async HTTP client."""

    def __init__(self, headers: Optional[Dict[str, str]] = None, timeout: float = 30.0):
        self.default_headers = headers or {}
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(headers=self.default_headers, timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.session:
            await self.session.close()

    async def get_json(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any:
        """GET request decoding a JSON body regardless of its content type."""
        if not self.session:
            self.session = aiohttp.ClientSession(headers=self.default_headers, timeout=self.timeout)
        async with self.session.get(url, headers=headers) as resp:
            resp.raise_for_status()
            return await resp.json(content_type=None)
