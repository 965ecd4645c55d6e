# Admin API client
# Read-only JSON lookups against the admin app, run in bounded parallel chunks

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


class AdminClient:
    """
    Thin httpx wrapper shared by the holiday lookups and the restaurant fallback.

    Without an admin_base_url the client is unconfigured and callers stay local.
    """
    def __init__(self, admin_config: Dict[str, Any], transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            admin_config: Config.get_holiday_config() output
            transport: optional httpx transport (tests)
        """
        self.base_url = admin_config.get('admin_base_url')
        self.timeout = float(admin_config.get('request_timeout_seconds', 8))
        self.chunk_size = max(1, int(admin_config.get('chunk_size', 6)))
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    async def get_json(self, path: str) -> Any:
        """
        GET {base_url}{path} and decode the JSON body.

        Raises:
            httpx.HTTPError: transport failure or non-2xx status
            ValueError: body is not JSON
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"Admin API GET {url}")
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.json()

    async def map_chunked(self, items: Sequence[T], worker: Callable[[T], Awaitable[R]]) -> List[R]:
        """
        Run worker over items, at most chunk_size at a time, results in input order.
        """
        results: List[R] = []
        for start in range(0, len(items), self.chunk_size):
            chunk = items[start:start + self.chunk_size]
            results.extend(await asyncio.gather(*(worker(item) for item in chunk)))
        return results
