import base64
import logging

import httpx

from app.core.settings import settings
from app.pricing.errors import UpstreamError

logger = logging.getLogger(__name__)


class FuelCheckClient:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.url = settings.NSW_API_URL
        self._transport = transport

    def _headers(self) -> dict:
        if not settings.NSW_API_KEY or not settings.NSW_API_SECRET:
            raise UpstreamError("NSW API credentials not configured")
        # Basic auth from key:secret, plus the raw key in the apikey header
        raw = f"{settings.NSW_API_KEY}:{settings.NSW_API_SECRET}".encode()
        return {
            "Authorization": f"Basic {base64.b64encode(raw).decode()}",
            "Content-Type": "application/json",
            "apikey": settings.NSW_API_KEY,
        }

    async def get_json(self, path: str = "", params: dict | None = None):
        url = f"{self.url}{path}"
        headers = self._headers()
        try:
            async with httpx.AsyncClient(
                timeout=settings.HTTP_TIMEOUT_SECONDS, transport=self._transport
            ) as client:
                r = await client.get(url, params=params, headers=headers)
                r.raise_for_status()
                return r.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(f"NSW API returned status: {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"NSW API request failed: {e}") from e

    async def get_prices(self):
        logger.info("Fetching prices from NSW FuelCheck")
        return await self.get_json()
