import logging
from typing import Any

import httpx

from app.pricing.errors import StoreReadError, StoreWriteError
from app.store.base import KeyValueStore

logger = logging.getLogger(__name__)


class EdgeConfigStore(KeyValueStore):
    """
    Vercel Edge Config. Reads go through the Edge Config read endpoint;
    writes go through the Vercel management API since Edge Config has no
    write path of its own.
    """

    def __init__(
        self,
        *,
        config_id: str,
        read_token: str,
        api_token: str,
        read_url: str = "https://edge-config.vercel.com",
        api_url: str = "https://api.vercel.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config_id = config_id
        self.read_token = read_token
        self.api_token = api_token
        self.read_url = read_url.rstrip("/")
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def get(self, key: str) -> Any | None:
        if not self.config_id or not self.read_token:
            raise StoreReadError("Edge Config read credentials not configured")

        url = f"{self.read_url}/{self.config_id}/item/{key}"
        try:
            async with self._client() as client:
                r = await client.get(url, headers={"Authorization": f"Bearer {self.read_token}"})
                if r.status_code == 404:
                    return None
                r.raise_for_status()
                return r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise StoreReadError(f"Edge Config read failed: {e}") from e

    async def upsert(self, key: str, value: Any) -> None:
        if not self.config_id or not self.api_token:
            raise StoreWriteError("Edge Config not configured (EDGE_CONFIG_ID / VERCEL_TOKEN)")

        url = f"{self.api_url}/v1/edge-config/{self.config_id}/items"
        body = {"items": [{"operation": "upsert", "key": key, "value": value}]}
        try:
            async with self._client() as client:
                r = await client.patch(
                    url,
                    json=body,
                    headers={"Authorization": f"Bearer {self.api_token}"},
                )
        except httpx.HTTPError as e:
            raise StoreWriteError(f"Failed to update Edge Config: {e}") from e

        if r.is_error:
            raise StoreWriteError(f"Failed to update Edge Config: {r.status_code} {r.text}")
        logger.info("Edge Config key %r updated", key)
