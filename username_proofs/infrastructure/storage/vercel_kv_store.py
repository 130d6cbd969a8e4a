"""Vercel KV (Upstash REST) implementation of the key/value store interface."""

import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from ...domain.models.errors import UpstreamError
from ...domain.ports.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


class VercelKVConfig(BaseModel):
    """Configuration for the Vercel KV store."""

    rest_api_url: str
    rest_api_token: str
    timeout: float = 10.0


class VercelKVStore(KeyValueStore):
    """Key/value store backed by the Vercel KV REST API."""

    def __init__(self, config: VercelKVConfig, client: Optional[httpx.AsyncClient] = None):
        """Initialize the store.

        Args:
            config: REST endpoint and token
            client: Pre-built HTTP client, created lazily when omitted
        """
        self._config = config
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.rest_api_url,
                timeout=self._config.timeout,
                headers={"Authorization": f"Bearer {self._config.rest_api_token}"},
            )
        return self._client

    def _result(self, response: httpx.Response):
        try:
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"KV request failed: {e}") from e
        if "error" in body:
            raise UpstreamError(f"KV returned error: {body['error']}")
        return body.get("result")

    async def get(self, key: str) -> Optional[str]:
        try:
            response = await self._get_client().get(f"/get/{quote(key, safe='')}")
        except httpx.HTTPError as e:
            raise UpstreamError(f"KV GET failed for {key}: {e}") from e
        return self._result(response)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            response = await self._get_client().post(
                "/",
                json=["SET", key, value, "EX", ttl_seconds],
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"KV SET failed for {key}: {e}") from e
        result = self._result(response)
        if result != "OK":
            raise UpstreamError(f"KV SET for {key} returned {result!r}")

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def store_name(self) -> str:
        return "VercelKV"
