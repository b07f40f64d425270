"""
Zerion API client - portfolio data provider.

Thin async wrapper over the Zerion REST API. Every call either returns the
decoded JSON document or raises UpstreamUnavailableError; callers treat that
as "data unavailable", never as a fatal error.

Authentication is HTTP Basic with the API key as username and an empty
password.
"""

import base64
import logging
import time
from typing import Any, Optional

import httpx

from arena.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class ZerionClientError(Exception):
    """Base exception for Zerion client errors."""
    pass


class UpstreamUnavailableError(ZerionClientError):
    """Raised when Zerion cannot be reached or answers with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def build_auth_header(api_key: str) -> str:
    token = base64.b64encode(f"{api_key}:".encode()).decode()
    return f"Basic {token}"


class ZerionClient:
    """
    Client for the handful of Zerion endpoints the leaderboard needs.

    The key check (`is_available`) is cached for
    `api_key_check_interval_seconds` so the refresh cycle does not hit
    `/chains` on every pass.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        self._api_key_valid = False
        self._last_key_check: Optional[float] = None

    @property
    def has_api_key(self) -> bool:
        return bool(self.settings.zerion_api_key)

    @property
    def is_api_key_valid(self) -> bool:
        """Result of the last key check (no network call)."""
        return self._api_key_valid

    @property
    def client(self) -> httpx.AsyncClient:
        """httpx client, lazy-loaded and reused between calls"""
        if self._client is None:
            headers = {"Content-Type": "application/json", "Accept": "application/json"}
            if self.has_api_key:
                headers["Authorization"] = build_auth_header(self.settings.zerion_api_key)

            self._client = httpx.AsyncClient(
                base_url=self.settings.zerion_base_url,
                headers=headers,
                timeout=self.settings.zerion_timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self, path: str, params: Optional[dict] = None) -> dict[str, Any]:
        try:
            response = await self.client.get(path, params=params)
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(f"Zerion request {path} failed: {e!r}") from e

        if response.status_code != 200:
            raise UpstreamUnavailableError(
                f"Zerion request {path} returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(f"Zerion request {path} returned invalid JSON") from e

    async def is_available(self) -> bool:
        """
        Check whether the API key works, at most once per check interval.

        Without a key there is nothing to check and the answer is always False.
        """
        if not self.has_api_key:
            return False

        now = time.monotonic()
        if (
            self._last_key_check is not None
            and now - self._last_key_check < self.settings.api_key_check_interval_seconds
        ):
            return self._api_key_valid

        self._last_key_check = now
        was_valid = self._api_key_valid

        try:
            await self._get("/chains")
        except UpstreamUnavailableError as e:
            self._api_key_valid = False
            if e.status_code != 401:
                logger.warning(f"⚠️ Zerion API check failed: {e}")
            elif was_valid:
                logger.warning("⚠️ Zerion API key rejected (401), switching to synthetic data")
            return False

        self._api_key_valid = True
        if not was_valid:
            logger.info("✅ Zerion API key is active, using live data")
        return True

    async def get_portfolio(self, address: str) -> dict[str, Any]:
        return await self._get(f"/wallets/{address}/portfolio")

    async def get_pnl(self, address: str) -> dict[str, Any]:
        return await self._get(f"/wallets/{address}/pnl")

    async def get_positions(self, address: str, chain_filter: Optional[str] = None) -> dict[str, Any]:
        params = {}
        chain = chain_filter if chain_filter is not None else self.settings.positions_chain_filter
        if chain:
            params["filter[chain_ids]"] = chain
        return await self._get(f"/wallets/{address}/positions/", params=params)

    async def get_transactions(self, address: str, limit: Optional[int] = None) -> dict[str, Any]:
        params = {"page[size]": limit or self.settings.transactions_limit}
        return await self._get(f"/wallets/{address}/transactions/", params=params)
