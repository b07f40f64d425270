"""
PortfolioService - one snapshot per address, whatever the upstream state.

Fetches the four Zerion documents in parallel (all-settled), normalizes
them, and falls back to the synthetic generator when Zerion is not
configured, the key is invalid, or there is nothing usable in the response.
Upstream failures stop here, except during a refresh (`fallback=False`),
where the caller keeps the previous snapshot instead.
"""

import asyncio
import logging
from typing import Optional

from arena.core.config import Settings, get_settings
from arena.models.wallet import PortfolioSnapshot
from arena.services.fallback_generator import generate_fallback_snapshot
from arena.services.portfolio_normalizer import (
    NoDataAvailableError,
    RawPortfolioBundle,
    normalize_portfolio,
)
from arena.services.zerion_client import UpstreamUnavailableError, ZerionClient

logger = logging.getLogger(__name__)

DATA_SOURCE_LIVE = "zerion-api"
DATA_SOURCE_SYNTHETIC = "synthetic"


class PortfolioService:
    def __init__(self, client: Optional[ZerionClient] = None, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or get_settings()

    @property
    def is_live(self) -> bool:
        """True if the last API key check succeeded."""
        return self.client is not None and self.client.is_api_key_valid

    @property
    def data_source(self) -> str:
        return DATA_SOURCE_LIVE if self.is_live else DATA_SOURCE_SYNTHETIC

    async def is_available(self) -> bool:
        if self.client is None:
            return False
        return await self.client.is_available()

    async def fetch_bundle(self, address: str) -> RawPortfolioBundle:
        """
        Run the four upstream calls concurrently.

        A failed or timed-out call becomes None in the bundle; it never
        cancels the others.
        """
        timeout = self.settings.zerion_timeout_seconds
        calls = {
            "portfolio": self.client.get_portfolio(address),
            "pnl": self.client.get_pnl(address),
            "positions": self.client.get_positions(address),
            "transactions": self.client.get_transactions(address),
        }

        results = await asyncio.gather(
            *(asyncio.wait_for(call, timeout=timeout) for call in calls.values()),
            return_exceptions=True,
        )

        documents = {}
        for name, result in zip(calls, results):
            if isinstance(result, (UpstreamUnavailableError, asyncio.TimeoutError)):
                logger.debug(f"Zerion {name} unavailable for {address}: {result!r}")
                documents[name] = None
            elif isinstance(result, BaseException):
                raise result
            else:
                documents[name] = result

        return RawPortfolioBundle(**documents)

    async def get_snapshot(self, address: str, fallback: bool = True) -> PortfolioSnapshot:
        """
        Authoritative snapshot when possible, synthetic otherwise.

        With `fallback=False` (refresh of a tracked wallet) a live key that
        yields no usable data raises UpstreamUnavailableError instead, so
        the caller can keep the previous snapshot.
        """
        if not await self.is_available():
            return generate_fallback_snapshot(address)

        bundle = await self.fetch_bundle(address)

        try:
            snapshot = normalize_portfolio(bundle)
        except NoDataAvailableError as e:
            if not fallback:
                raise UpstreamUnavailableError(f"No usable Zerion data for {address}") from e
            logger.warning(f"[synthetic] No usable Zerion data for {address}, falling back to synthetic data")
            return generate_fallback_snapshot(address)

        if snapshot.pnl_estimated:
            logger.info(
                f"Estimated PnL for {address}: {snapshot.total_pnl:,.2f} "
                f"({snapshot.pnl_percentage:.1f}%, Zerion reported none)"
            )
        return snapshot
