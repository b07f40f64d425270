"""
LeaderboardService - owns the tracked wallets and keeps them up to date.

Single writer for wallet snapshots and scores: registration and the refresh
cycle both go through this service. HTTP handlers only ever get copies.

Refresh cycles never overlap. Inside a cycle every wallet is refreshed
concurrently (bounded by `refresh_concurrency`) with its own timeout, and a
failure on one wallet leaves its previous snapshot in place without
affecting the others.
"""

import asyncio
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol

from pydantic import BaseModel

from arena.core.config import Settings, get_settings
from arena.models.analytics import AnalyticsSummary
from arena.models.wallet import PortfolioSnapshot, Wallet, WalletSummary, WalletUpdate
from arena.repositories.wallet_repository import WalletRepository
from arena.services.address_registry import (
    KNOWN_WALLETS,
    InvalidAddressError,
    normalize_address,
    short_address,
)
from arena.services.broadcaster import ConnectionManager
from arena.services.scoring_service import calculate_score

logger = logging.getLogger(__name__)


class SnapshotSource(Protocol):
    async def get_snapshot(self, address: str, fallback: bool = True) -> PortfolioSnapshot: ...


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class DuplicateAddressError(LeaderboardServiceError):
    """Raised when registering an address that is already tracked."""
    pass


class WalletNotFoundError(LeaderboardServiceError):
    """Raised when an address is not tracked."""
    pass


SORT_KEYS: dict[str, Callable[[Wallet], object]] = {
    "score": lambda w: w.score,
    "value": lambda w: w.snapshot.total_value,
    "pnl": lambda w: w.snapshot.total_pnl,
    "joined": lambda w: w.joined_at,
}
SORT_ALIASES = {"joinDate": "joined", "join_date": "joined"}
DEFAULT_SORT = "score"


class LeaderboardPage(BaseModel):
    wallets: list[Wallet]
    total: int
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


class RefreshResult(BaseModel):
    updates: list[WalletUpdate]
    failed: list[str]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LeaderboardService:
    def __init__(
        self,
        repository: WalletRepository,
        portfolio_source: SnapshotSource,
        broadcaster: Optional[ConnectionManager] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.repository = repository
        self.portfolio_source = portfolio_source
        self.broadcaster = broadcaster
        self.settings = settings or get_settings()
        self.clock = clock

        self._refresh_lock = asyncio.Lock()
        self._semaphore = asyncio.Semaphore(max(1, self.settings.refresh_concurrency))
        self.last_refresh_at: Optional[datetime] = None

    @property
    def is_refreshing(self) -> bool:
        return self._refresh_lock.locked()

    # ============================================
    # 📌 REGISTER
    # ============================================

    async def register(
        self,
        address: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        joined_at: Optional[datetime] = None,
        publish: bool = True,
    ) -> Wallet:
        """
        Start tracking an address.

        Raises InvalidAddressError or DuplicateAddressError. The initial
        snapshot comes from the portfolio source (live or synthetic).
        """
        address = normalize_address(address)

        if self.repository.exists(address):
            raise DuplicateAddressError(f"Wallet {address} is already in the battle")

        snapshot = await self.portfolio_source.get_snapshot(address)

        # Otro registro pudo colarse mientras esperábamos el snapshot
        if self.repository.exists(address):
            raise DuplicateAddressError(f"Wallet {address} is already in the battle")

        now = self.clock()
        joined_at = joined_at or now

        wallet = self.repository.create(Wallet(
            address=address,
            name=name or f"Trader {short_address(address)}",
            description=description or "",
            joined_at=joined_at,
            last_updated=now,
            snapshot=snapshot,
            score=calculate_score(snapshot, joined_at, now),
            score_delta=0,
        ))

        source = "live" if snapshot.is_authoritative else "[synthetic]"
        logger.info(f"✅ Registered {wallet.name} ({address}) score={wallet.score} data={source}")

        if publish:
            await self.publish_leaderboard()
        return wallet

    async def seed_known_wallets(self) -> int:
        """
        Register the well-known wallets that are not tracked yet.

        They are marked as having joined a week ago. Returns how many were added.
        """
        joined_at = self.clock() - timedelta(days=7)
        added = 0

        for known in KNOWN_WALLETS:
            if self.repository.exists(known.address):
                continue
            try:
                await self.register(
                    known.address,
                    name=known.name,
                    description=known.description,
                    joined_at=joined_at,
                    publish=False,
                )
                added += 1
            except LeaderboardServiceError as e:
                logger.warning(f"⚠️ Could not add {known.name}: {e}")

        logger.info(f"📊 Seeded {added} known wallets, {self.repository.count()} tracked in total")
        return added

    # ============================================
    # 📌 READ
    # ============================================

    def get_wallet(self, address: str) -> Wallet:
        """Copy of a tracked wallet. Raises WalletNotFoundError."""
        try:
            address = normalize_address(address)
        except InvalidAddressError:
            raise WalletNotFoundError(f"Wallet {address} not found") from None

        wallet = self.repository.get(address)
        if wallet is None:
            raise WalletNotFoundError(f"Wallet {address} not found")
        return wallet

    def rank(self, sort_key: str = DEFAULT_SORT, page: int = 1, page_size: int = 50) -> LeaderboardPage:
        """
        Stable descending sort of the tracked wallets, paginated (1-based).

        Ties keep registration order. Unknown sort keys fall back to score.
        """
        sort_key = SORT_ALIASES.get(sort_key, sort_key)
        key = SORT_KEYS.get(sort_key, SORT_KEYS[DEFAULT_SORT])

        page = max(1, page)
        page_size = max(1, page_size)

        wallets = sorted(self.repository.list_all(), key=key, reverse=True)
        offset = (page - 1) * page_size

        return LeaderboardPage(
            wallets=wallets[offset:offset + page_size],
            total=len(wallets),
            page=page,
            page_size=page_size,
        )

    def analytics(self) -> AnalyticsSummary:
        wallets = self.repository.list_all()
        if not wallets:
            return AnalyticsSummary(last_updated=self.last_refresh_at)

        return AnalyticsSummary(
            total_wallets=len(wallets),
            total_value=sum(w.snapshot.total_value for w in wallets),
            total_pnl=sum(w.snapshot.total_pnl for w in wallets),
            average_score=sum(w.score for w in wallets) / len(wallets),
            authoritative_wallets=sum(1 for w in wallets if w.snapshot.is_authoritative),
            total_trades=sum(w.snapshot.transaction_count for w in wallets),
            last_updated=self.last_refresh_at,
        )

    # ============================================
    # 📌 REFRESH
    # ============================================

    async def _fetch_snapshot(self, address: str) -> PortfolioSnapshot:
        async with self._semaphore:
            return await asyncio.wait_for(
                self.portfolio_source.get_snapshot(address, fallback=False),
                timeout=self.settings.wallet_refresh_timeout_seconds,
            )

    async def refresh_all(self) -> Optional[RefreshResult]:
        """
        One refresh cycle over every tracked wallet.

        Returns None (and does nothing) if a cycle is already running.
        """
        if self._refresh_lock.locked():
            logger.info("⏭️ Refresh cycle already in progress, skipping")
            return None

        async with self._refresh_lock:
            addresses = self.repository.addresses()
            logger.info(f"🔄 Refreshing {len(addresses)} wallets...")

            results = await asyncio.gather(
                *(self._fetch_snapshot(address) for address in addresses),
                return_exceptions=True,
            )

            now = self.clock()
            updates: list[WalletUpdate] = []
            failed: list[str] = []

            for address, result in zip(addresses, results):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                if isinstance(result, BaseException):
                    logger.error(f"❌ Error refreshing wallet {address}, keeping previous snapshot: {result!r}")
                    failed.append(address)
                    continue

                wallet = self.repository.get(address)
                new_score = calculate_score(result, wallet.joined_at, now)
                score_delta = new_score - wallet.score

                self.repository.update(
                    address,
                    snapshot=result,
                    score=new_score,
                    score_delta=score_delta,
                    last_updated=now,
                )
                updates.append(WalletUpdate(
                    address=address,
                    score=new_score,
                    score_delta=score_delta,
                    total_value=result.total_value,
                    total_pnl=result.total_pnl,
                    is_authoritative=result.is_authoritative,
                    timestamp=now,
                ))

            self.last_refresh_at = now
            authoritative = sum(1 for u in updates if u.is_authoritative)
            logger.info(
                f"📊 Updated {len(updates)}/{len(addresses)} wallets "
                f"({authoritative} with live data, {len(failed)} failed)"
            )

        await self.publish_refresh(updates)
        return RefreshResult(updates=updates, failed=failed)

    # ============================================
    # 📌 PUBLISH
    # ============================================

    async def publish_leaderboard(self):
        if self.broadcaster is None:
            return
        ranked = self.rank(DEFAULT_SORT, page=1, page_size=max(1, self.repository.count()))
        await self.broadcaster.broadcast(
            "leaderboardUpdate",
            [
                WalletSummary.from_wallet(w, rank=i + 1).model_dump(mode="json", by_alias=True)
                for i, w in enumerate(ranked.wallets)
            ],
        )

    async def publish_refresh(self, updates: list[WalletUpdate]):
        if self.broadcaster is None:
            return

        await self.publish_leaderboard()
        await self.broadcaster.broadcast(
            "analyticsUpdate",
            self.analytics().model_dump(mode="json", by_alias=True),
        )

        if updates:
            payload = [u.model_dump(mode="json", by_alias=True) for u in updates]
            await self.broadcaster.broadcast("walletUpdates", payload)
            for update in payload:
                await self.broadcaster.send_to_room(update["address"], "walletUpdate", update)
