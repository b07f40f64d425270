"""
Pytest fixtures and configuration for all tests.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from arena.core.config import Settings
from arena.models.wallet import AssetPosition, PortfolioSnapshot
from arena.repositories.wallet_repository import WalletRepository
from arena.services.broadcaster import ConnectionManager
from arena.services.leaderboard_service import LeaderboardService


FIXED_NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)

ADDRESS_A = "0x" + "a" * 40
ADDRESS_B = "0x" + "b" * 40
ADDRESS_C = "0x" + "c" * 40
MAKERDAO = "0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2"
VITALIK_MIXED_CASE = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


class FakeSnapshotSource:
    """
    Snapshot source driven by a dict of address -> snapshot.

    Addresses listed in `failing` raise, addresses in `hanging` never
    return (until the per-wallet timeout kicks in).
    """

    def __init__(self, snapshots=None, default=None):
        self.snapshots = dict(snapshots or {})
        self.default = default
        self.failing: set[str] = set()
        self.hanging: set[str] = set()
        self.calls: list[str] = []

    async def get_snapshot(self, address: str, fallback: bool = True) -> PortfolioSnapshot:
        self.calls.append(address)
        if address in self.hanging:
            await asyncio.sleep(3600)
        if address in self.failing:
            raise RuntimeError(f"upstream exploded for {address}")
        snapshot = self.snapshots.get(address, self.default)
        if snapshot is None:
            raise RuntimeError(f"no snapshot configured for {address}")
        return snapshot.model_copy(deep=True)


class FakeZerionClient:
    """
    Stand-in for ZerionClient.

    `documents` maps call name -> payload; an exception instance is raised
    instead of returned, and "hang" sleeps past any timeout. Every call for
    an address in `hanging` sleeps too.
    """

    def __init__(self, documents, available=True):
        self.documents = documents
        self.available = available
        self.is_api_key_valid = available
        self.hanging: set[str] = set()
        self.calls: list[str] = []

    async def is_available(self):
        return self.available

    async def _answer(self, name, address):
        self.calls.append(name)
        value = self.documents.get(name)
        if value == "hang" or address in self.hanging:
            await asyncio.sleep(3600)
        if isinstance(value, BaseException):
            raise value
        return value

    async def get_portfolio(self, address):
        return await self._answer("portfolio", address)

    async def get_pnl(self, address):
        return await self._answer("pnl", address)

    async def get_positions(self, address):
        return await self._answer("positions", address)

    async def get_transactions(self, address):
        return await self._answer("transactions", address)

    async def close(self):
        pass


class RecordingBroadcaster(ConnectionManager):
    """ConnectionManager that records messages instead of sending them."""

    def __init__(self):
        super().__init__()
        self.messages: list[tuple[str, object]] = []
        self.room_messages: list[tuple[str, str, object]] = []

    async def broadcast(self, event, data):
        self.messages.append((event, data))

    async def send_to_room(self, room, event, data):
        self.room_messages.append((room, event, data))

    def events(self) -> list[str]:
        return [event for event, _ in self.messages]


def make_snapshot(total_value=1_000.0, pnl_percentage=10.0, authoritative=True, **overrides) -> PortfolioSnapshot:
    """Small valid snapshot for aggregator tests."""
    fields = dict(
        total_value=total_value,
        total_pnl=total_value * pnl_percentage / 100,
        pnl_percentage=pnl_percentage,
        assets=[AssetPosition(symbol="ETH", name="Ethereum", quantity=1, unit_price=total_value,
                              value=total_value, percentage=100.0)],
        risk_score=min(100.0, abs(pnl_percentage) * 2),
        sharpe_ratio=0.5,
        max_drawdown=min(50.0, abs(pnl_percentage) * 0.5),
        win_rate=0.7,
        avg_trade_size=total_value * 0.05,
        transaction_count=5,
        is_authoritative=authoritative,
    )
    fields.update(overrides)
    return PortfolioSnapshot(**fields)


@pytest.fixture
def settings() -> Settings:
    """Settings without Zerion key and with short timeouts."""
    return Settings(
        _env_file=None,
        zerion_api_key=None,
        refresh_concurrency=3,
        wallet_refresh_timeout_seconds=0.2,
        zerion_timeout_seconds=0.2,
        seed_known_wallets=False,
    )


@pytest.fixture
def clock():
    """Mutable clock: tests can move `clock.now` forward."""
    class Clock:
        now = FIXED_NOW

        def __call__(self):
            return self.now

        def advance(self, **kwargs):
            self.now = self.now + timedelta(**kwargs)

    return Clock()


@pytest.fixture
def snapshot_source() -> FakeSnapshotSource:
    return FakeSnapshotSource(default=make_snapshot())


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
def wallet_repo() -> WalletRepository:
    return WalletRepository()


@pytest.fixture
def leaderboard(wallet_repo, snapshot_source, broadcaster, settings, clock) -> LeaderboardService:
    return LeaderboardService(
        wallet_repo,
        snapshot_source,
        broadcaster=broadcaster,
        settings=settings,
        clock=clock,
    )


@pytest.fixture
def zerion_payloads():
    """Zerion documents for a 1M portfolio holding 10 ETH and 500k USDC."""
    return {
        "portfolio": {"data": {"attributes": {"total_value_usd": 1_000_000}}},
        "pnl": {"data": {"attributes": {"total_pnl_usd": 50_000}}},
        "positions": {
            "data": [
                {
                    "attributes": {
                        "quantity": {"float": 10},
                        "price": {"value": 2000},
                        "fungible_info": {"symbol": "ETH", "name": "Ethereum"},
                    }
                },
                {
                    "attributes": {
                        "quantity": {"float": 500_000},
                        "price": 1,
                        "fungible_info": {"symbol": "USDC", "name": "USD Coin"},
                    }
                },
            ]
        },
        "transactions": {
            "data": [
                {"attributes": {"timestamp": "2026-03-14T10:00:00Z"}},
                {"attributes": {"timestamp": "2026-03-13T10:00:00Z"}},
            ]
        },
    }
