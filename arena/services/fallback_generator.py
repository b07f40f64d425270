"""
Synthetic fallback generator.

Produces a plausible, deterministic PortfolioSnapshot when Zerion is
unreachable, rate-limited or not configured. The result is always flagged
`is_authoritative=False` and every log line is tagged [synthetic] so it is
never mistaken for live data.
"""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import NamedTuple, Optional

from arena.models.wallet import AssetPosition, PortfolioSnapshot
from arena.services.address_registry import (
    EXCHANGE_ADDRESSES,
    INDIVIDUAL_ADDRESSES,
    PROTOCOL_ADDRESSES,
)

logger = logging.getLogger(__name__)

MARKET_PERFORMANCE_RATE = 0.12  # 12% anual
SYNTHETIC_WIN_RATE = 0.65


class AddressCategory(str, Enum):
    EXCHANGE = "exchange"
    PROTOCOL = "protocol"
    INDIVIDUAL = "individual"
    DEFAULT = "default"


class Allocation(NamedTuple):
    eth: float
    btc: float
    stablecoins: float
    other: float


class RiskProfile(NamedTuple):
    risk_score: float
    sharpe_ratio: float
    max_drawdown: float


class CategoryProfile(NamedTuple):
    min_value: float
    max_value: float
    allocation: Allocation
    risk: RiskProfile


PROFILES: dict[AddressCategory, CategoryProfile] = {
    AddressCategory.EXCHANGE: CategoryProfile(
        40_000_000, 60_000_000,
        Allocation(eth=0.40, btc=0.30, stablecoins=0.25, other=0.05),
        RiskProfile(risk_score=25, sharpe_ratio=1.8, max_drawdown=5),
    ),
    AddressCategory.PROTOCOL: CategoryProfile(
        8_000_000, 12_000_000,
        Allocation(eth=0.50, btc=0.20, stablecoins=0.20, other=0.10),
        RiskProfile(risk_score=45, sharpe_ratio=1.2, max_drawdown=12),
    ),
    AddressCategory.INDIVIDUAL: CategoryProfile(
        400_000_000, 600_000_000,
        Allocation(eth=0.70, btc=0.10, stablecoins=0.10, other=0.10),
        RiskProfile(risk_score=60, sharpe_ratio=1.5, max_drawdown=15),
    ),
    AddressCategory.DEFAULT: CategoryProfile(
        800_000, 1_200_000,
        Allocation(eth=0.45, btc=0.25, stablecoins=0.20, other=0.10),
        RiskProfile(risk_score=55, sharpe_ratio=1.0, max_drawdown=18),
    ),
}


def classify_address(address: str) -> AddressCategory:
    address = address.lower()
    if address in EXCHANGE_ADDRESSES:
        return AddressCategory.EXCHANGE
    if address in PROTOCOL_ADDRESSES:
        return AddressCategory.PROTOCOL
    if address in INDIVIDUAL_ADDRESSES:
        return AddressCategory.INDIVIDUAL
    return AddressCategory.DEFAULT


def base_value_for(address: str, profile: CategoryProfile) -> float:
    """Deterministic point inside the profile's value range, from the last 8 hex digits."""
    try:
        position = int(address[-8:], 16) / 0xFFFFFFFF
    except ValueError:
        position = 0.5
    return round(profile.min_value + position * (profile.max_value - profile.min_value), 2)


def _asset(symbol: str, name: str, value: float, percentage: float) -> AssetPosition:
    return AssetPosition(
        symbol=symbol,
        name=name,
        quantity=0.0,
        unit_price=0.0,
        value=value,
        percentage=percentage,
    )


def generate_fallback_snapshot(address: str, now: Optional[datetime] = None) -> PortfolioSnapshot:
    """Synthetic snapshot for `address`; same address always gives the same figures."""
    now = now or datetime.now(timezone.utc)
    category = classify_address(address)
    profile = PROFILES[category]
    allocation = profile.allocation

    base_value = base_value_for(address.lower(), profile)

    pnl_percentage = MARKET_PERFORMANCE_RATE * (1 - profile.risk.risk_score / 100) * 100
    total_pnl = base_value * (pnl_percentage / 100)

    assets = [
        _asset("ETH", "Ethereum", base_value * allocation.eth, allocation.eth * 100),
        _asset("BTC", "Bitcoin", base_value * allocation.btc, allocation.btc * 100),
        _asset("USDC", "USD Coin", base_value * allocation.stablecoins * 0.6, allocation.stablecoins * 60),
        _asset("USDT", "Tether", base_value * allocation.stablecoins * 0.4, allocation.stablecoins * 40),
        _asset("Other", "Other", base_value * allocation.other, allocation.other * 100),
    ]
    assets.sort(key=lambda a: a.value, reverse=True)

    logger.info(
        f"[synthetic] Generated non-authoritative portfolio for {address} "
        f"({category.value}): value={base_value:,.0f} pnl={pnl_percentage:.2f}%"
    )

    return PortfolioSnapshot(
        total_value=base_value,
        total_pnl=total_pnl,
        pnl_percentage=pnl_percentage,
        assets=assets,
        risk_score=profile.risk.risk_score,
        sharpe_ratio=profile.risk.sharpe_ratio,
        max_drawdown=profile.risk.max_drawdown,
        win_rate=SYNTHETIC_WIN_RATE,
        avg_trade_size=base_value * 0.02,
        transaction_count=int(base_value // 10_000),
        positions_count=len(assets),
        last_trade_at=now - timedelta(days=1),
        is_authoritative=False,
        pnl_estimated=True,
    )
