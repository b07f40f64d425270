"""
Portfolio normalizer - turns raw Zerion payloads into a PortfolioSnapshot.

The four upstream calls (portfolio, pnl, positions, transactions) are made
independently and any of them may be missing. The normalizer degrades
gracefully and only gives up (NoDataAvailableError) when neither the
portfolio totals nor any position is available.

This function is pure: the same bundle always produces the same snapshot.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from arena.models.wallet import AssetPosition, PortfolioSnapshot


MAX_ASSETS = 10

VOLATILE_SYMBOLS = frozenset({"ETH", "BTC"})
STABLE_SYMBOLS = frozenset({"USDC", "USDT", "DAI"})

# PnL estimation policy (used only when Zerion reports no PnL)
HIGH_EXPOSURE_RATE = 0.15
LOW_EXPOSURE_RATE = 0.05
STABILITY_BONUS_RATE = 0.02
VOLATILE_EXPOSURE_THRESHOLD = 0.5
STABLE_EXPOSURE_THRESHOLD = 0.3


class NoDataAvailableError(Exception):
    """Raised when the bundle holds neither portfolio totals nor positions."""
    pass


class RawPortfolioBundle(BaseModel):
    """Raw Zerion documents; None means that call failed."""

    portfolio: Optional[dict[str, Any]] = None
    pnl: Optional[dict[str, Any]] = None
    positions: Optional[dict[str, Any]] = None
    transactions: Optional[dict[str, Any]] = None


def _attributes(document: Optional[dict]) -> dict:
    if not document:
        return {}
    data = document.get("data")
    if not isinstance(data, dict):
        return {}
    return data.get("attributes") or {}


def _items(document: Optional[dict]) -> list[dict]:
    if not document:
        return []
    data = document.get("data")
    return data if isinstance(data, list) else []


def _as_float(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _parse_position(item: dict) -> AssetPosition:
    attrs = item.get("attributes") or {}

    quantity = attrs.get("quantity")
    if isinstance(quantity, dict):
        quantity = quantity.get("float")
    quantity = max(0.0, _as_float(quantity))

    # price puede venir como {"value": x} o como número suelto
    price = attrs.get("price")
    if isinstance(price, dict):
        price = price.get("value")
    price = max(0.0, _as_float(price))

    fungible = attrs.get("fungible_info") or {}
    symbol = fungible.get("symbol") or "Unknown"
    name = fungible.get("name") or symbol

    return AssetPosition(
        symbol=symbol,
        name=name,
        quantity=quantity,
        unit_price=price,
        value=quantity * price,
    )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def estimate_pnl_rate(positions: list[AssetPosition], total_value: float) -> float:
    """
    Heuristic performance rate from portfolio composition.

    Not a real PnL: 15% when more than half the value sits in ETH/BTC,
    5% otherwise, plus 2% when more than 30% sits in stablecoins.
    """
    if total_value <= 0:
        return 0.0

    volatile = sum(p.value for p in positions if p.symbol.upper() in VOLATILE_SYMBOLS)
    stable = sum(p.value for p in positions if p.symbol.upper() in STABLE_SYMBOLS)

    volatile_fraction = volatile / total_value
    stable_fraction = stable / total_value

    rate = HIGH_EXPOSURE_RATE if volatile_fraction > VOLATILE_EXPOSURE_THRESHOLD else LOW_EXPOSURE_RATE
    if stable_fraction > STABLE_EXPOSURE_THRESHOLD:
        rate += STABILITY_BONUS_RATE
    return rate


def risk_metrics(pnl_percentage: float) -> dict[str, float]:
    """Risk metrics derived from the PnL percentage alone."""
    risk_score = min(100.0, max(0.0, abs(pnl_percentage) * 2))
    sharpe_ratio = min(2.0, pnl_percentage / max(risk_score, 1.0)) if pnl_percentage > 0 else 0.0
    return {
        "risk_score": risk_score,
        "sharpe_ratio": sharpe_ratio,
        "max_drawdown": min(50.0, abs(pnl_percentage) * 0.5),
        "win_rate": 0.5 + (0.2 if pnl_percentage > 0 else -0.2),
    }


def normalize_portfolio(bundle: RawPortfolioBundle) -> PortfolioSnapshot:
    """
    Build an authoritative PortfolioSnapshot from a raw Zerion bundle.

    Raises NoDataAvailableError if the portfolio call failed and there are
    no positions either.
    """
    raw_positions = _items(bundle.positions)

    if bundle.portfolio is None and not raw_positions:
        raise NoDataAvailableError("No portfolio totals and no positions available")

    # Top 10 en el orden en que las devuelve Zerion
    positions = [_parse_position(item) for item in raw_positions[:MAX_ASSETS]]

    reported_total = _as_float(_attributes(bundle.portfolio).get("total_value_usd"))
    total_value = max(0.0, reported_total) or sum(p.value for p in positions)

    total_pnl = _as_float(_attributes(bundle.pnl).get("total_pnl_usd"))
    pnl_estimated = False
    if total_pnl == 0 and total_value > 0:
        total_pnl = total_value * estimate_pnl_rate(positions, total_value)
        pnl_estimated = True

    pnl_percentage = (total_pnl / total_value) * 100 if total_value > 0 else 0.0

    # Los porcentajes solo se calculan con el total ya definitivo
    for position in positions:
        position.percentage = (position.value / total_value) * 100 if total_value > 0 else 0.0

    assets = sorted((p for p in positions if p.value > 0), key=lambda p: p.value, reverse=True)

    transactions = _items(bundle.transactions)
    last_trade_at = None
    if transactions:
        attrs = transactions[0].get("attributes") or {}
        last_trade_at = _parse_timestamp(attrs.get("timestamp") or attrs.get("mined_at"))

    return PortfolioSnapshot(
        total_value=total_value,
        total_pnl=total_pnl,
        pnl_percentage=pnl_percentage,
        assets=assets,
        avg_trade_size=total_value * 0.05,
        transaction_count=len(transactions),
        positions_count=len(raw_positions),
        last_trade_at=last_trade_at,
        is_authoritative=True,
        pnl_estimated=pnl_estimated,
        **risk_metrics(pnl_percentage),
    )
