"""
Servicio de Puntuación - Calcula el score de ranking de una wallet
"""

import math
from datetime import datetime, timezone
from typing import Optional

from arena.models.wallet import PortfolioSnapshot


SECONDS_PER_DAY = 24 * 60 * 60
MAX_ACTIVITY_BONUS = 20.0
AUTHORITATIVE_DATA_BONUS = 10.0


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def score_breakdown(
    snapshot: PortfolioSnapshot,
    joined_at: datetime,
    now: Optional[datetime] = None
) -> dict[str, float]:
    """
    Componentes del score, sin redondear.

    Sistema de puntos:
    - value: log10(total_value + 1) * 15
    - pnl: max(0, pnl%) * 3
    - risk_adjusted: (pnl% / max(risk, 1)) * 10
    - consistency: win_rate * 20
    - sharpe_bonus: max(0, sharpe - 1) * 10
    - activity: 0.5 por día desde el alta, máximo 20
    - authoritative_data: +10 si los datos vienen de Zerion
    """
    now = now or datetime.now(timezone.utc)
    days_since_join = max(0.0, (now - joined_at).total_seconds() / SECONDS_PER_DAY)

    pnl_percentage = _finite(snapshot.pnl_percentage)

    return {
        "value": _finite(math.log10(max(0.0, _finite(snapshot.total_value)) + 1) * 15),
        "pnl": max(0.0, pnl_percentage) * 3,
        "risk_adjusted": _finite(pnl_percentage / max(snapshot.risk_score, 1.0) * 10),
        "consistency": _finite(snapshot.win_rate * 20),
        "sharpe_bonus": _finite(max(0.0, snapshot.sharpe_ratio - 1) * 10),
        "activity": min(days_since_join * 0.5, MAX_ACTIVITY_BONUS),
        "authoritative_data": AUTHORITATIVE_DATA_BONUS if snapshot.is_authoritative else 0.0,
    }


def calculate_score(
    snapshot: PortfolioSnapshot,
    joined_at: datetime,
    now: Optional[datetime] = None
) -> int:
    """Score entero (suma de componentes, redondeando .5 hacia arriba)"""
    return math.floor(sum(score_breakdown(snapshot, joined_at, now).values()) + 0.5)
