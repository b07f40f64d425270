"""
Controlador de salud - Endpoint de comprobación del servicio
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from arena.core.dependencies import Arena


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Respuesta del chequeo de estado."""
    status: str
    timestamp: datetime
    uptime: float
    wallets: int
    tournaments: int
    zerion_api: str  # active | inactive
    data_source: str  # zerion-api | synthetic
    refreshing: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True


@router.get("/health", response_model=HealthResponse)
async def health_check(arena: Arena):
    """
    Endpoint de verificación de estado.

    Indica si la API key de Zerion está activa y de dónde salen los datos.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        uptime=time.monotonic() - arena.started_at,
        wallets=arena.leaderboard.repository.count(),
        tournaments=arena.tournaments.count(),
        zerion_api="active" if arena.portfolio.is_live else "inactive",
        data_source=arena.portfolio.data_source,
        refreshing=arena.leaderboard.is_refreshing,
    )
