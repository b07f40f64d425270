"""
Controlador de leaderboard - Clasificación y estadísticas agregadas

Los datos se refrescan en segundo plano cada `refresh_interval_seconds`;
estos endpoints solo leen el estado actual.
"""

from fastapi import APIRouter, Query
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from arena.core.dependencies import Arena, Leaderboard
from arena.models.analytics import AnalyticsSummary
from arena.models.wallet import WalletSummary


router = APIRouter(tags=["leaderboard"])


class PaginationResponse(BaseModel):
    """Datos de paginación (page empieza en 1)."""
    page: int
    limit: int
    total: int
    pages: int


class LeaderboardResponse(BaseModel):
    """Página del leaderboard y origen de los datos."""
    wallets: list[WalletSummary]
    pagination: PaginationResponse
    data_source: str  # zerion-api | synthetic
    authoritative_count: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    arena: Arena,
    leaderboard: Leaderboard,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    sort: str = Query("score", description="score, value, pnl or joined")
):
    """
    Obtener el leaderboard paginado.

    Orden descendente y estable: a igual valor se mantiene el orden de alta.
    """
    result = leaderboard.rank(sort, page=page, page_size=limit)
    all_wallets = leaderboard.rank(sort, page=1, page_size=max(1, result.total)).wallets

    return LeaderboardResponse(
        wallets=[
            WalletSummary.from_wallet(w, rank=result.offset + idx + 1)
            for idx, w in enumerate(result.wallets)
        ],
        pagination=PaginationResponse(
            page=result.page,
            limit=result.page_size,
            total=result.total,
            pages=result.pages,
        ),
        data_source=arena.portfolio.data_source,
        authoritative_count=sum(1 for w in all_wallets if w.snapshot.is_authoritative),
    )


@router.get("/analytics", response_model=AnalyticsSummary)
async def get_analytics(leaderboard: Leaderboard):
    """
    Obtener estadísticas agregadas de todas las wallets.
    """
    return leaderboard.analytics()
