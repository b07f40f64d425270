"""
Dependencies de FastAPI para inyectar los servicios de la app

Todos los servicios viven en un único contenedor (`ArenaServices`) que se
crea al arrancar la app y se guarda en `app.state.arena`.
"""

import time
from dataclasses import dataclass, field
from typing import Annotated, Optional

from fastapi import Depends, Request

from arena.core.config import Settings, get_settings
from arena.repositories.tournament_repository import TournamentRepository
from arena.repositories.wallet_repository import WalletRepository
from arena.services.broadcaster import ConnectionManager
from arena.services.community_service import CommunityService
from arena.services.leaderboard_service import LeaderboardService, SnapshotSource
from arena.services.portfolio_service import PortfolioService
from arena.services.refresh_scheduler import RefreshScheduler
from arena.services.tournament_service import TournamentService
from arena.services.zerion_client import ZerionClient


@dataclass
class ArenaServices:
    settings: Settings
    portfolio: PortfolioService
    broadcaster: ConnectionManager
    leaderboard: LeaderboardService
    community: CommunityService
    tournaments: TournamentService
    scheduler: RefreshScheduler
    started_at: float = field(default_factory=time.monotonic)

    async def close(self):
        await self.scheduler.stop()
        if self.portfolio.client is not None:
            await self.portfolio.client.close()


def build_arena(
    settings: Optional[Settings] = None,
    zerion_client: Optional[ZerionClient] = None,
    portfolio_source: Optional[SnapshotSource] = None,
) -> ArenaServices:
    """
    Arma el grafo de servicios.

    Sin `zerion_client` se crea uno con la configuración (si hay API key).
    `portfolio_source` permite sustituir la fuente de snapshots en tests.
    """
    settings = settings or get_settings()

    if zerion_client is None and settings.zerion_api_key:
        zerion_client = ZerionClient(settings)

    portfolio = PortfolioService(zerion_client, settings)
    broadcaster = ConnectionManager()
    wallet_repo = WalletRepository()

    leaderboard = LeaderboardService(
        wallet_repo,
        portfolio_source or portfolio,
        broadcaster=broadcaster,
        settings=settings,
    )

    return ArenaServices(
        settings=settings,
        portfolio=portfolio,
        broadcaster=broadcaster,
        leaderboard=leaderboard,
        community=CommunityService(wallet_repo),
        tournaments=TournamentService(TournamentRepository()),
        scheduler=RefreshScheduler(leaderboard, settings.refresh_interval_seconds),
    )


def get_arena(request: Request) -> ArenaServices:
    return request.app.state.arena


def get_leaderboard_service(arena: Annotated[ArenaServices, Depends(get_arena)]) -> LeaderboardService:
    return arena.leaderboard


def get_community_service(arena: Annotated[ArenaServices, Depends(get_arena)]) -> CommunityService:
    return arena.community


def get_tournament_service(arena: Annotated[ArenaServices, Depends(get_arena)]) -> TournamentService:
    return arena.tournaments


# Alias de tipos para que se vea mas limpio en los endpoints
Arena = Annotated[ArenaServices, Depends(get_arena)]
Leaderboard = Annotated[LeaderboardService, Depends(get_leaderboard_service)]
Community = Annotated[CommunityService, Depends(get_community_service)]
Tournaments = Annotated[TournamentService, Depends(get_tournament_service)]
