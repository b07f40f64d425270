"""
Portfolio Battle Arena API

Arrancar con: uvicorn arena.main:app --port 5000
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from arena.core.config import get_settings
from arena.core.cors import ArenaCORSMiddleware, OriginPolicy
from arena.core.dependencies import ArenaServices, build_arena
from arena.core.errors import register_exception_handlers

from arena.controllers.health_controller import router as health_router
from arena.controllers.leaderboard_controller import router as leaderboard_router
from arena.controllers.wallets_controller import router as wallets_router
from arena.controllers.tournaments_controller import router as tournaments_router
from arena.controllers.websocket_controller import router as websocket_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def bootstrap(arena: ArenaServices):
    """Carga las wallets conocidas y arranca el refresco periódico"""
    if await arena.portfolio.is_available():
        logger.info("🔌 Zerion API active, using live portfolio data")
    else:
        logger.info("🔌 Zerion API inactive, leaderboard will show [synthetic] data")

    if arena.settings.seed_known_wallets:
        await arena.leaderboard.seed_known_wallets()

    arena.scheduler.start()


@asynccontextmanager
async def lifespan(app: FastAPI):
    arena = build_arena(settings)
    app.state.arena = arena
    # El seed consulta Zerion por cada wallet: no bloquea el arranque
    bootstrap_task = asyncio.create_task(bootstrap(arena), name="arena-bootstrap")
    logger.info("🚀 Portfolio Battle Arena API ready")

    yield

    bootstrap_task.cancel()
    try:
        await bootstrap_task
    except asyncio.CancelledError:
        pass
    await arena.close()
    logger.info("👋 Portfolio Battle Arena API stopped")


app = FastAPI(
    title="Portfolio Battle Arena API",
    description="Leaderboard de wallets cripto por valor y rendimiento del portfolio",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(ArenaCORSMiddleware, policy=OriginPolicy.from_settings(settings))
register_exception_handlers(app)

# REST bajo /api, el canal en tiempo real en /ws
app.include_router(health_router, prefix="/api")
app.include_router(leaderboard_router, prefix="/api")
app.include_router(wallets_router, prefix="/api")
app.include_router(tournaments_router, prefix="/api")
app.include_router(websocket_router)


@app.get("/")
async def root(request: Request):
    # Índice de endpoints y estado rápido del servicio
    arena: ArenaServices = request.app.state.arena
    return {
        "name": "Portfolio Battle Arena API",
        "version": app.version,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "health": "GET /api/health",
            "analytics": "GET /api/analytics",
            "leaderboard": "GET /api/leaderboard",
            "addWallet": "POST /api/wallets",
            "getWallet": "GET /api/wallets/{address}",
            "follow": "POST /api/wallets/{address}/follow",
            "comments": "GET|POST /api/wallets/{address}/comments",
            "tournaments": "GET|POST /api/tournaments",
            "joinTournament": "POST /api/tournaments/{id}/join",
            "realtime": "WS /ws",
        },
        "stats": {
            "wallets": arena.leaderboard.repository.count(),
            "tournaments": arena.tournaments.count(),
            "dataSource": arena.portfolio.data_source,
        },
    }
