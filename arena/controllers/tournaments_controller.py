"""
Controlador de torneos - Crear, listar y unirse a torneos
"""

import math
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query, status
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from arena.controllers.leaderboard_controller import PaginationResponse
from arena.core.dependencies import Tournaments
from arena.core.errors import api_error
from arena.models.tournament import Tournament
from arena.services.address_registry import InvalidAddressError
from arena.services.tournament_service import (
    AlreadyJoinedError,
    MissingFieldsError,
    TournamentFullError,
    TournamentInactiveError,
    TournamentNotFoundError,
)


router = APIRouter(prefix="/tournaments", tags=["tournaments"])


class TournamentCreateRequest(BaseModel):
    """Body para crear un torneo. `duration` en horas."""
    name: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    prize: Optional[str] = None
    rules: Optional[list[str]] = None
    max_participants: Optional[int] = None
    start_date: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class JoinRequest(BaseModel):
    wallet_address: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class JoinResponse(BaseModel):
    success: bool
    participants: int
    max_participants: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class TournamentsResponse(BaseModel):
    tournaments: list[Tournament]
    pagination: PaginationResponse


@router.post("", response_model=Tournament, status_code=status.HTTP_201_CREATED)
async def create_tournament(request: TournamentCreateRequest, tournaments: Tournaments):
    """
    Crear un torneo.

    Si no se indica `startDate` empieza en el momento de crearlo.
    """
    try:
        return tournaments.create(
            name=request.name,
            description=request.description,
            duration_hours=request.duration,
            prize_pool=request.prize,
            rules=request.rules,
            max_participants=request.max_participants,
            start_date=request.start_date,
        )
    except MissingFieldsError as e:
        raise api_error(status.HTTP_400_BAD_REQUEST, "MISSING_FIELDS", str(e))


@router.get("", response_model=TournamentsResponse)
async def list_tournaments(
    tournaments: Tournaments,
    status_filter: Optional[str] = Query(None, alias="status", description="upcoming, active or completed"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100)
):
    """
    Obtener la lista de torneos, opcionalmente filtrada por estado.
    """
    items, total = tournaments.list_tournaments(status_filter, page=page, limit=limit)

    return TournamentsResponse(
        tournaments=items,
        pagination=PaginationResponse(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        ),
    )


@router.get("/{tournament_id}", response_model=Tournament)
async def get_tournament(tournament_id: str, tournaments: Tournaments):
    try:
        return tournaments.get(tournament_id)
    except TournamentNotFoundError:
        raise api_error(status.HTTP_404_NOT_FOUND, "TOURNAMENT_NOT_FOUND", "Tournament not found")


@router.post("/{tournament_id}/join", response_model=JoinResponse)
async def join_tournament(tournament_id: str, request: JoinRequest, tournaments: Tournaments):
    """
    Inscribir una wallet en un torneo activo.
    """
    if not request.wallet_address:
        raise api_error(status.HTTP_400_BAD_REQUEST, "MISSING_ADDRESS", "Wallet address is required")

    try:
        tournament = tournaments.join(tournament_id, request.wallet_address)
    except InvalidAddressError:
        raise api_error(status.HTTP_400_BAD_REQUEST, "INVALID_ADDRESS", "Invalid Ethereum address format")
    except TournamentNotFoundError:
        raise api_error(status.HTTP_404_NOT_FOUND, "TOURNAMENT_NOT_FOUND", "Tournament not found")
    except TournamentInactiveError as e:
        raise api_error(status.HTTP_400_BAD_REQUEST, "TOURNAMENT_INACTIVE", str(e))
    except AlreadyJoinedError as e:
        raise api_error(status.HTTP_400_BAD_REQUEST, "ALREADY_JOINED", str(e))
    except TournamentFullError as e:
        raise api_error(status.HTTP_400_BAD_REQUEST, "TOURNAMENT_FULL", str(e))

    return JoinResponse(
        success=True,
        participants=len(tournament.participants),
        max_participants=tournament.max_participants,
    )
