"""
TournamentService - Business logic for tournaments.

Status is derived from the dates and advanced whenever a tournament is
read or joined: upcoming -> active -> completed. There is no background
sweep.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from arena.models.tournament import Tournament
from arena.repositories.tournament_repository import TournamentRepository
from arena.services.address_registry import normalize_address


STATUS_UPCOMING = "upcoming"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
STATUSES = (STATUS_UPCOMING, STATUS_ACTIVE, STATUS_COMPLETED)


class TournamentServiceError(Exception):
    """Base exception for tournament service errors."""
    pass


class MissingFieldsError(TournamentServiceError):
    """Raised when required tournament fields are missing."""
    pass


class TournamentNotFoundError(TournamentServiceError):
    """Raised when tournament is not found."""
    pass


class TournamentInactiveError(TournamentServiceError):
    """Raised when joining a tournament that is not active."""
    pass


class AlreadyJoinedError(TournamentServiceError):
    """Raised when a wallet joins the same tournament twice."""
    pass


class TournamentFullError(TournamentServiceError):
    """Raised when the tournament has no free slots."""
    pass


def status_at(tournament: Tournament, now: datetime) -> str:
    if now < tournament.start_date:
        return STATUS_UPCOMING
    if now >= tournament.end_date:
        return STATUS_COMPLETED
    return STATUS_ACTIVE


class TournamentService:
    def __init__(
        self,
        repository: TournamentRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.repository = repository
        self.clock = clock

    def _sync_status(self, tournament: Tournament) -> Tournament:
        """Advance the status if the dates say so."""
        status = status_at(tournament, self.clock())
        if status != tournament.status:
            return self.repository.update(tournament.id, status=status)
        return tournament

    def create(
        self,
        name: Optional[str],
        description: Optional[str],
        duration_hours: Optional[int],
        prize_pool: Optional[str],
        rules: Optional[list[str]] = None,
        max_participants: Optional[int] = None,
        start_date: Optional[datetime] = None,
    ) -> Tournament:
        """
        Create a tournament.

        Validates:
        - name, description, duration and prize are present
        - duration and max participants are positive

        Starts now unless a start date is given.
        """
        if not name or not description or not duration_hours or not prize_pool:
            raise MissingFieldsError("Missing required tournament fields")
        if duration_hours <= 0:
            raise MissingFieldsError("Duration must be a positive number of hours")
        if max_participants is not None and max_participants <= 0:
            raise MissingFieldsError("maxParticipants must be positive")

        now = self.clock()
        start = start_date or now
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)

        tournament = Tournament(
            id=uuid.uuid4().hex,
            name=name,
            description=description,
            prize_pool=str(prize_pool),
            rules=rules or [],
            max_participants=max_participants or 100,
            participants=[],
            status=STATUS_ACTIVE,
            start_date=start,
            end_date=start + timedelta(hours=duration_hours),
            created_at=now,
        )
        tournament.status = status_at(tournament, now)
        return self.repository.create(tournament)

    def get(self, tournament_id: str) -> Tournament:
        tournament = self.repository.get_by_id(tournament_id)
        if tournament is None:
            raise TournamentNotFoundError(f"Tournament {tournament_id} not found")
        return self._sync_status(tournament)

    def list_tournaments(self, status: Optional[str] = None, page: int = 1, limit: int = 10) -> tuple[list[Tournament], int]:
        """Tournaments in creation order, optionally filtered. Returns (page, total)."""
        tournaments = [self._sync_status(t) for t in self.repository.list_all()]
        if status:
            tournaments = [t for t in tournaments if t.status == status]

        page = max(1, page)
        offset = (page - 1) * limit
        return tournaments[offset:offset + limit], len(tournaments)

    def join(self, tournament_id: str, wallet_address: str) -> Tournament:
        """
        Add a wallet to the participants.

        Raises InvalidAddressError, TournamentNotFoundError,
        TournamentInactiveError, AlreadyJoinedError or TournamentFullError.
        """
        address = normalize_address(wallet_address)
        tournament = self.get(tournament_id)

        if tournament.status != STATUS_ACTIVE:
            raise TournamentInactiveError("Tournament is not active")
        if address in tournament.participants:
            raise AlreadyJoinedError("Already joined tournament")
        if len(tournament.participants) >= tournament.max_participants:
            raise TournamentFullError("Tournament is full")

        return self.repository.update(
            tournament_id,
            participants=[*tournament.participants, address],
        )

    def count(self) -> int:
        return self.repository.count()
