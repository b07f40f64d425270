"""
TournamentRepository - Almacén en memoria de torneos
"""

from typing import Optional

from arena.models.tournament import Tournament


class TournamentRepository:
    def __init__(self):
        self._tournaments: dict[str, Tournament] = {}

    def create(self, tournament: Tournament) -> Tournament:
        if tournament.id in self._tournaments:
            raise ValueError(f"Tournament {tournament.id} already exists")

        self._tournaments[tournament.id] = tournament.model_copy(deep=True)
        return tournament.model_copy(deep=True)

    def get_by_id(self, tournament_id: str) -> Optional[Tournament]:
        tournament = self._tournaments.get(tournament_id)
        return tournament.model_copy(deep=True) if tournament else None

    def list_all(self, status: Optional[str] = None) -> list[Tournament]:
        """Todos los torneos en orden de creación, opcionalmente filtrados por estado"""
        tournaments = self._tournaments.values()
        if status:
            tournaments = [t for t in tournaments if t.status == status]
        return [t.model_copy(deep=True) for t in tournaments]

    def update(self, tournament_id: str, **fields) -> Optional[Tournament]:
        tournament = self._tournaments.get(tournament_id)
        if tournament is None:
            return None

        updated = tournament.model_copy(update=fields, deep=True)
        self._tournaments[tournament_id] = updated
        return updated.model_copy(deep=True)

    def count(self) -> int:
        return len(self._tournaments)
