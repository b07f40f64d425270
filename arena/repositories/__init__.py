from .wallet_repository import WalletRepository
from .tournament_repository import TournamentRepository

__all__ = [
    "WalletRepository",
    "TournamentRepository",
]
