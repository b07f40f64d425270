from .wallet import AssetPosition, PortfolioSnapshot, Comment, Wallet, WalletUpdate, WalletSummary
from .tournament import Tournament
from .analytics import AnalyticsSummary

__all__ = [
    "AssetPosition",
    "PortfolioSnapshot",
    "Comment",
    "Wallet",
    "WalletUpdate",
    "WalletSummary",
    "Tournament",
    "AnalyticsSummary",
]
