from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class AssetPosition(BaseModel):
    """Posición de un token dentro del portfolio"""

    symbol: str
    name: str
    quantity: float = Field(0.0, ge=0)
    unit_price: float = Field(0.0, ge=0)
    value: float = 0.0  # quantity * unit_price
    percentage: float = 0.0  # % sobre total_value

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class PortfolioSnapshot(BaseModel):
    """Valoración de una wallet en un momento dado, con métricas derivadas"""

    total_value: float = 0.0
    total_pnl: float = 0.0
    pnl_percentage: float = 0.0

    assets: list[AssetPosition] = []  # Máximo 10, ordenadas por valor

    risk_score: float = 0.0  # 0..100
    sharpe_ratio: float = 0.0  # 0..2
    max_drawdown: float = 0.0  # 0..50
    win_rate: float = 0.0  # 0..1
    avg_trade_size: float = 0.0

    transaction_count: int = 0
    positions_count: int = 0
    last_trade_at: Optional[datetime] = None

    # True si viene de Zerion, False si viene del generador sintético
    is_authoritative: bool = False
    # True si el PnL es una estimación (aunque el valor sea real)
    pnl_estimated: bool = False

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Comment(BaseModel):
    """Comentario de la comunidad sobre una wallet"""

    id: str
    author_address: str = "anonymous"
    author_name: str = "Anonymous"
    text: str
    created_at: datetime
    like_count: int = 0

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class WalletUpdate(BaseModel):
    """Cambio de una wallet tras un ciclo de refresco"""

    address: str
    score: int
    score_delta: int
    total_value: float
    total_pnl: float
    is_authoritative: bool
    timestamp: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Wallet(BaseModel):
    """Wallet participante en el leaderboard"""

    address: str  # Siempre en minúsculas
    name: str
    description: str = ""

    joined_at: datetime
    last_updated: datetime

    snapshot: PortfolioSnapshot

    score: int = 0
    score_delta: int = 0

    followers: set[str] = set()
    comment_count: int = 0

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class WalletSummary(BaseModel):
    """Vista pública de una wallet (sin la lista de seguidores)"""

    rank: Optional[int] = None
    address: str
    name: str
    description: str = ""
    score: int
    score_delta: int
    joined_at: datetime
    last_updated: datetime
    followers_count: int
    comment_count: int
    is_authoritative: bool
    portfolio: PortfolioSnapshot

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @classmethod
    def from_wallet(cls, wallet: Wallet, rank: Optional[int] = None) -> "WalletSummary":
        return cls(
            rank=rank,
            address=wallet.address,
            name=wallet.name,
            description=wallet.description,
            score=wallet.score,
            score_delta=wallet.score_delta,
            joined_at=wallet.joined_at,
            last_updated=wallet.last_updated,
            followers_count=len(wallet.followers),
            comment_count=wallet.comment_count,
            is_authoritative=wallet.snapshot.is_authoritative,
            portfolio=wallet.snapshot,
        )
