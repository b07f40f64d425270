from datetime import datetime
from typing import Optional
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class AnalyticsSummary(BaseModel):
    """Estadísticas agregadas de todas las wallets (resultado calculado)"""

    total_wallets: int = 0
    total_value: float = 0.0
    total_pnl: float = 0.0
    average_score: float = 0.0
    authoritative_wallets: int = 0
    total_trades: int = 0
    last_updated: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
