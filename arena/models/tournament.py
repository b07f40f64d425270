from datetime import datetime
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class Tournament(BaseModel):
    """Torneo entre wallets"""

    id: str
    name: str
    description: str

    prize_pool: str
    rules: list[str] = []
    max_participants: int = 100

    participants: list[str] = []  # Direcciones, en orden de inscripción

    status: str  # upcoming | active | completed

    start_date: datetime
    end_date: datetime
    created_at: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
