"""
Configuración de Portfolio Battle Arena

Se lee de variables de entorno o de un `.env` en el directorio de trabajo.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Zerion - proveedor de datos de portfolio
    # Sin API key la app funciona igual, pero solo con datos sintéticos
    zerion_api_key: str | None = None
    zerion_base_url: str = "https://api.zerion.io/v1"
    zerion_timeout_seconds: float = 5.0  # Timeout por cada llamada a Zerion
    api_key_check_interval_seconds: int = 5 * 60  # Cada cuánto se revalida la key
    positions_chain_filter: str = "ethereum"
    transactions_limit: int = 20

    # Ciclo de refresco del leaderboard
    refresh_interval_seconds: float = 30.0
    refresh_concurrency: int = 5  # Máximo de wallets consultadas a la vez
    wallet_refresh_timeout_seconds: float = 15.0  # Tope por wallet dentro de un ciclo

    # Carga las wallets conocidas (MakerDAO, Uniswap, Vitalik...) al arrancar
    seed_known_wallets: bool = True

    app_env: str = "development"  # development | production
    debug: bool = False
    log_level: str = "INFO"

    # Orígenes del frontend, separados por coma, más un regex opcional
    # (p.ej. r"https://.*\.vercel\.app" para las previews)
    cors_origins: str = "http://localhost:3000"
    cors_origin_regex: str | None = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Variables del .env que no son de esta app


@lru_cache()
def get_settings() -> Settings:
    """Settings compartidos por toda la app (se leen una sola vez)"""
    return Settings()
