"""Market configuration: env-driven via pydantic-settings.

Reads from a .env file and MINTMARKET_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class MarketConfig(BaseSettings):
    """Market configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export MINTMARKET_LOG_LEVEL=DEBUG
        export MINTMARKET_DB_PATH=/data/market.db

    Or via .env file::

        MINTMARKET_ENVIRONMENT=production
        MINTMARKET_UNIT_DECIMALS=6
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MINTMARKET_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Storage
    db_path: Path = Path(".mintmarket/market.db")
    lock_timeout_seconds: float = 5.0

    # Value denomination: 1 display unit == 10**unit_decimals base units
    unit_decimals: int = 18
    unit_symbol: str = "ETH"

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level singleton, import as `from mintmarket.config import config`
config = MarketConfig()
