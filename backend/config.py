# backend/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./liquor_shop.db"

    # Shared secret gating stock removal and transaction deletion.
    # Empty means every gated call is rejected.
    OWNER_PASSWORD: str = ""

    # Ledger thresholds
    LOW_STOCK_THRESHOLD: int = 5
    COMPLETE_REMOVAL_THRESHOLD: int = 99999
    TOP_SELLERS_LIMIT: int = 5
    SEARCH_LIMIT: int = 10
    TRANSACTIONS_PAGE_LIMIT: int = 50

    LOG_LEVEL: str = "INFO"
    FRONTEND_URL: Optional[str] = None

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

settings = Settings()
