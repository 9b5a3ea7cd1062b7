"""
Configuration for the Tracker service.

Values are read from the environment, after loading a local ``.env`` file if present.
"""
import os
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _split_origins(raw: str) -> List[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


class Settings:
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./tracker.db")
    database_echo: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    cors_allowed_origins: List[str] = _split_origins(os.getenv("CORS_ALLOWED_ORIGINS", "*"))

    # Items at or below this quantity (but above zero) count as low stock
    low_stock_threshold: int = int(os.getenv("LOW_STOCK_THRESHOLD", "5"))


settings = Settings()
