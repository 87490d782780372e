"""Application settings and environment variables."""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


class Settings:
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "3306"))
    DB_DATABASE: str = os.getenv("DB_NAME", "inventory_db")
    DB_USER: str = os.getenv("DB_USER", "user")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "password")
    DB_POOL_NAME: str = os.getenv("DB_POOL_NAME", "inventory_pool")
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))

    # "strict" rejects over-allocation, "lenient" lets article stock go negative
    STOCK_POLICY: str = os.getenv("STOCK_POLICY", "strict")

    # Payment timestamps are assigned in this zone
    TIMEZONE: str = os.getenv("TIMEZONE", "Europe/Moscow")

    LOT_CATALOG_API_BASE_URL: str = os.getenv("LOT_CATALOG_API_BASE_URL", "https://evrohand.com/api")
    LOT_CATALOG_API_KEY: Optional[str] = os.getenv("LOT_CATALOG_API_KEY")

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")  # INFO, DEBUG, WARNING, ERROR, CRITICAL
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE")  # plain-text copy of the console log


settings = Settings()
