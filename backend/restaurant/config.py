from decimal import Decimal
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # checkout
    CHECKOUT_LOCK_TIMEOUT_SECONDS: int = 10

    # pricing rules
    TAX_RATE: Decimal = Decimal("0.14")
    HAPPY_HOUR_START: int = 15
    HAPPY_HOUR_END: int = 17
    HAPPY_HOUR_DISCOUNT_RATE: Decimal = Decimal("0.20")
    BULK_DISCOUNT_THRESHOLD: Decimal = Decimal("100")
    BULK_DISCOUNT_RATE: Decimal = Decimal("0.10")

    # estimated ready/delivery time, in minutes
    DEFAULT_PREPARATION_MINUTES: int = 30
    DELIVERY_EXTRA_MINUTES: int = 30

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
