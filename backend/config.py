"""
Configuration management for Biryani House Ops
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Biryani House Ops"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./biryani_house.db"

    # Authorized-user gate
    AUTH_ENABLED: bool = True
    AUTH_HEADER: str = "X-User-Email"
    SEED_ADMIN_EMAIL: str = ""  # created on startup when set

    # Reports
    ORDER_FETCH_LIMIT: int = 1000  # cap on orders pulled per aggregation
    TREND_DEFAULT_DAYS: int = 7
    TREND_MAX_DAYS: int = 90

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Business settings defaults (used when no settings row exists yet)
    DEFAULT_PRICE_PER_PLATE: float = 150.0
    DEFAULT_TAX_RATE: float = 0.0
    DEFAULT_DELIVERY_CHARGE: float = 0.0
    DEFAULT_BUSINESS_NAME: str = "Biryani House"
    DEFAULT_BUSINESS_PHONE: str = ""
    DEFAULT_BUSINESS_ADDRESS: str = ""
    DEFAULT_CURRENCY: str = "₹"
    DEFAULT_OPEN_TIME: str = "10:00"
    DEFAULT_CLOSE_TIME: str = "22:00"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
