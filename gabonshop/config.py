"""GabonShop configuration via pydantic-settings."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database backing the document gateway
    DATABASE_URL: str = "sqlite:///./gabonshop.db"

    # Security
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MINUTES: int = 60 * 24

    # Default admin account, seeded at startup
    DEFAULT_ADMIN_EMAIL: str = "admin@gabonshop.ga"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"
    DEFAULT_ADMIN_NAME: str = "Administrateur"

    # Timezone used for display labels
    TIMEZONE: str = "Africa/Libreville"

    # Image hosting widget (the front-end opens the picker with this key)
    UPLOADCARE_PUBLIC_KEY: str = ""

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
