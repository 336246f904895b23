"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str
    DATABASE_ECHO: bool = False

    # Application
    APP_ENV: str = "development"
    API_V1_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Frontend
    FRONTEND_URL: str = "http://localhost:5173"

    # Per-client caps shown as limits in the onboarding forms
    MAX_GOALS_PER_CLIENT: int = 5
    MAX_ALLIES_PER_CLIENT: int = 5

    # Fund utilization fallbacks when a plan is missing data
    DEFAULT_TOTAL_BUDGET: float = 50000.0
    DEFAULT_PLAN_MONTHS_BEFORE: int = 3
    DEFAULT_PLAN_MONTHS_AFTER: int = 9

    # CORS
    @property
    def ALLOWED_ORIGINS(self) -> List[str]:
        if self.APP_ENV == "development":
            return ["*"]  # Allow all origins in development
        return [self.FRONTEND_URL]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True
    )


settings = Settings()
