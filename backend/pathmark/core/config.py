"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    PROJECT_NAME: str = "Pathmark Bookmarks API"

    # Database
    DATABASE_URL: str = "sqlite:///./pathmark.db"
    SQL_ECHO: bool = False

    # Background workers
    WORKER_COUNT: int = 4

    # Bearer tokens are issued elsewhere, we only verify them
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost"]


settings = Settings()
