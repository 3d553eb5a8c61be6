"""Application configuration from environment."""
from fastapi import Request
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "TableTrek"
    debug: bool = False
    log_level: str = "INFO"

    # Database (async driver; Alembic derives the sync url)
    database_url: str = "sqlite+aiosqlite:///./tabletrek.db"
    echo_sql: bool = False

    # JWT bearer tokens
    secret_key: str = "change-me-in-production-use-env"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # 1 day

    # Auth cookie (signed session token)
    auth_cookie_name: str = "tabletrek_auth"
    auth_cookie_max_age: int = 60 * 60 * 24  # 24 hours

    # Achievements look back over this many recent sessions
    recent_session_window: int = 50

    # List endpoints (sessions, transactions, leaderboard)
    default_page_size: int = 10
    max_page_size: int = 100

    seed_achievements: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings
