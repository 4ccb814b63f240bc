"""Application configuration using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Discord
    discord_token: str = Field(default="", alias="DISCORD_TOKEN")
    default_greeting: str = Field(
        default="Chessburger is online! Type /chessburger for commands",
        alias="DEFAULT_GREETING",
    )

    # Database
    database_path: str = Field(default="chessburger.db", alias="DATABASE_PATH")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Chess.com API
    chesscom_api_base: str = Field(default="https://api.chess.com/pub", alias="CHESSCOM_API_BASE")
    chesscom_user_agent: str = Field(
        default="chessburger-bot/1.0 (Discord chess stats bot)",
        alias="CHESSCOM_USER_AGENT",
    )
    fetch_timeout_seconds: float = Field(default=10.0, alias="FETCH_TIMEOUT_SECONDS")


# Global settings instance
settings = Settings()


class Config:
    """Uppercase config interface used throughout the bot."""

    DISCORD_TOKEN = settings.discord_token
    DEFAULT_GREETING = settings.default_greeting
    DATABASE_PATH = settings.database_path
    LOG_LEVEL = settings.log_level.upper()
    CHESSCOM_API_BASE = settings.chesscom_api_base.rstrip("/")
    CHESSCOM_USER_AGENT = settings.chesscom_user_agent
    FETCH_TIMEOUT_SECONDS = settings.fetch_timeout_seconds
