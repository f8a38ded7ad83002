"""
Configuration management for Inkwell
"""

import os

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (INKWELL_DATABASE_URL, or plain DATABASE_URL for container setups)
    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("INKWELL_DATABASE_URL", "DATABASE_URL"),
    )
    database_pool_size: int = 10
    database_max_overflow: int = 20
    sql_echo: bool = False

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_reload: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]

    # GraphQL
    graphql_path: str = "/graphql"
    graphiql: bool = True

    # Environment
    environment: str = "development"  # 'development', 'staging', 'production'
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "INKWELL_"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()


def get_database_url() -> str | None:
    """Get database URL, checking environment variables first for test compatibility."""
    return (
        os.getenv("INKWELL_DATABASE_URL") or os.getenv("DATABASE_URL") or settings.database_url
    )
