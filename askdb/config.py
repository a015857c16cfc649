"""
Application Configuration

Pydantic-based settings management using environment variables.
Supports nested configuration, validation, and caching.

Usage:
    from askdb.config import get_settings

    settings = get_settings()
    print(settings.llm.openai_model)
    print(settings.oracle.strict_mode)
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_SCHEMES = {"postgres", "postgresql", "clickhouse", "mysql", "mariadb", "sqlite"}


class LLMSettings(BaseSettings):
    """LLM completion service configuration."""

    openai_api_key: str | None = Field(
        None,
        description="OpenAI API key",
        min_length=20,
    )
    openai_model: str = Field(default="gpt-4o", description="Model used for completions")
    openai_base_url: str | None = Field(
        None,
        description="Override for OpenAI-compatible endpoints (proxies, local servers)",
    )
    max_tokens: int = Field(
        default=250,
        gt=0,
        le=16000,
        description="Maximum tokens per completion",
    )
    timeout: int = Field(
        default=30,
        gt=0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("openai_api_key")
    @classmethod
    def validate_openai_key(cls, v: str | None) -> str | None:
        """Validate OpenAI API key format."""
        if v and not v.startswith("sk-"):
            raise ValueError("OpenAI API key must start with 'sk-'")
        return v


class DatabaseSettings(BaseSettings):
    """Target database configuration."""

    connection: str = Field(
        default="default",
        min_length=1,
        description="Identifier of the active connection (keys the table cache)",
    )
    url: str | None = Field(
        None,
        description="Connection URL of the database questions are asked against",
    )
    db_type: Literal["postgresql", "clickhouse", "mysql", "sqlite"] | None = Field(
        default=None,
        description="Explicit database type (inferred from the URL when unset)",
        validation_alias="DATABASE_TYPE",
    )
    pool_size: int = Field(
        default=5,
        gt=0,
        le=20,
        description="Database connection pool size",
    )
    timeout: int = Field(
        default=30,
        gt=0,
        description="Query timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url(cls, v: str | None) -> str | None:
        """Treat empty strings as missing."""
        if v == "":
            return None
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Validate supported database URL schemes."""
        if v is None:
            return v
        parsed = urlparse(v)
        scheme = parsed.scheme.split("+")[0].lower() if parsed.scheme else ""
        if scheme not in SUPPORTED_SCHEMES:
            raise ValueError(
                "DATABASE_URL must use postgresql, mysql, mariadb, clickhouse, or sqlite scheme."
            )
        if scheme != "sqlite" and not parsed.hostname:
            raise ValueError("DATABASE_URL must include a host.")
        return v


class OracleSettings(BaseSettings):
    """Question answering behaviour."""

    max_tables_before_performing_lookup: int = Field(
        default=20,
        ge=0,
        description="Table count at which the LLM is asked to narrow the table list",
    )
    strict_mode: bool = Field(
        default=True,
        description="Reject generated SQL containing data-mutating keywords",
    )

    model_config = SettingsConfigDict(
        env_prefix="ORACLE_",
        env_file=".env",
        extra="ignore",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Log timestamp format",
    )
    file: Path | None = Field(
        default=None,
        description="Optional log file path (None = stderr only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
    )

    def configure(self) -> None:
        """Configure Python logging with these settings."""
        handlers: list[logging.Handler] = [logging.StreamHandler()]

        if self.file:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.file))

        logging.basicConfig(
            level=getattr(logging, self.level),
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,
        )


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    Settings are nested by domain (llm, database, oracle, logging).

    Environment Variables:
        LLM_*: Completion service configuration (see LLMSettings)
        DATABASE_*: Target database configuration (see DatabaseSettings)
        ORACLE_*: Table narrowing and strict mode (see OracleSettings)
        LOG_*: Logging configuration (see LoggingSettings)

    Example:
        >>> settings = get_settings()
        >>> settings.llm.openai_model
        'gpt-4o'
        >>> settings.oracle.max_tables_before_performing_lookup
        20
    """

    app_name: str = Field(
        default="AskDB",
        description="Application name",
    )

    llm: LLMSettings = Field(default_factory=LLMSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    oracle: OracleSettings = Field(default_factory=OracleSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def model_post_init(self, __context) -> None:
        """Configure logging and log the loaded configuration."""
        self.logging.configure()
        logger = logging.getLogger(__name__)
        logger.info(
            f"Settings loaded for {self.app_name}",
            extra={
                "connection": self.database.connection,
                "model": self.llm.openai_model,
                "strict_mode": self.oracle.strict_mode,
            },
        )


_DOTENV_PATH = Path(__file__).resolve().parents[1] / ".env"


def _apply_dotenv_precedence() -> None:
    env_source = os.getenv("ASKDB_ENV_SOURCE", "dotenv").lower()
    if env_source not in {"dotenv", "envfile", "file"}:
        return
    if _DOTENV_PATH.exists():
        load_dotenv(_DOTENV_PATH, override=True)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses functools.lru_cache to ensure settings are loaded only once.

    Returns:
        Settings: Singleton settings instance
    """
    _apply_dotenv_precedence()
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
