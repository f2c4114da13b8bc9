"""
TokenPulse - Core Configuration Module

Centralized configuration management using Pydantic Settings.
Values come from the process environment or a local .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMConfig(BaseSettings):
    """Model provider (Groq) configuration."""

    model_config = SettingsConfigDict(env_prefix="GROQ_")

    api_key: str = Field(default="", description="Groq API key")
    model: str = Field(
        default="llama-3.3-70b-versatile",
        description="Chat model used for token analysis",
    )
    temperature: float = Field(default=0.7, description="Sampling temperature")
    max_tokens: int = Field(default=1000, description="Completion length ceiling")
    timeout: float = Field(default=60.0, description="Request timeout in seconds")

    @property
    def is_configured(self) -> bool:
        """Check if the model credential is present."""
        return bool(self.api_key.strip())


class DexScreenerConfig(BaseSettings):
    """DexScreener market-data API configuration."""

    model_config = SettingsConfigDict(env_prefix="DEXSCREENER_")

    base_url: str = Field(
        default="https://api.dexscreener.com",
        description="DexScreener REST API endpoint",
    )
    timeout: float = Field(default=10.0, description="Request timeout in seconds")


class APIConfig(BaseSettings):
    """REST API configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=8000, description="API port")
    workers: int = Field(default=4, description="Number of workers")
    reload: bool = Field(default=True, description="Enable auto-reload")


class ClientConfig(BaseSettings):
    """Frontend and analysis client configuration."""

    model_config = SettingsConfigDict(env_prefix="TOKENPULSE_CLIENT_")

    api_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the analysis API",
    )
    timeout: float = Field(default=120.0, description="Analysis request timeout")
    history_path: str = Field(
        default=".tokenpulse/search_history.json",
        description="File backing the recent-search list",
    )
    chart_url_template: str = Field(
        default="https://www.gmgn.cc/kline/sol/{address}?theme=dark",
        description="Chart embed URL, formatted with the token address",
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    env: Literal["development", "staging", "production"] = Field(
        default="development",
        alias="TOKENPULSE_ENV",
    )
    debug: bool = Field(default=True, alias="TOKENPULSE_DEBUG")
    log_level: str = Field(default="INFO", alias="TOKENPULSE_LOG_LEVEL")

    # Sub-configurations
    llm: LLMConfig = Field(default_factory=LLMConfig)
    dexscreener: DexScreenerConfig = Field(default_factory=DexScreenerConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)

    @property
    def is_local(self) -> bool:
        """Check if running in local development mode."""
        return self.env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience alias
settings = get_settings()
