"""Application settings, read from the environment and an optional .env file."""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DB_", extra="ignore")

    url: str = Field(default="sqlite:///./cookmate.db")
    echo: bool = Field(default=False)


class SearchSettings(BaseSettings):
    """Ingredient search behaviour."""
    model_config = SettingsConfigDict(env_prefix="SEARCH_", extra="ignore")

    # Narrow candidates in SQL before ranking; False scans every recipe.
    prefilter: bool = Field(default=True)
    # 0 keeps recipes without any matching ingredient in the ranked output.
    min_matches: int = Field(default=0, ge=0)
    # Longer pantry lists skip the prefilter; SQLite caps expression depth.
    max_prefilter_terms: int = Field(default=100, ge=1, le=500)


class PaginationSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PAGINATION_", extra="ignore")

    default_page_size: int = Field(default=10, ge=1, le=100)
    max_page_size: int = Field(default=100, ge=1, le=1000)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")

    level: str = Field(default="INFO")
    format: str = Field(default="%(asctime)s %(levelname)s %(name)s %(message)s")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="CookMate API")
    version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
