"""
Configuration settings for sqlpaginate.

Uses Pydantic Settings to load environment variables for pagination defaults,
logging, and the optional PostgreSQL driver layer.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Page size used when neither an option nor the request provides one.
PAGE_SIZE = 30


class Settings(BaseSettings):
    # Pagination
    page_size: int = Field(PAGE_SIZE, gt=0, alias="PAGINATE_PAGE_SIZE")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Database (driver layer and integration tests only)
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("paginate_test", alias="DB_NAME")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["PAGE_SIZE", "Settings", "get_settings"]
