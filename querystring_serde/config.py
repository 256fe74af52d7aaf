"""
Configuration settings for the query-string SerDe.

Uses Pydantic Settings to load environment variables for the default table
schema, input decoding, batch error policy, and logging. Values given on the
command line take precedence over these defaults.
"""
from __future__ import annotations

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Table metadata (comma-separated, order-significant)
    columns: str = Field("", alias="QS_COLUMNS")
    column_types: str = Field("", alias="QS_COLUMN_TYPES")

    # Decoding
    input_encoding: str = Field("utf-8", alias="QS_INPUT_ENCODING")
    skip_malformed: bool = Field(False, alias="QS_SKIP_MALFORMED")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

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


__all__ = ["Settings", "get_settings"]
