"""Application configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Service configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RPS_",
        extra="ignore",
    )

    environment: Literal["local", "test", "staging", "production"] = Field(default="local")
    service_name: str = Field(default="roles-permissions-service")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)
    database_url: str = Field(default="sqlite:///./data/rps.db")
    sql_echo: bool = Field(default=False)
    create_schema: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)
    cors_origins: List[str] | str = Field(default_factory=list)
    redis_url: str | None = Field(default=None)
    redis_token: str | None = Field(default=None)
    redis_cache_prefix: str = Field(default="rps")
    permission_cache_ttl: int = Field(default=60)
    role_cache_ttl: int = Field(default=300)
    user_role_cache_ttl: int = Field(default=300)
    seed_system_roles: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, value: str | List[str] | None) -> List[str]:
        if value is None or value == "":
            return []
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("redis_url", "redis_token", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: str | None) -> str | None:
        if value == "":
            return None
        return value

    @field_validator("permission_cache_ttl", "role_cache_ttl", "user_role_cache_ttl", mode="before")
    @classmethod
    def default_blank_ttl(cls, value: int | str | None, info) -> int | str:
        if value in (None, ""):
            return cls.model_fields[info.field_name].default
        return value


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings instance."""

    return AppSettings()
