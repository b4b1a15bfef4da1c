"""Settings loaded from environment variables (+ optional .env)."""

from __future__ import annotations

import logging
import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

ENV_PREFIX = "TASKTRACK"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


class Settings(BaseModel):
    database_url: str = "sqlite:///./tasktrack.db"
    jwt_secret: str = Field(default_factory=lambda: secrets.token_urlsafe(48))
    jwt_algorithm: str = "HS256"
    access_token_ttl_minutes: int = Field(default=15, ge=1)
    refresh_token_ttl_days: int = Field(default=7, ge=1)
    environment: str = "development"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    max_page_size: int = Field(default=100, ge=1)
    log_level: str = "INFO"

    @field_validator("jwt_secret")
    @classmethod
    def _secret_long_enough(cls, value: str) -> str:
        if len(value) < 16:
            raise ValueError("jwt_secret must be at least 16 characters")
        return value

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    @model_validator(mode="after")
    def _production_needs_explicit_secret(self) -> "Settings":
        # production tokens must validate across workers and restarts
        if self.is_production and "jwt_secret" not in self.model_fields_set:
            raise ValueError(f"{_k('JWT_SECRET')} must be set when running in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv(override=False)
        fields = {
            "database_url": "DATABASE_URL",
            "jwt_secret": "JWT_SECRET",
            "jwt_algorithm": "JWT_ALGORITHM",
            "access_token_ttl_minutes": "ACCESS_TOKEN_TTL_MINUTES",
            "refresh_token_ttl_days": "REFRESH_TOKEN_TTL_DAYS",
            "environment": "ENV",
            "cors_origins": "CORS_ORIGINS",
            "max_page_size": "MAX_PAGE_SIZE",
            "log_level": "LOG_LEVEL",
        }
        values = {}
        for field, suffix in fields.items():
            raw = os.getenv(_k(suffix))
            if raw is not None and raw.strip() != "":
                values[field] = raw.strip()
        if "jwt_secret" not in values and values.get("environment", "").lower() != "production":
            logger.warning(
                "%s is not set; using a random secret, tokens will not survive a restart",
                _k("JWT_SECRET"),
            )
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
