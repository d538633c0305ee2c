from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .duration import parse_duration

DEFAULT_EXPIRES_IN_SECONDS = 3600


class Settings(BaseSettings):
    PROJECT_NAME: str = "VAS Gateway"
    PORT: int = 3000
    LOG_LEVEL: str = "info"

    # Signing
    JWT_SECRET: str | None = None
    JWT_ALGORITHM: str = "HS256"
    TOKEN_EXPIRES_IN: str = "1h"
    TOKEN_EXPIRES_IN_SECONDS: int = DEFAULT_EXPIRES_IN_SECONDS

    # Pre-shared client credentials
    IBANK_CLIENT_ID: str | None = None
    IBANK_CLIENT_SECRET: str | None = None

    # Downstream applications
    AIRTIME_APP_URL: str = "https://h5-getbucks-airtime.vercel.app"
    BILL_PAYMENTS_APP_URL: str = "https://h5-getbucks-bill-payments.vercel.app"

    # Admission control
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    API_RATE_LIMIT: int = 120
    TOKEN_RATE_LIMIT: int = 30
    TRUST_PROXY: bool = True

    CORS_ALLOW_ORIGINS: str = "*"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @field_validator("TOKEN_EXPIRES_IN_SECONDS", mode="before")
    @classmethod
    def default_expires_in_seconds(cls, value):
        # Non-numeric or zero values mean the default lifetime.
        try:
            seconds = int(value)
        except (TypeError, ValueError):
            return DEFAULT_EXPIRES_IN_SECONDS
        return seconds or DEFAULT_EXPIRES_IN_SECONDS

    @field_validator("TOKEN_EXPIRES_IN")
    @classmethod
    def check_expires_in(cls, value: str) -> str:
        parse_duration(value)
        return value

    @property
    def token_lifetime_seconds(self) -> float:
        return parse_duration(self.TOKEN_EXPIRES_IN)

    @property
    def app_registry(self) -> Mapping[str, str]:
        return MappingProxyType({
            "airtime": self.AIRTIME_APP_URL,
            "bill-payments": self.BILL_PAYMENTS_APP_URL,
        })

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ALLOW_ORIGINS.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
