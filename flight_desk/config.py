from __future__ import annotations

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    flight_api_url: str = Field("", alias="FLIGHT_API_URL")
    flight_api_key: str = Field("", alias="FLIGHT_API_KEY")
    flight_api_host: str = Field("", alias="FLIGHT_API_HOST")
    airport_api_url: str = Field(
        "http://api.aviationstack.com/v1/airports", alias="AIRPORT_API_URL"
    )
    airport_api_key: str = Field("", alias="AIRPORT_API_KEY")
    http_timeout_s: float = Field(15, alias="HTTP_TIMEOUT_S")
    db_path: str = Field("flight_desk.db", alias="FLIGHT_DESK_DB")
    search_history_limit: int = Field(5, alias="SEARCH_HISTORY_LIMIT")
    simulate: bool = Field(False, alias="FLIGHT_DESK_SIMULATE")

    adults: int = Field(1, alias="ADULTS")
    currency: str = Field("USD", alias="CURRENCY")
    cabin_class: str = Field("economy", alias="CABIN_CLASS")
    country_code: str = Field("US", alias="COUNTRY_CODE")

    @field_validator("http_timeout_s")
    @classmethod
    def _timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("HTTP_TIMEOUT_S must be greater than 0")
        return v

    @field_validator("search_history_limit")
    @classmethod
    def _limit_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("SEARCH_HISTORY_LIMIT must be greater than 0")
        return v

    @field_validator("adults")
    @classmethod
    def _adults_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("ADULTS must be at least 1")
        return v

    @field_validator("currency", "country_code", mode="before")
    @classmethod
    def _upper(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def remote_flights_enabled(self) -> bool:
        return bool(self.flight_api_url.strip()) and not self.simulate


@lru_cache()
def get_settings() -> Settings:
    """Return application settings loaded from the environment."""
    return Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "get_settings"]
