"""Application configuration driven by environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

AuthMode = Literal["auto", "service_account", "default"]

DEFAULT_SAMPLE_IMAGE = "LANDSAT/LC08/C02/T1_TOA/LC08_044034_20140318"
DEFAULT_SAMPLE_PROPERTY = "CLOUD_COVER"


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    gcp_project: str | None = Field(default=None, validation_alias="GCP_PROJECT")
    google_credentials_path: str | None = Field(
        default=None, validation_alias="GOOGLE_APPLICATION_CREDENTIALS"
    )
    service_account_email: str | None = Field(
        default=None, validation_alias="EE_SERVICE_ACCOUNT"
    )
    service_account_key: str | None = Field(
        default=None, validation_alias="EE_SERVICE_ACCOUNT_KEY"
    )
    auth_mode: AuthMode = Field(default="auto", validation_alias="EE_AUTH_MODE")
    ee_api_url: str | None = Field(default=None, validation_alias="EE_API_URL")
    sample_image: str = Field(
        default=DEFAULT_SAMPLE_IMAGE, validation_alias="EE_SAMPLE_IMAGE"
    )
    sample_property: str = Field(
        default=DEFAULT_SAMPLE_PROPERTY, validation_alias="EE_SAMPLE_PROPERTY"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_color: bool = Field(default=True, validation_alias="LOG_COLOR")

    @field_validator(
        "gcp_project",
        "google_credentials_path",
        "service_account_email",
        "service_account_key",
        "ee_api_url",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator("auth_mode", mode="before")
    @classmethod
    def _normalise_mode(cls, value: str | None) -> str:
        if value is None or not str(value).strip():
            return "auto"
        return str(value).strip().lower().replace("-", "_")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: str | None) -> str:
        if not value:
            return "INFO"
        return str(value).strip().upper()


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
