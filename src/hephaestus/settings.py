"""Settings for Hephaestus."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_LIMIT


class HephaestusSettings(BaseSettings):
    """Hephaestus configuration settings."""

    # App
    APP_NAME: str = "Diablo"
    APP_ENV: str = "local"

    # AWS
    AWS_REGION: str = "ap-southeast-1"
    AWS_PROFILE: Optional[str] = None
    # Point at DynamoDB Local or another compatible endpoint
    AWS_ENDPOINT_URL: Optional[str] = None

    # Query
    QUERY_LIMIT: int = DEFAULT_LIMIT
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def load_settings(env_file: Optional[str] = ".env") -> HephaestusSettings:
    """Build settings from the environment plus an explicit env file.

    A missing file is not an error; environment variables still apply.
    """
    return HephaestusSettings(_env_file=env_file)


settings = HephaestusSettings()
