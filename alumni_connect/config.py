"""
Runtime configuration helpers for the client state layer.

Loads the API location and credentials from the environment or from the
.env file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    app_name: str = Field(default="Alumni Connect", alias="APP_NAME")

    api_base_url: str = Field(default="http://localhost:5000/api", alias="ALUMNI_API_BASE_URL")
    api_token: str | None = Field(default=None, alias="ALUMNI_API_TOKEN")
    request_timeout: float = Field(default=15.0, alias="ALUMNI_REQUEST_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
