"""
Application configuration using Pydantic Settings.

Supports environment variables and .env files for configuration.
"""

from functools import lru_cache
import json
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    env: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # OCAPI
    ocapi_version: str = "v20_4"
    ocapi_client_id: str = Field(default="a" * 30, min_length=1)
    ocapi_access_token: str | None = None
    request_timeout_seconds: float = 30.0

    # Sandbox connection file
    dw_json_path: Path = Path("./dw.json")

    # Tree categories
    enable_system_objects: bool = True
    enable_custom_objects: bool = True
    enable_site_preferences: bool = True

    # Page sizes for list calls
    object_page_size: int = 500
    attribute_page_size: int = 700
    attribute_group_page_size: int = 150

    # Instance type used for site preference value lookups
    site_preference_instance_type: Literal[
        "staging", "development", "sandbox", "production"
    ] = "sandbox"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            value = v.strip()
            if value.startswith("["):
                try:
                    parsed = json.loads(value)
                    if isinstance(parsed, list):
                        return [str(origin).strip() for origin in parsed if str(origin).strip()]
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("ocapi_version", mode="before")
    @classmethod
    def normalize_ocapi_version(cls, v):
        """Accept both "20.4" and the URL form "v20_4"."""
        if isinstance(v, str):
            value = v.strip().replace(".", "_")
            if not value.startswith("v"):
                value = f"v{value}"
            return value
        return v

    @field_validator("dw_json_path", mode="before")
    @classmethod
    def parse_dw_json_path(cls, v):
        if isinstance(v, str):
            return Path(v)
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
