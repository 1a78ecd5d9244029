"""Configuration models using Pydantic for validation."""

import os
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..exceptions import ConfigError

API_KEY_ENV_VAR = "OPENWEATHER_API_KEY"


def _validate_http_url(v: str) -> str:
    try:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"URL must use http or https scheme, got '{parsed.scheme}'")
        if not parsed.netloc:
            raise ValueError("URL must have a valid host")
    except Exception as e:
        raise ValueError(f"Invalid URL '{v}': {e}")
    return v.rstrip("/")


class ProviderConfig(BaseModel):
    """OpenWeather connection settings."""

    api_key: str = Field(default_factory=lambda: os.environ.get(API_KEY_ENV_VAR, ""), repr=False)
    base_url: str = "https://api.openweathermap.org/data/2.5"
    geocoding_url: str = "https://api.openweathermap.org/geo/1.0"
    units: Literal["metric"] = "metric"
    language: str = Field(default="en", min_length=2, max_length=10)
    timeout_seconds: float = Field(default=20.0, gt=0)

    @field_validator("base_url", "geocoding_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate that URL is a valid HTTP/HTTPS URL."""
        return _validate_http_url(v)


class LocationConfig(BaseModel):
    """Device location settings.

    `permission` plays the role of the OS permission store: `prompt` asks the
    user the first time, `allow` and `deny` are pre-decided.
    """

    permission: Literal["prompt", "allow", "deny"] = "prompt"
    ip_lookup_url: str = "https://ipinfo.io/json"
    timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("ip_lookup_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate that URL is a valid HTTP/HTTPS URL."""
        return _validate_http_url(v)


class HistoryConfig(BaseModel):
    """Lookup history settings."""

    path: Path = Path("weather-history.json")
    limit: int = Field(default=12, ge=1, le=100)


class Settings(BaseModel):
    """General application settings."""

    default_city: str = ""
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class Config(BaseModel):
    """Main configuration model."""

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    location: LocationConfig = Field(default_factory=LocationConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    settings: Settings = Field(default_factory=Settings)

    @classmethod
    def load(cls, path: Path | str = "config.json") -> "Config":
        """Load configuration from a JSON file.

        Raises FileNotFoundError if the file is missing and ConfigError if it
        cannot be read or holds invalid settings.
        """
        import json

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path) as f:
                data = json.load(f)
            return cls.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

    @classmethod
    def load_or_default(cls, path: Path | str = "config.json") -> "Config":
        """Load configuration or return default if file doesn't exist."""
        try:
            return cls.load(path)
        except FileNotFoundError:
            return cls()
