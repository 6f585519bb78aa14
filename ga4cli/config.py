"""
Configuration for ga4cli

Two layers:
- Settings: process-level knobs read from the environment and .env
- StoredConfig: service-account credentials and the default property,
  persisted in <config_dir>/config.json by `ga4 init`
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"
ERROR_LOG_FILE_NAME = "errors.log"


class Settings(BaseSettings):
    """Runtime settings for the CLI and the dashboard"""
    model_config = SettingsConfigDict(
        env_prefix="GA4_CLI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    config_dir: Path = Field(
        default_factory=lambda: Path.home() / ".ga4-cli",
        description="Directory holding config.json and errors.log"
    )
    log_level: str = Field(
        default="WARNING",
        description="Console logging level"
    )
    request_timeout: float = Field(
        default=30.0,
        description="API call timeout in seconds"
    )
    refresh_interval: float = Field(
        default=5.0,
        description="Dashboard refresh interval in seconds"
    )
    default_limit: int = Field(
        default=10,
        ge=1,
        description="Default row limit for ranked reports"
    )
    data_api_endpoint: str = Field(
        default="analyticsdata.googleapis.com",
        description="Host of the GA4 Data API"
    )
    admin_api_endpoint: str = Field(
        default="analyticsadmin.googleapis.com",
        description="Host of the GA4 Admin API"
    )

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    @property
    def error_log_file(self) -> Path:
        return self.config_dir / ERROR_LOG_FILE_NAME

    def ensure_config_dir(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)


class StoredConfig(BaseModel):
    """Contents of config.json"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    credentials_path: Optional[str] = None
    credentials: Dict[str, Any]
    property_id: Optional[str] = None

    @field_validator("property_id", mode="before")
    @classmethod
    def _coerce_property_id(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return str(value)


def load_settings() -> Settings:
    """Load settings from environment variables and .env file"""
    return Settings()


def load_stored_config(settings: Settings) -> StoredConfig:
    """
    Read config.json.

    Raises:
        ConfigError: If the file is missing or does not hold a valid config
    """
    config_file = settings.config_file
    if not config_file.exists():
        raise ConfigError(
            f"No config found at {config_file}. "
            "Run with: ga4 init <path-to-service-account-json>"
        )

    try:
        data = orjson.loads(config_file.read_bytes())
        return StoredConfig.model_validate(data)
    except (OSError, orjson.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Could not read config at {config_file}: {e}") from e


def init_config(
    settings: Settings,
    credentials_path: str | Path,
    property_id: Optional[str] = None
) -> StoredConfig:
    """
    Store service-account credentials (and optionally a default property).

    Args:
        settings: Runtime settings pointing at the config directory
        credentials_path: Path to the service-account JSON key
        property_id: Optional default GA4 property id

    Returns:
        The config that was written
    """
    source = Path(credentials_path).expanduser().resolve()
    try:
        credentials = orjson.loads(source.read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        raise ConfigError(f"Could not read credentials from {source}: {e}") from e

    if not isinstance(credentials, dict):
        raise ConfigError(f"Credentials file {source} must contain a JSON object")

    stored = StoredConfig(
        credentials_path=str(source),
        credentials=credentials,
        property_id=property_id
    )

    settings.ensure_config_dir()
    settings.config_file.write_bytes(
        orjson.dumps(
            stored.model_dump(by_alias=True, exclude_none=True),
            option=orjson.OPT_INDENT_2
        )
    )
    logger.info(f"Configuration saved to {settings.config_file}")
    return stored
