import logging
import os
from pathlib import Path
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource


class ConfigError(Exception):
    """Raised when the configuration is missing, unreadable or invalid."""


class HTTPServer(BaseModel):
    address: str = "localhost:8082"

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Address must be HOST:PORT with a numeric port."""
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"address must look like HOST:PORT, got {v!r}")
        return v

    def host_port(self) -> Tuple[str, int]:
        host, _, port = self.address.rpartition(":")
        return host, int(port)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Values are read (lowest priority first) from defaults, the .env file,
    environment variables and finally the YAML file passed to load_settings().
    Keys in the YAML file use the same names as the fields below, e.g.

        env: "local"
        storage_path: "storage/storage.db"
        http_server:
          address: "localhost:8082"
    """

    # =============================================================================
    # APPLICATION
    # =============================================================================
    project_name: str = "Students API"
    app_version: str = "1.0.0"
    env: str = "local"
    debug: bool = False

    # =============================================================================
    # SERVER
    # =============================================================================
    http_server: HTTPServer = HTTPServer()
    shutdown_timeout: int = 5

    # =============================================================================
    # STORAGE
    # =============================================================================
    storage_backend: Literal["sqlite", "memory"] = "sqlite"
    storage_path: str = "storage/storage.db"
    db_echo_sql: bool = False

    # =============================================================================
    # ERRORS
    # =============================================================================
    # Missing students are reported as 500 unless this is enabled
    strict_not_found: bool = False

    # =============================================================================
    # LOGGING
    # =============================================================================
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Upper-case the level and reject names logging does not know."""
        if isinstance(v, str):
            v = v.upper()
            # getLevelName maps known names to their int level
            if not isinstance(logging.getLevelName(v), int):
                raise ValueError(f"unknown log level {v!r}")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


def resolve_config_path(config_path: Optional[str] = None) -> Optional[str]:
    """
    Pick the YAML config file to load.

    Priority:
    1. CONFIG_PATH environment variable
    2. --config command line flag (passed in as config_path)
    """
    return os.environ.get("CONFIG_PATH") or config_path or None


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Build Settings, layering the YAML config file on top when one is given."""
    path = resolve_config_path(config_path)
    file_values = {}
    if path is not None:
        file_values = _read_config_file(path)

    try:
        return Settings(**file_values)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc


def _read_config_file(path: str) -> dict:
    if not Path(path).is_file():
        raise ConfigError(f"config file does not exist: {path}")

    try:
        file_values = YamlConfigSettingsSource(Settings, yaml_file=path)()
    except Exception as exc:
        raise ConfigError(f"cannot read config file: {exc}") from exc
    return file_values
