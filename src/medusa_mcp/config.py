"""Server settings from environment variables, ``.env``, and an optional YAML overlay."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from medusa_mcp.medusa.client import DEFAULT_BASE_URL, normalize_base_url
from medusa_mcp.protocol.dispatcher import DEFAULT_PROTOCOL_VERSION


class ConfigError(Exception):
    """Raised when a settings file cannot be read or fails validation."""


class Settings(BaseSettings):
    """Process-wide configuration.

    Field names map onto environment variables case-insensitively
    (``mcp_auth_token`` ← ``MCP_AUTH_TOKEN``).
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mcp_auth_token: str | None = None
    medusa_base_url: str = DEFAULT_BASE_URL
    medusa_api_key: str | None = None
    medusa_http_timeout: float = 30.0

    host: str = "127.0.0.1"
    port: int = 3000

    mcp_protocol_version: str = DEFAULT_PROTOCOL_VERSION
    mcp_tool_cache_ttl: float = Field(default=300.0, ge=0)
    mcp_session_ttl: float = Field(default=1800.0, gt=0)
    mcp_session_sweep_interval: float = Field(default=300.0, gt=0)
    mcp_tool_timeout: float = Field(default=30.0, ge=0)
    mcp_sse_keepalive: float = Field(default=30.0, gt=0)

    log_level: str = "INFO"
    otel_exporter_otlp_endpoint: str | None = None

    @field_validator("medusa_base_url")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        return normalize_base_url(value)

    @field_validator("mcp_auth_token", "medusa_api_key")
    @classmethod
    def _blank_is_unset(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    def missing_backend_settings(self) -> list[str]:
        """Names of the backend variables the HTTP server cannot start without."""
        missing: list[str] = []
        if not self.medusa_base_url:
            missing.append("MEDUSA_BASE_URL")
        if not self.medusa_api_key:
            missing.append("MEDUSA_API_KEY")
        return missing


def load_settings(path: Path | None = None, **overrides: Any) -> Settings:
    """Build :class:`Settings`, layering a YAML file and explicit overrides.

    Precedence, highest first: *overrides*, the YAML file, the process
    environment, ``.env``. ``${VAR}`` references in the YAML file are
    expanded before parsing.

    Raises:
        ConfigError: On unreadable files, YAML errors or invalid values.
    """
    data: dict[str, Any] = {}
    if path is not None:
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {path}: {exc}") from exc
        try:
            loaded: Any = yaml.safe_load(os.path.expandvars(raw))
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError("Settings YAML must be a mapping")
        data.update(loaded or {})

    data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
