"""Server settings, read once from the environment at startup."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, field_validator

from sales_intel.http.client import ClientConfig
from sales_intel.utils.log import parse_level

DEFAULT_TIMEOUT_MS = 10_000
DEFAULT_LOG_LEVEL = "error"


class ConfigError(Exception):
    """An environment variable holds an unusable value."""


class ServerSettings(BaseModel):
    """Immutable process configuration.

    With either ``api_base_url`` or ``api_key`` missing the server runs in
    demo mode: no API client is built and tools fall back to demo data.
    """

    model_config = ConfigDict(frozen=True)

    api_base_url: str | None = None
    api_key: str | None = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator("timeout_ms")
    @classmethod
    def _positive_timeout(cls, value: int) -> int:
        if value <= 0:
            msg = "timeout must be a positive number of milliseconds"
            raise ValueError(msg)
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        parse_level(value)
        return value.strip().lower()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerSettings:
        """Build settings from ``API_BASE_URL``, ``API_KEY``, ``MCP_TIMEOUT`` and ``MCP_LOG_LEVEL``."""
        env = os.environ if environ is None else environ

        raw_timeout = env.get("MCP_TIMEOUT", "").strip()
        try:
            timeout_ms = int(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_MS
        except ValueError:
            msg = f"MCP_TIMEOUT must be an integer number of milliseconds, got {raw_timeout!r}"
            raise ConfigError(msg) from None

        try:
            return cls(
                api_base_url=env.get("API_BASE_URL") or None,
                api_key=env.get("API_KEY") or None,
                timeout_ms=timeout_ms,
                log_level=env.get("MCP_LOG_LEVEL") or DEFAULT_LOG_LEVEL,
            )
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    @property
    def api_enabled(self) -> bool:
        return bool(self.api_base_url and self.api_key)

    @property
    def logging_level(self) -> int:
        return parse_level(self.log_level)

    def client_config(self) -> ClientConfig | None:
        """Return the API client configuration, or ``None`` in demo mode."""
        if not self.api_base_url or not self.api_key:
            return None
        return ClientConfig(
            base_url=self.api_base_url,
            credential=self.api_key,
            timeout_ms=self.timeout_ms,
        )
