"""Configuration management for img2latex.

The effective configuration is a single immutable :class:`ConverterConfig`
built once at startup by :func:`load_config` and injected into the
controller. Values come from, in increasing precedence: built-in defaults,
the JSON config file, environment variables, and explicit overrides.
"""

import json
import os
import pathlib
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    ANTHROPIC_API_VERSION,
    API_KEY_ENV_VAR,
    BYTES_PER_MB,
    COPY_ACK_SECONDS,
    DEFAULT_API_TIMEOUT_SECONDS,
    DEFAULT_API_URL,
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEMO_DELAY_SECONDS,
    MAX_API_TIMEOUT_SECONDS,
    MAX_FILE_SIZE_ENV_VAR,
    MAX_RETRIES_LIMIT,
)
from .exceptions import InvalidConfigurationError
from .paths import XDGPaths

# Keys that may be stored in the config file
CONFIGURABLE_KEYS = (
    "api_key",
    "max_file_size_mb",
    "model",
    "max_tokens",
    "api_url",
    "timeout",
    "max_retries",
)


class ConverterConfig(BaseModel):
    """Validated runtime configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key: Optional[str] = None
    max_file_size_mb: int = Field(default=DEFAULT_MAX_FILE_SIZE_MB, ge=1)
    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, ge=1)
    api_url: str = Field(default=DEFAULT_API_URL, min_length=1)
    api_version: str = ANTHROPIC_API_VERSION
    timeout: int = Field(default=DEFAULT_API_TIMEOUT_SECONDS, ge=1, le=MAX_API_TIMEOUT_SECONDS)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0, le=MAX_RETRIES_LIMIT)
    demo_delay_seconds: float = Field(default=DEMO_DELAY_SECONDS, ge=0)
    copy_ack_seconds: float = Field(default=COPY_ACK_SECONDS, ge=0)

    @field_validator("api_key")
    @classmethod
    def _blank_key_is_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def has_credential(self) -> bool:
        """True when live conversions are possible."""
        return self.api_key is not None

    @property
    def max_file_size(self) -> int:
        """Upload ceiling in bytes."""
        return self.max_file_size_mb * BYTES_PER_MB

    def masked_api_key(self) -> str:
        """Return the API key with all but its last four characters hidden."""
        if not self.api_key:
            return "(not set)"
        return "*" * max(len(self.api_key) - 4, 4) + self.api_key[-4:]


class ConfigurationManager:
    """Manages the JSON configuration file."""

    def __init__(self, config_file: Optional[pathlib.Path] = None) -> None:
        self.config_file = config_file or XDGPaths.get_config_file_path()
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                raise InvalidConfigurationError(
                    f"Cannot read configuration file {self.config_file}", str(e)
                )
            if not isinstance(data, dict):
                raise InvalidConfigurationError(
                    f"Configuration file {self.config_file} must contain a JSON object"
                )
            return data
        return {}

    def _save_config(self) -> None:
        """Save configuration to file."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self._config, f, indent=2)

    def set(self, key: str, value: str) -> None:
        """Validate and store a configuration value.

        Args:
            key: One of ``CONFIGURABLE_KEYS``
            value: Raw value; coerced to the field's type

        Raises:
            InvalidConfigurationError: If the key is unknown or the value invalid
        """
        if key not in CONFIGURABLE_KEYS:
            raise InvalidConfigurationError(
                f"Unknown configuration key: {key}",
                f"Valid keys: {', '.join(CONFIGURABLE_KEYS)}",
            )

        try:
            validated = ConverterConfig(**{key: value})
        except ValidationError as e:
            raise InvalidConfigurationError(f"Invalid value for {key}: {value}", str(e))

        self._config[key] = getattr(validated, key)
        self._save_config()

    def unset(self, key: str) -> None:
        """Remove a stored value so the default applies again."""
        if self._config.pop(key, None) is not None:
            self._save_config()

    def as_dict(self) -> Dict[str, Any]:
        """Return the stored values restricted to configurable keys."""
        return {k: v for k, v in self._config.items() if k in CONFIGURABLE_KEYS}


def _environment_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}

    api_key = environ.get(API_KEY_ENV_VAR)
    if api_key:
        overrides["api_key"] = api_key

    max_size = environ.get(MAX_FILE_SIZE_ENV_VAR)
    if max_size:
        overrides["max_file_size_mb"] = max_size

    return overrides


def load_config(
    config_manager: Optional[ConfigurationManager] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> ConverterConfig:
    """Build the effective configuration.

    Args:
        config_manager: Source of file-based values (default: XDG config file)
        environ: Environment mapping (default: ``os.environ``)
        **overrides: Explicit values that win over everything else; ``None``
            values are ignored

    Returns:
        Validated ConverterConfig

    Raises:
        InvalidConfigurationError: If any value fails validation
    """
    manager = config_manager or ConfigurationManager()
    env = os.environ if environ is None else environ

    values: Dict[str, Any] = dict(manager.as_dict())
    values.update(_environment_overrides(env))
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ConverterConfig(**values)
    except ValidationError as e:
        raise InvalidConfigurationError("Invalid configuration", str(e))
