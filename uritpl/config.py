"""
Config system - typed settings with layered sources.

Merge precedence (later overrides earlier):
1. Dataclass defaults
2. ``.env`` file (when given)
3. Environment variables (``URITPL_*``)
4. Manual overrides
"""

import logging
import os
import types
from dataclasses import MISSING, dataclass, fields
from typing import Any, Dict, Optional, Union, get_args, get_origin, get_type_hints

from dotenv import dotenv_values

logger = logging.getLogger("uritpl.config")

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class Settings:
    """Library settings."""
    # Validate expansions as URI references unless a call says otherwise
    strict: bool = True
    cache_max_size: int = 1000
    cache_ttl: Optional[float] = None
    log_level: str = "WARNING"


class SettingsLoader:
    """Loads and merges settings from ``.env`` files, the environment and overrides."""

    def __init__(self, env_prefix: str = "URITPL_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        env_prefix: str = "URITPL_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Settings:
        """
        Load settings with proper merge strategy.

        Args:
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Validated Settings instance
        """
        loader = cls(env_prefix=env_prefix)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader.config_data.update(overrides)

        settings = loader.build()
        logger.debug(f"Settings loaded: {settings}")
        return settings

    def _load_env_file(self, path: str):
        """Load settings from .env file."""
        if not os.path.exists(path):
            logger.debug(f"Env file not found: {path}")
            return

        for key, value in dotenv_values(path).items():
            if key.startswith(self.env_prefix) and value is not None:
                self._set(key, value)

    def _load_from_env(self):
        """Load settings from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set(key, value)

    def _set(self, key: str, value: str):
        """Convert URITPL_CACHE_TTL to cache_ttl."""
        name = key[len(self.env_prefix):].lower()
        self.config_data[name] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        lowered = value.lower()
        if lowered in ("true", "yes", "on"):
            return True
        if lowered in ("false", "no", "off"):
            return False
        if lowered in ("none", "null", ""):
            return None

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def build(self) -> Settings:
        """Instantiate Settings with validation."""
        hints = get_type_hints(Settings)
        known = {f.name for f in fields(Settings)}
        for name in self.config_data:
            if name not in known:
                logger.debug(f"Ignoring unknown setting '{name}'")

        kwargs = {}
        for field_info in fields(Settings):
            name = field_info.name
            if name not in self.config_data:
                if field_info.default is MISSING:
                    raise ConfigError(f"Required setting '{name}' not provided")
                continue

            value = self._coerce(self.config_data[name], hints[name])
            if not self._check_type(value, hints[name]):
                raise ConfigError(
                    f"Setting '{name}' expected {hints[name]}, "
                    f"got {type(value).__name__}"
                )
            kwargs[name] = value

        settings = Settings(**kwargs)

        settings.log_level = str(settings.log_level).upper()
        if settings.log_level not in _LOG_LEVELS:
            raise ConfigError(f"Unknown log level '{settings.log_level}'")
        if settings.cache_max_size < 0:
            raise ConfigError("cache_max_size must not be negative")

        return settings

    def _coerce(self, value: Any, expected_type: Any) -> Any:
        """Widen values the env parser produced narrower than declared."""
        base = self._unwrap_optional(expected_type)
        if base is bool and type(value) is int and value in (0, 1):
            return bool(value)
        if base is float and isinstance(value, int) and not isinstance(value, bool):
            return float(value)
        if base is str and isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @staticmethod
    def _unwrap_optional(expected_type: Any) -> Any:
        origin = get_origin(expected_type)
        if origin is Union or origin is types.UnionType:
            args = [a for a in get_args(expected_type) if a is not type(None)]
            return args[0] if args else expected_type
        return expected_type

    def _check_type(self, value: Any, expected_type: Any) -> bool:
        """Basic type checking."""
        origin = get_origin(expected_type)
        if origin is Union or origin is types.UnionType:
            if value is None:
                return type(None) in get_args(expected_type)
            expected_type = self._unwrap_optional(expected_type)

        if expected_type is int and isinstance(value, bool):
            return False

        try:
            return isinstance(value, expected_type)
        except TypeError:
            # For complex types, skip validation
            return True


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or load the process-wide settings."""
    global _settings
    if _settings is None:
        _settings = SettingsLoader.load()
    return _settings


def configure(settings: Optional[Settings] = None, **overrides) -> Settings:
    """Install settings (or load them from the environment plus overrides)."""
    global _settings
    _settings = settings if settings is not None else SettingsLoader.load(overrides=overrides)
    return _settings


def reset_settings():
    """Forget loaded settings; the next get_settings() reloads them."""
    global _settings
    _settings = None
