"""
Config system - Layered typed configuration for the validation interceptor.

Merge order (later overrides earlier):
1. Defaults from ValidationConfig
2. Config files (JSON or YAML)
3. .env file
4. Environment variables (SV_* prefix; names that are not settings are ignored)
5. Manual overrides
"""

from typing import Any, Dict, Optional
from dataclasses import dataclass, fields, asdict
from pathlib import Path
import os
import json
import logging

from dotenv import dotenv_values


NO_BINDING_MESSAGE = "No binding operation info while invoking unknown method with params unknown."

UNEXPECTED_WRAPPER_ELEMENT = "Unexpected wrapper element"

LEGACY_AXIS_BODY = (
    "<h1>QBWebService</h1>\n"
    "<p>Hi there, this is an AXIS service!</p>\n"
    "<i>Perhaps there will be a form for invoking the service here...</i>"
)

logger = logging.getLogger("soapvalidation.config")


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass(frozen=True)
class ValidationConfig:
    """Settings of the XML validation interceptor."""

    legacy_compatibility: bool = True
    legacy_status: int = 200
    legacy_body: str = LEGACY_AXIS_BODY
    no_binding_message: str = NO_BINDING_MESSAGE
    wrapper_element_marker: str = UNEXPECTED_WRAPPER_ELEMENT
    fault_status: int = 500
    logger_name: str = "soapvalidation.faults"
    debug: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Field name -> expected type, taken from the defaults
FIELD_TYPES = {f.name: type(f.default) for f in fields(ValidationConfig)}


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources with precedence:
    overrides > environment variables > .env file > config files > defaults
    """

    def __init__(self, env_prefix: str = "SV_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "SV_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from multiple sources with proper merge strategy.

        Args:
            paths: List of config file paths (glob patterns supported)
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or []:
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader.config_data.update(overrides)

        return loader

    def _load_from_files(self, pattern: str):
        """Load config from JSON or YAML files."""
        from glob import glob

        for path_str in sorted(glob(pattern)):
            path = Path(path_str)

            if path.suffix == ".json":
                self._load_json_file(path)
            elif path.suffix in (".yaml", ".yml"):
                self._load_yaml_file(path)

    def _load_json_file(self, path: Path):
        """Load config from JSON file."""
        with open(path) as f:
            data = json.load(f)
            self._merge_section(data)

    def _load_yaml_file(self, path: Path):
        """Load config from YAML file."""
        import yaml
        with open(path) as f:
            data = yaml.safe_load(f)
            if data:
                self._merge_section(data)

    def _merge_section(self, data: Dict[str, Any]):
        """Merge file data; a top-level ``soap_validation`` section is unwrapped."""
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping, got {type(data).__name__}")
        section = data.get("soap_validation", data)
        self.config_data.update(section)

    def _load_env_file(self, path: str):
        """Load config from .env file."""
        env_path = Path(path)
        if not env_path.exists():
            return

        for key, value in dotenv_values(env_path).items():
            if key.startswith(self.env_prefix) and value is not None:
                self._set_key(key, value)

    def _load_from_env(self):
        """Load config from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_key(key, value)

    def _set_key(self, key: str, value: str):
        """Convert SV_LEGACY_STATUS to legacy_status; unrelated variables are skipped."""
        name = key[len(self.env_prefix):].lower()
        expected = FIELD_TYPES.get(name)
        if expected is None:
            logger.debug("Ignoring environment variable %s: not a known setting", key)
            return
        self.config_data[name] = self._parse_value(value, expected, key)

    def _parse_value(self, value: str, expected: type, key: str = "") -> Any:
        """Parse string value to the type of the target setting."""
        if expected is bool:
            lowered = value.strip().lower()
            if lowered in ("true", "yes", "on", "1"):
                return True
            if lowered in ("false", "no", "off", "0"):
                return False
            raise ConfigError(f"Configuration key '{key}' must be a boolean, got {value!r}")

        if expected is int:
            try:
                return int(value)
            except ValueError:
                raise ConfigError(f"Configuration key '{key}' must be int, got {value!r}") from None

        # Escaped newlines keep multi-line bodies on one env line
        return value.replace("\\n", "\n")

    def get(self, key: str, default: Any = None) -> Any:
        return self.config_data.get(key, default)

    def to_config(self) -> ValidationConfig:
        """
        Build a validated ValidationConfig.

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        unknown = sorted(set(self.config_data) - set(FIELD_TYPES))
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        values = {}
        for key, value in self.config_data.items():
            expected = FIELD_TYPES[key]
            if expected is int and isinstance(value, bool):
                raise ConfigError(f"Configuration key '{key}' must be int, got bool")
            if not isinstance(value, expected):
                raise ConfigError(
                    f"Configuration key '{key}' must be {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
            values[key] = value

        for key in ("legacy_status", "fault_status"):
            status = values.get(key, getattr(ValidationConfig, key))
            if not 100 <= status <= 599:
                raise ConfigError(f"Configuration key '{key}' is not an HTTP status: {status}")

        return ValidationConfig(**values)


def load_config(**kwargs) -> ValidationConfig:
    """Shorthand for ``ConfigLoader.load(**kwargs).to_config()``."""
    return ConfigLoader.load(**kwargs).to_config()
