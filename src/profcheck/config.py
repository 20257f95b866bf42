"""Checker configuration.

Configuration is an explicit, immutable value handed to the checker. It can
be assembled from several sources, later ones overriding earlier ones:

    defaults -> config file (YAML/JSON) -> environment -> explicit overrides

Usage:
    >>> from profcheck.config import CheckerConfig, load_config
    >>> config = load_config("profcheck.yaml", check_dictionary_duplicates=True)
    >>> config.check_sample_timestamp_shape
    True
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

logger = logging.getLogger("profcheck.config")

ENV_PREFIX = "PROFCHECK"
CONFIG_SECTION = "profcheck"

_TRUE_VALUES = ("true", "yes", "1", "on")
_FALSE_VALUES = ("false", "no", "0", "off")


class ConfigError(ValueError):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, source: str = ""):
        self.source = source
        if source:
            message = f"[{source}] {message}"
        super().__init__(message)


@dataclass(frozen=True)
class CheckerConfig:
    """Immutable configuration for the conformance checker.

    Thread-safe frozen dataclass; a single instance may be shared between
    concurrent checks.

    Attributes:
        check_dictionary_duplicates: Report repeated entries in the string table
        check_sample_timestamp_shape: Require every sample of a profile to
            carry the same combination of values and timestamps
    """

    check_dictionary_duplicates: bool = False
    check_sample_timestamp_shape: bool = True

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, bool):
                raise ConfigError(f"{f.name} must be a bool, got {type(value).__name__}")

    def replace(self, **kwargs: Any) -> "CheckerConfig":
        """Create a new config with updated values, ignoring None."""
        current = asdict(self)
        current.update({k: v for k, v in kwargs.items() if v is not None})
        return CheckerConfig.from_dict(current)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CheckerConfig":
        """Create config from a mapping, rejecting unknown keys."""
        valid_fields = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - valid_fields)
        if unknown:
            raise ConfigError(
                f"Unknown option(s): {', '.join(unknown)}. "
                f"Available: {', '.join(sorted(valid_fields))}"
            )
        return cls(**dict(data))

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)


def _parse_bool(value: str, name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Cannot interpret {value!r} as a boolean", source=name)


def read_config_file(path: str | Path) -> dict[str, Any]:
    """Read checker options from a YAML or JSON file.

    Options are taken from a top-level ``profcheck`` section when present,
    otherwise from the top level of the file.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    content = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        else:
            data = json.loads(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to parse: {e}", source=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigError("Expected a mapping at the top level", source=str(path))
    section = data.get(CONFIG_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"'{CONFIG_SECTION}' must be a mapping", source=str(path))
    return section


def read_env_config(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Read checker options from ``PROFCHECK_<OPTION>`` environment variables."""
    environ = os.environ if environ is None else environ
    result: dict[str, Any] = {}
    for f in fields(CheckerConfig):
        name = f"{ENV_PREFIX}_{f.name.upper()}"
        if name in environ:
            result[f.name] = _parse_bool(environ[name], name)
    return result


def load_config(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> CheckerConfig:
    """Build a CheckerConfig from file, environment and explicit overrides.

    Args:
        path: Optional YAML/JSON config file
        environ: Environment mapping (defaults to os.environ)
        **overrides: Option values that win over every other source; None
            values are ignored so unset CLI flags fall through

    Returns:
        The merged configuration
    """
    config = CheckerConfig()
    if path is not None:
        file_options = read_config_file(path)
        logger.debug("Loaded options from %s: %s", path, file_options)
        config = config.replace(**file_options)
    env_options = read_env_config(environ)
    if env_options:
        logger.debug("Loaded options from environment: %s", env_options)
        config = config.replace(**env_options)
    return config.replace(**overrides)
