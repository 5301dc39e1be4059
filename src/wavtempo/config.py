"""
Configuration management for wavtempo.

Loads and validates TOML config against strict bounds.
All tunable parameters are bounded and validated at startup.
"""

import copy
import os
from pathlib import Path
from typing import Dict, Any, Optional
import toml
import logging

from .parallel import BACKENDS

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when config validation fails."""
    pass


class Config:
    """Configuration loader and validator."""

    # Numeric bounds (inclusive) or allowed choices
    PARAM_BOUNDS = {
        "analysis": {
            "window_size": (1, 1_000_000),
            "threshold": (0.0, 120.0),
            "chunk_seconds": (0.01, 600.0),
            "channel": (0, 65535),
        },
        "parallel": {
            "backend": BACKENDS,
            "max_workers": (1, 256),
        },
    }

    DEFAULT_CONFIG = {
        "config_version": "1.0",
        "analysis": {
            "window_size": 100,
            "threshold": 10.0,
            "chunk_seconds": 1.0,
            "channel": 0,
        },
        "parallel": {
            "backend": "process",
            "max_workers": 4,
        },
    }

    def __init__(self, config_dict: Dict[str, Any]):
        """Initialize config from dictionary."""
        self.data = config_dict
        self._validate()

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load config from TOML file.

        Args:
            config_path: Path to wavtempo.toml. If None, uses WAVTEMPO_CONFIG_PATH env var
                        or defaults to configs/wavtempo.toml.

        Returns:
            Config instance.

        Raises:
            ConfigError: If config is invalid or unreadable.
        """
        if config_path is None:
            config_path = os.getenv("WAVTEMPO_CONFIG_PATH", "configs/wavtempo.toml")

        config_path = Path(config_path)

        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
            return cls.defaults()

        try:
            config_dict = toml.load(config_path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}") from e

        logger.info(f"Loaded config from {config_path}")
        return cls(config_dict)

    @classmethod
    def defaults(cls) -> "Config":
        return cls(copy.deepcopy(cls.DEFAULT_CONFIG))

    def _validate(self) -> None:
        """
        Validate all config parameters against PARAM_BOUNDS.

        Raises:
            ConfigError: If any parameter is out of bounds.
        """
        for section, params in self.PARAM_BOUNDS.items():
            if section not in self.data:
                logger.warning(f"Missing config section: {section}. Using defaults.")
                self.data[section] = copy.deepcopy(self.DEFAULT_CONFIG[section])
                continue

            section_data = self.data[section]

            for param, bounds in params.items():
                if param not in section_data:
                    default_val = self.DEFAULT_CONFIG[section][param]
                    logger.warning(f"Missing param {section}.{param}. Using default: {default_val}")
                    section_data[param] = default_val
                    continue

                value = section_data[param]

                # Choices (tuple of names)
                if isinstance(bounds[0], str):
                    if value not in bounds:
                        raise ConfigError(
                            f"Parameter {section}.{param}={value!r} not one of {list(bounds)}"
                        )
                    continue

                # Numeric ranges
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigError(
                        f"Parameter {section}.{param}={value!r} must be a number"
                    )
                min_val, max_val = bounds
                if not (min_val <= value <= max_val):
                    raise ConfigError(
                        f"Parameter {section}.{param}={value} out of bounds "
                        f"[{min_val}, {max_val}]"
                    )

        logger.debug("Config validation passed")

    def get(self, section: str, param: str, default: Any = None) -> Any:
        """Get a config parameter safely."""
        return self.data.get(section, {}).get(param, default)

    def __getitem__(self, section: str) -> Dict[str, Any]:
        """Allow dict-like access: config["analysis"]"""
        return self.data.get(section, {})

    def __repr__(self) -> str:
        version = self.data.get('config_version', 'unknown')
        return f"Config(version={version})"
