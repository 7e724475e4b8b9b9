"""Configuration management for PaletteGen."""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from .logging import get_logger

logger = get_logger(__name__)


class Config(BaseModel):
    """Validated extraction settings."""

    palette_size: int = Field(5, ge=0)
    max_dimension: int = Field(300, gt=0)
    allow_upscale: bool = False
    alpha_threshold: int = Field(128, ge=0, le=256)
    bucket_size: int = Field(15, gt=0, le=255)
    saturation_threshold: float = Field(0.3, ge=0.0, le=1.0)
    saturation_boost: float = Field(1.3, gt=0.0)
    colorfulness_threshold: float = Field(0.2, ge=0.0)
    colorfulness_boost: float = Field(1.2, gt=0.0)
    initial_distance: float = Field(40.0, ge=0.0)
    distance_step: float = Field(5.0, gt=0.0)
    min_distance: float = Field(20.0, ge=0.0)


class ConfigManager:
    """Manage configuration settings for PaletteGen."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = Path(config_path) if config_path else None
        self._config = self.get_default_config()

        if self.config_path and self.config_path.exists():
            self.load_config()

    def get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "extraction": Config().model_dump(),
            "export": {
                "default_formats": ["json"],
                "project_name": "palette",
                "generate_preview": False,
            },
            "output": {
                "directory": "./output",
            },
        }

    def load_config(self) -> None:
        """Load configuration from file."""
        if not self.config_path or not self.config_path.exists():
            return

        try:
            with open(self.config_path, "r") as f:
                if self.config_path.suffix.lower() in (".yaml", ".yml"):
                    loaded_config = yaml.safe_load(f) or {}
                else:
                    loaded_config = json.load(f)

            if not isinstance(loaded_config, dict):
                raise ValueError("top-level value must be a mapping")

            self._config = self._deep_merge(self._config, loaded_config)
            logger.debug(f"Loaded configuration from {self.config_path}")

        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ValueError(
                f"Failed to load configuration from {self.config_path}: {e}"
            ) from e

    def save_config(self, output_path: Optional[Union[str, Path]] = None) -> None:
        """Save current configuration to file.

        Args:
            output_path: Optional output path, defaults to current config_path
        """
        save_path = Path(output_path) if output_path else self.config_path

        if not save_path:
            raise ValueError("No output path specified")

        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, "w") as f:
            if save_path.suffix.lower() in (".yaml", ".yml"):
                yaml.dump(self._config, f, default_flow_style=False, indent=2)
            else:
                json.dump(self._config, f, indent=2)

    def get_config(self) -> Dict[str, Any]:
        """Get current configuration."""
        return self._config.copy()

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Configuration key (supports dot notation)
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value = self._config

        try:
            for k in key.split("."):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value.

        Args:
            key: Configuration key (supports dot notation)
            value: Value to set
        """
        keys = key.split(".")
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def update(self, updates: Dict[str, Any]) -> None:
        """Update configuration with dictionary of changes.

        Args:
            updates: Dictionary of configuration updates
        """
        self._config = self._deep_merge(self._config, updates)

    def _deep_merge(self, base: Dict, update: Dict) -> Dict:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in update.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get_extraction_config(self):
        """Get extraction configuration object.

        Raises:
            pydantic.ValidationError: If the extraction section is invalid
        """
        from ..core.extractor import ExtractionConfig

        validated = Config(**self.get("extraction", {}))
        return ExtractionConfig(**validated.model_dump())

    @classmethod
    def from_env(cls, config_path: Optional[Union[str, Path]] = None) -> "ConfigManager":
        """Create configuration manager with environment variable overrides."""
        config_manager = cls(config_path)

        env_mappings = {
            "PALETTEGEN_PALETTE_SIZE": "extraction.palette_size",
            "PALETTEGEN_MAX_DIMENSION": "extraction.max_dimension",
            "PALETTEGEN_BUCKET_SIZE": "extraction.bucket_size",
            "PALETTEGEN_ALPHA_THRESHOLD": "extraction.alpha_threshold",
            "PALETTEGEN_ALLOW_UPSCALE": "extraction.allow_upscale",
            "PALETTEGEN_OUTPUT_DIR": "output.directory",
            "PALETTEGEN_PROJECT_NAME": "export.project_name",
        }

        for env_var, config_key in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                config_manager.set(config_key, _coerce_env_value(value))

        return config_manager

    def validate_config(self) -> Tuple[bool, List[str]]:
        """Validate current configuration.

        Extraction settings are checked against the same ``Config`` model
        that ``get_extraction_config`` builds from.

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        try:
            validated = Config(**self.get("extraction", {}))
        except ValidationError as e:
            validated = None
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"])
                errors.append(f"extraction.{field}: {error['msg']}")

        if validated is not None and validated.min_distance > validated.initial_distance:
            errors.append("extraction.min_distance must not exceed extraction.initial_distance")

        formats = self.get("export.default_formats", [])
        from ..output.exporter import SUPPORTED_FORMATS

        for fmt in formats:
            if fmt not in SUPPORTED_FORMATS:
                errors.append(f"export.default_formats contains unknown format '{fmt}'")

        return len(errors) == 0, errors

    def get_profile_configs(self) -> Dict[str, Dict]:
        """Get predefined configuration profiles."""
        return {
            "fast": {
                "extraction": {"max_dimension": 150},
            },
            "balanced": {
                "extraction": {"max_dimension": 300, "bucket_size": 15},
            },
            "detailed": {
                "extraction": {
                    "max_dimension": 600,
                    "bucket_size": 9,
                    "palette_size": 8,
                    "initial_distance": 30.0,
                    "min_distance": 15.0,
                },
            },
            "vibrant": {
                "extraction": {
                    "saturation_boost": 1.6,
                    "colorfulness_boost": 1.4,
                    "saturation_threshold": 0.25,
                },
            },
        }

    def apply_profile(self, profile_name: str) -> None:
        """Apply a predefined configuration profile.

        Args:
            profile_name: Name of profile to apply
        """
        profiles = self.get_profile_configs()

        if profile_name not in profiles:
            raise ValueError(
                f"Unknown profile: {profile_name}. Available: {list(profiles.keys())}"
            )

        self.update(profiles[profile_name])


def _coerce_env_value(value: str) -> Any:
    """Convert an environment string to bool, int or float where it looks like one."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value
