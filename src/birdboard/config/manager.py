"""Configuration loading and saving."""

import logging
import os
import shutil
from typing import Any

import yaml
from pydantic import ValidationError

from birdboard.config.models import BirdboardConfig
from birdboard.system.path_resolver import PathResolver

logger = logging.getLogger(__name__)

# Environment variables that take precedence over the YAML file
ENV_OVERRIDES = {
    "BIRDWEATHER_STATION_ID": "station_id",
    "BIRDBOARD_DATABASE_URL": "database_url",
}


class ConfigManager:
    """Manages configuration loading, saving, and environment overrides."""

    def __init__(self, path_resolver: PathResolver | None = None):
        """Initialize ConfigManager.

        Args:
            path_resolver: Optional PathResolver instance. If None, creates a new one.
        """
        self.path_resolver = path_resolver or PathResolver()
        self.config_path = self.path_resolver.get_birdboard_config_path()

    def load(self) -> BirdboardConfig:
        """Load configuration, applying environment overrides and validation.

        Returns:
            BirdboardConfig: Loaded and validated configuration

        Raises:
            ValueError: If the configuration does not validate
        """
        self._ensure_config_exists()

        raw_config = self._read_yaml()
        raw_config = self._apply_env_overrides(raw_config)

        return self._create_config_object(raw_config)

    def save(self, config: BirdboardConfig) -> None:
        """Save configuration to file with backup.

        Args:
            config: Configuration to save

        Raises:
            PermissionError: If config file cannot be written
        """
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            backup_path = self.config_path.with_suffix(".yaml.backup")
            try:
                shutil.copy2(self.config_path, backup_path)
            except PermissionError:
                logger.warning("Could not create backup at %s", backup_path)

        config_yaml = yaml.dump(config.model_dump(), default_flow_style=False, sort_keys=False)
        self.config_path.write_text(config_yaml)
        logger.info("Configuration saved successfully to %s", self.config_path)

    def reload(self) -> BirdboardConfig:
        """Reload configuration from disk."""
        return self.load()

    def _ensure_config_exists(self) -> None:
        """Ensure config file exists, create it from defaults if needed."""
        if self.config_path.exists():
            return

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        config_yaml = yaml.dump(
            BirdboardConfig().model_dump(), default_flow_style=False, sort_keys=False
        )
        self.config_path.write_text(config_yaml)
        logger.info("Created default configuration at %s", self.config_path)

    def _read_yaml(self) -> dict[str, Any]:
        """Read YAML config file.

        Returns:
            dict: Raw configuration dictionary
        """
        config_text = self.config_path.read_text()
        return yaml.safe_load(config_text) or {}

    def _apply_env_overrides(self, raw_config: dict[str, Any]) -> dict[str, Any]:
        """Overlay non-empty environment variables onto the raw config."""
        for env_name, field_name in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                raw_config[field_name] = value
        return raw_config

    def _create_config_object(self, raw_config: dict[str, Any]) -> BirdboardConfig:
        """Create BirdboardConfig object from dictionary.

        Args:
            raw_config: Configuration dictionary

        Returns:
            BirdboardConfig: Typed configuration object
        """
        expected_fields = set(BirdboardConfig.model_fields.keys())
        filtered_config = {k: v for k, v in raw_config.items() if k in expected_fields}

        unexpected_fields = set(raw_config.keys()) - expected_fields
        if unexpected_fields:
            logger.warning("Ignoring unknown config fields: %s", sorted(unexpected_fields))

        try:
            return BirdboardConfig(**filtered_config)
        except ValidationError as e:
            raise ValueError(f"Configuration validation failed: {e}") from e
