"""Tests for ConfigManager."""

import pytest
import yaml

from birdboard.config import BirdboardConfig, ConfigManager


class TestConfigManager:
    """Test ConfigManager functionality."""

    def test_load_config_creates_default_if_missing(self, path_resolver):
        """Should create and return a default config when the file is missing."""
        config_path = path_resolver.get_birdboard_config_path()
        assert not config_path.exists()

        config = ConfigManager(path_resolver).load()

        assert isinstance(config, BirdboardConfig)
        assert config.site_name == "Birdboard"
        assert config.window_days == 31
        assert config.rare_threshold == 5
        assert config.rare_limit == 12
        assert config.page_size == 100
        assert config.species_page_delay == 0.3
        assert config.detections_page_delay == 0.5
        assert config.api_base_url == "https://app.birdweather.com/api/v1"
        assert config_path.exists()

    def test_load_config_with_existing_file(self, path_resolver):
        """Should read values from an existing YAML file."""
        config_path = path_resolver.get_birdboard_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(
            yaml.dump(
                {
                    "site_name": "Backyard",
                    "station_id": "abc123",
                    "timezone": "America/Toronto",
                    "api_base_url": "https://example.test/api/v1/",
                }
            )
        )

        config = ConfigManager(path_resolver).load()

        assert config.site_name == "Backyard"
        assert config.station_id == "abc123"
        assert config.timezone == "America/Toronto"
        assert config.api_base_url == "https://example.test/api/v1"

    def test_env_overrides(self, path_resolver, monkeypatch):
        """Should let environment variables override the file."""
        monkeypatch.setenv("BIRDWEATHER_STATION_ID", "from-env")
        monkeypatch.setenv("BIRDBOARD_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

        config = ConfigManager(path_resolver).load()

        assert config.station_id == "from-env"
        assert config.database_url == "sqlite+aiosqlite:///:memory:"

    def test_config_path_from_env(self, path_resolver, tmp_path, monkeypatch):
        """Should honour BIRDBOARD_CONFIG."""
        custom = tmp_path / "elsewhere" / "custom.yaml"
        monkeypatch.setenv("BIRDBOARD_CONFIG", str(custom))

        ConfigManager(path_resolver).load()

        assert custom.exists()

    def test_unknown_fields_are_ignored(self, path_resolver):
        """Should drop keys the model does not know."""
        config_path = path_resolver.get_birdboard_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(yaml.dump({"site_name": "X", "latitude": 45.0}))

        config = ConfigManager(path_resolver).load()

        assert config.site_name == "X"
        assert not hasattr(config, "latitude")

    @pytest.mark.parametrize(
        "values",
        [{"timezone": "Mars/Olympus"}, {"window_days": 0}, {"page_size": -1}],
        ids=["bad-timezone", "zero-window", "negative-page-size"],
    )
    def test_invalid_values_raise(self, path_resolver, values):
        """Should raise ValueError for values that fail validation."""
        config_path = path_resolver.get_birdboard_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(yaml.dump(values))

        with pytest.raises(ValueError, match="Configuration validation failed"):
            ConfigManager(path_resolver).load()

    def test_save_and_reload(self, path_resolver):
        """Should persist changes and keep a backup of the previous file."""
        manager = ConfigManager(path_resolver)
        config = manager.load()
        config.site_name = "Saved"

        manager.save(config)

        assert manager.reload().site_name == "Saved"
        assert manager.config_path.with_suffix(".yaml.backup").exists()

    def test_tzinfo(self):
        """Should expose the configured timezone as a tzinfo."""
        config = BirdboardConfig(timezone="Europe/Paris")

        assert config.tzinfo.key == "Europe/Paris"
