import os
from pathlib import Path


class PathResolver:
    """Central authority for all file path resolution in Birdboard.

    Uses environment variables for configuration with sensible defaults.
    """

    def __init__(self) -> None:
        """Initialize PathResolver with environment-based configuration."""
        self.app_dir = Path(os.getenv("BIRDBOARD_APP", "/opt/birdboard"))
        self.data_dir = Path(os.getenv("BIRDBOARD_DATA", "/var/lib/birdboard"))

    def get_birdboard_config_path(self) -> Path:
        """Get the path to the main configuration file.

        Checks BIRDBOARD_CONFIG environment variable first, then falls back to default.
        """
        config_path = os.getenv("BIRDBOARD_CONFIG")
        if config_path:
            return Path(config_path)

        # Default: runtime config in data directory
        return self.data_dir / "config" / "birdboard.yaml"

    def get_repo_path(self) -> Path:
        """Get the path to the Birdboard repository root."""
        return self.app_dir

    def get_data_dir(self) -> Path:
        """Get the data directory path."""
        return self.data_dir

    def get_database_dir(self) -> Path:
        """Get the directory for database files."""
        return self.data_dir / "database"

    def get_database_path(self) -> Path:
        """Get the path to the default SQLite database."""
        return self.data_dir / "database" / "birdboard.db"
