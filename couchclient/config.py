"""Configuration management for the CouchDB client."""

import json
import os
import shutil
from pathlib import Path
from typing import Any, Optional

from couchclient.logging_config import get_logger

logger = get_logger(__name__)


class Config:
    """Manages client configuration, optionally stored in a JSON file."""

    DEFAULT_CONFIG = {
        "protocol": os.environ.get("COUCHDB_PROTOCOL", "http"),
        "host": os.environ.get("COUCHDB_HOST", "localhost"),
        "port": int(os.environ.get("COUCHDB_PORT", "5984")),
        "db_name": os.environ.get("COUCHDB_NAME", "couchclient"),
        "username": os.environ.get("COUCHDB_USERNAME"),
        "password": os.environ.get("COUCHDB_PASSWORD"),
        "timeout": 30,
        "create_db_if_not_exist": False,
    }

    def __init__(self, config_path: Optional[Path] = None, **overrides: Any):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file; None keeps settings in memory only
            **overrides: Values applied on top of defaults and file contents
        """
        self.config_path = config_path
        self.data = self._load()
        self.data.update(overrides)

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        config = self.DEFAULT_CONFIG.copy()
        if self.config_path is None:
            return config

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError) as e:
                backup_path = self.config_path.with_suffix('.json.bak')
                logger.warning(f"Unreadable config {self.config_path}: {e}; backing up to {backup_path}")
                try:
                    shutil.copy(self.config_path, backup_path)
                except IOError as copy_error:
                    logger.warning(f"Could not back up config: {copy_error}")
                return config

        try:
            with open(self.config_path, 'w') as f:
                json.dump(config, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not write default config to {self.config_path}: {e}")
        return config

    def save(self) -> None:
        """Save current configuration to file."""
        if self.config_path is None:
            return
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not save config to {self.config_path}: {e}")

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value and save to file.

        Args:
            key: Configuration key
            value: New value
        """
        self.data[key] = value
        self.save()

    def get_base_url(self) -> str:
        """
        Get CouchDB server base URL.

        Returns:
            Base URL string (e.g., "http://localhost:5984")
        """
        protocol = self.data.get('protocol', 'http')
        host = self.data.get('host', 'localhost')
        port = self.data.get('port', 5984)
        return f"{protocol}://{host}:{port}"

    def get_db_name(self) -> str:
        """
        Get the default database name used for document operations.

        Returns:
            Database name
        """
        return self.data.get('db_name', 'couchclient')

    def get_timeout(self) -> int:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return self.data.get('timeout', 30)

    def get_credentials(self) -> Optional[tuple[str, str]]:
        """
        Get basic auth credentials.

        Returns:
            (username, password) tuple or None if no username is configured
        """
        username = self.data.get('username')
        if not username:
            return None
        return username, self.data.get('password') or ''

    def create_db_if_not_exist(self) -> bool:
        return bool(self.data.get('create_db_if_not_exist', False))
