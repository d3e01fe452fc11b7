"""
Configuration Management

Handles loading configuration from environment variables and config files.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
import json

from dotenv import load_dotenv

DEFAULT_DATA_DIR = Path('~/.naslink').expanduser()


@dataclass
class Config:
    """
    naslink configuration.

    Configuration priority (highest to lowest):
    1. Command line options
    2. Environment variables (NASLINK_*)
    3. Config file (JSON)
    4. Default values
    """
    # Network
    host: str = '0.0.0.0'
    port: int = 8080

    # Storage
    data_dir: Path = field(default_factory=lambda: DEFAULT_DATA_DIR)
    db_path: Optional[Path] = None       # Defaults to <data_dir>/naslink.db
    assets_dir: Optional[Path] = None    # Defaults to <data_dir>/images

    # Logging
    log_level: str = 'INFO'

    @property
    def database_path(self) -> Path:
        return Path(self.db_path) if self.db_path else Path(self.data_dir) / 'naslink.db'

    @property
    def images_dir(self) -> Path:
        return Path(self.assets_dir) if self.assets_dir else Path(self.data_dir) / 'images'

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        load_dotenv()

        config = cls()

        # Network
        config.host = os.getenv('NASLINK_HOST', config.host)
        config.port = int(os.getenv('NASLINK_PORT', config.port))

        # Storage
        data_dir = os.getenv('NASLINK_DATA_DIR')
        if data_dir:
            config.data_dir = Path(data_dir).expanduser()

        db_path = os.getenv('NASLINK_DB')
        if db_path:
            config.db_path = Path(db_path).expanduser()

        assets_dir = os.getenv('NASLINK_ASSETS_DIR')
        if assets_dir:
            config.assets_dir = Path(assets_dir).expanduser()

        # Logging
        config.log_level = os.getenv('NASLINK_LOG_LEVEL', config.log_level)

        return config

    @classmethod
    def from_file(cls, path: Path) -> 'Config':
        """Load configuration from a JSON file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        config = cls()

        config.host = data.get('host', config.host)
        config.port = int(data.get('port', config.port))

        if data.get('data_dir'):
            config.data_dir = Path(data['data_dir']).expanduser()
        if data.get('db_path'):
            config.db_path = Path(data['db_path']).expanduser()
        if data.get('assets_dir'):
            config.assets_dir = Path(data['assets_dir']).expanduser()

        config.log_level = data.get('log_level', config.log_level)

        return config

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'host': self.host,
            'port': self.port,
            'data_dir': str(self.data_dir),
            'db_path': str(self.db_path) if self.db_path else None,
            'assets_dir': str(self.assets_dir) if self.assets_dir else None,
            'log_level': self.log_level,
        }

    def save(self, path: Path):
        """Save configuration to a JSON file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from file and environment.

    Environment variables override file settings.
    """
    config = Config()

    if config_path and config_path.exists():
        config = Config.from_file(config_path)

    env_config = Config.from_env()
    defaults = Config()

    # Env takes precedence for non-default values
    for key in ['host', 'port', 'data_dir', 'db_path', 'assets_dir', 'log_level']:
        env_val = getattr(env_config, key)
        if env_val != getattr(defaults, key):
            setattr(config, key, env_val)

    return config


EXAMPLE_CONFIG = """
{
  "host": "0.0.0.0",
  "port": 8080,
  "data_dir": "~/.naslink",
  "db_path": null,
  "assets_dir": null,
  "log_level": "INFO"
}
"""


if __name__ == "__main__":
    print("Example configuration file (naslink.json):")
    print(EXAMPLE_CONFIG)
