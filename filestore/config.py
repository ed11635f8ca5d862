"""
Configuration loading for filestore
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import Config, LoggingConfig, ServerConfig, StorageConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "filestore.yaml"


class ConfigManager:
    """Loads and holds the YAML configuration"""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path).resolve()
        self.config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load configuration from YAML file, falling back to defaults"""
        try:
            if not self.config_path.exists():
                logger.warning(f"Configuration file not found: {self.config_path}")
                self.config = Config()
                return self.config

            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}

            self.config = self._parse_config(data)
            logger.info(f"Configuration loaded from {self.config_path}")
            return self.config

        except (OSError, yaml.YAMLError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Failed to load configuration: {e}")
            self.config = Config()
            return self.config

    def _parse_config(self, data: Dict[str, Any]) -> Config:
        """Parse configuration data into Config object"""

        server_data = data.get('server') or {}
        server = ServerConfig(
            addr=server_data.get('addr', '0.0.0.0'),
            port=int(server_data.get('port', 8080)),
        )

        storage_data = data.get('storage') or {}
        storage = StorageConfig(
            root=str(storage_data.get('root', 'Storage')),
        )

        logging_data = data.get('logging') or {}
        logging_config = LoggingConfig(
            json=bool(logging_data.get('json', False)),
            file=logging_data.get('file', ''),
            level=logging_data.get('level', 'INFO'),
            max_size_mb=int(logging_data.get('max_size_mb', 100)),
            backup_count=int(logging_data.get('backup_count', 5)),
        )

        return Config(server=server, storage=storage, logging=logging_config)


config_manager = ConfigManager()


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Config:
    """Load configuration from file"""
    global config_manager
    config_manager = ConfigManager(config_path)
    return config_manager.load_config()

