"""
Global configuration management for auto-adjust.

Implements Singleton pattern to ensure single source of truth for global settings.
Configuration hierarchy (highest to lowest priority):
1. Arguments passed directly to functions (e.g. an explicit GroupConfig)
2. File named by the AUTO_ADJUST_CONFIG environment variable
3. Global config file (configs/global_config.yaml)
4. Hardcoded defaults

Example:
    >>> from auto_adjust.config import get_global_config
    >>> config = get_global_config()
    >>> threshold = config.get_float('auto_adjust.group.clustering.similarity_threshold')
"""

import copy
import os
import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'AUTO_ADJUST_CONFIG'


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML configuration file."""
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file, 'r') as file:
        return yaml.safe_load(file) or {}


class GlobalConfig:
    """
    Singleton class for global configuration management.

    Loads configuration from configs/global_config.yaml and provides
    access to settings across all modules.
    """

    _instance: Optional['GlobalConfig'] = None
    _config: Dict[str, Any] = {}
    _loaded: bool = False

    def __new__(cls) -> 'GlobalConfig':
        """Singleton pattern: ensure only one instance exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize configuration (only loads once)."""
        if not self._loaded:
            self._load_config()
            self._loaded = True

    def _config_path(self) -> Path:
        override = os.environ.get(CONFIG_ENV_VAR)
        if override:
            return Path(override)
        # auto-adjust/auto_adjust/config.py -> auto-adjust/
        project_root = Path(__file__).resolve().parent.parent
        return project_root / 'configs' / 'global_config.yaml'

    def _load_config(self) -> None:
        """Load configuration from YAML file, layered over the defaults."""
        config_path = self._config_path()
        self._config = self._get_default_config()

        if config_path.exists():
            try:
                self._deep_merge(self._config, load_yaml_config(config_path))
                logger.info(f"Loaded global config from: {config_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load global config: {e}. Using defaults.")
        else:
            logger.warning(f"Global config not found at {config_path}. Using defaults.")

    def _get_default_config(self) -> Dict[str, Any]:
        """Return hardcoded default configuration."""
        return {
            'log_dir': 'logs/',
            'logging': {
                'level': 'INFO',
                'log_to_file': False,
                'log_to_console': True
            },
            'auto_adjust': {
                'group': {
                    'kinds': ['lighting', 'white_balance', 'straighten'],
                    'clustering': {
                        'algorithm': 'threshold',
                        'similarity_threshold': 0.25,
                        'metric': 'euclidean',
                        'normalize': False
                    },
                    'telemetry': {
                        'max_records': 1000
                    }
                },
                'export': {
                    'format': 'folder',
                    'organize_by_cluster': True,
                    'include_thumbnails': False,
                    'thumbnail_size': 512,
                    'extension': '.jpg'
                }
            }
        }

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports nested keys with dots).

        Args:
            key: Configuration key (e.g., 'log_dir' or 'auto_adjust.group.kinds')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_path(self, key: str, default: str = '') -> Path:
        """Get configuration value as Path object."""
        path_str = self.get(key, default)
        return Path(path_str)

    def get_int(self, key: str, default: int = 0) -> int:
        """Get configuration value as integer."""
        value = self.get(key, default)
        try:
            return int(value)
        except (ValueError, TypeError):
            return default

    def get_float(self, key: str, default: float = 0.0) -> float:
        """Get configuration value as float."""
        value = self.get(key, default)
        try:
            return float(value)
        except (ValueError, TypeError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get configuration value as boolean."""
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ('true', 'yes', '1', 'on')
        return bool(value)

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value (runtime only, not persisted).

        Args:
            key: Configuration key (supports nested with dots)
            value: Value to set

        Example:
            >>> config = get_global_config()
            >>> config.set('auto_adjust.group.clustering.similarity_threshold', 0.1)
        """
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def reload(self) -> None:
        """Reload configuration from file."""
        self._loaded = False
        self._load_config()
        self._loaded = True
        logger.info("Global configuration reloaded")

    def to_dict(self) -> Dict[str, Any]:
        """Return full configuration as dictionary."""
        return copy.deepcopy(self._config)

    def _deep_merge(self, base: Dict, updates: Dict) -> None:
        """Recursively merge updates into base dictionary."""
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value


# Singleton instance accessor
_global_config_instance: Optional[GlobalConfig] = None


def get_global_config() -> GlobalConfig:
    """
    Get the global configuration instance (Singleton).

    Returns:
        GlobalConfig instance
    """
    global _global_config_instance
    if _global_config_instance is None:
        _global_config_instance = GlobalConfig()
    return _global_config_instance
