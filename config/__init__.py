"""
Configuration Module for the Amount Detection Pipeline.

This module provides centralized configuration management using YAML files.
Thresholds, keyword policies and backend parameters are controlled through
configuration; every component keeps an in-code default for each key.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional


class ConfigurationManager:
    """
    Centralized configuration management for the amount detection pipeline.
    
    This class handles loading and providing access to all configuration
    parameters defined in settings.yaml.
    
    Attributes:
        config_path (Path): Path to the configuration file.
        config (Dict): Loaded configuration dictionary.
    
    Example:
        >>> config = ConfigurationManager()
        >>> config.get("aggregation.max_candidates")
        8
        >>> config.get("llm.model")
        "gemini-2.5-flash"
    """
    
    _instance: Optional['ConfigurationManager'] = None
    _config: Dict[str, Any] = {}
    
    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        """Singleton pattern to ensure only one configuration instance exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize the configuration manager.
        
        Args:
            config_path: Optional path to configuration file. Defaults to
                        the AMOUNT_DETECTION_CONFIG environment variable,
                        then config/settings.yaml.
        """
        if self._initialized:
            return
        
        if config_path is None:
            config_path = os.getenv("AMOUNT_DETECTION_CONFIG")
        
        if config_path is None:
            self.config_path = Path(__file__).parent / "settings.yaml"
        else:
            self.config_path = Path(config_path)
        
        self._load_config()
        self._initialized = True
    
    def _load_config(self) -> None:
        """
        Load configuration from YAML file.
        
        Raises:
            FileNotFoundError: If configuration file doesn't exist.
            yaml.YAMLError: If configuration file is invalid.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}"
            )
        
        with open(self.config_path, 'r', encoding='utf-8') as f:
            self._config = yaml.safe_load(f) or {}
        
        self._resolve_paths()
    
    def _resolve_paths(self) -> None:
        """Resolve relative paths in the 'paths' section against the project root."""
        project_root = Path(__file__).parent.parent
        
        if 'paths' in self._config:
            for key, value in self._config['paths'].items():
                if value and not Path(value).is_absolute():
                    self._config['paths'][key] = str(project_root / value)
    
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.
        
        Args:
            key: Configuration key in dot notation (e.g., "llm.retry.max_attempts").
            default: Default value if key doesn't exist.
            
        Returns:
            Configuration value or default.
        """
        value = self._config
        
        try:
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default
    
    @classmethod
    def reset(cls) -> None:
        """
        Reset the singleton instance.
        Useful for testing or switching configuration files.
        """
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """
    Convenience function to get configuration values.
    
    Args:
        key: Configuration key in dot notation.
        default: Default value if key doesn't exist.
        
    Returns:
        Configuration value or default.
    """
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config']
