#!/usr/bin/env python3
"""
Configuration Manager for Mention Extractor
Handles loading and managing configuration files.
"""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'default_output': '~/Documents/Mentions',
    'extraction': {
        'min_direct_candidates': 2,
        'max_anchor_depth': 8,
        'anchor_max_text_length': 15,
        'container_min_text_length': 30,
        'container_min_width': 200,
        'container_max_height': 600,
        'min_lines': 2,
        'min_line_length': 6,
        'fallback_extra_chars': 20,
        'max_content_length': 500,
        'extract_time': False,
        'scan_timeout': 5,
        'max_retries': 3,
        'timeout': 30,
    },
    'rules': {
        # null keeps the built-in selector cascade / timestamp grammar
        'match_rules': None,
        'timestamp_patterns': None,
    },
    'output': {
        'format': 'json',
        'indent': 2,
        'filename_template': 'mentions_{timestamp}.{ext}',
    },
    'capture': {
        'wait_ms': 1500,
        'headless': True,
    },
}

class ConfigManager:
    """Manages configuration files and settings"""

    DEFAULT_CONFIG_DIR = Path.home() / ".config" / "mention_extractor"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"

    def __init__(self, config_path: Optional[str] = None):
        """Initialize config manager with optional custom config path"""
        self.config_path = Path(config_path).expanduser() if config_path else self.DEFAULT_CONFIG_FILE
        self.config_dir = self.config_path.parent

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file, creating default if needed"""
        try:
            if not self.config_path.exists():
                logger.info(f"Config file not found at {self.config_path}, creating default")
                self._create_default_config()

            with open(self.config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)

            logger.debug(f"Loaded config from {self.config_path}")
            return self._merge_defaults(config or {})

        except Exception as e:
            logger.warning(f"Failed to load config from {self.config_path}: {e}")
            logger.info("Using default configuration")
            return self._get_default_config()

    def save_config(self, config: Dict[str, Any]) -> None:
        """Save configuration to file"""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(config, f, default_flow_style=False, allow_unicode=True)

            logger.info(f"Saved config to {self.config_path}")

        except Exception as e:
            logger.error(f"Failed to save config to {self.config_path}: {e}")
            raise

    def _create_default_config(self) -> None:
        """Create default configuration file"""
        self.save_config(self._get_default_config())

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration dictionary"""
        return copy.deepcopy(DEFAULT_CONFIG)

    def _merge_defaults(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Fill sections missing from an older or hand-written file"""
        merged = self._get_default_config()
        for key, value in config.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key].update(value)
            else:
                merged[key] = value
        return merged

    def get_nested_value(self, config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
        """Get nested configuration value using dot notation (e.g., 'extraction.scan_timeout')"""
        keys = key_path.split('.')
        value = config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def update_config(self, updates: Dict[str, Any]) -> None:
        """Update configuration with new values"""
        config = self.load_config()
        config.update(updates)
        self.save_config(config)
