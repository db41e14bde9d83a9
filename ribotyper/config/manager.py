#!/usr/bin/env python3
"""
Layered configuration for ribotyper.

Values are resolved in this order, later layers winning:

1. DEFAULT_CONFIG
2. the YAML or JSON file given on the command line
3. a ``<name>.local<ext>`` file next to it, if present
4. ``RIBO_`` environment variables, with ``__`` separating nested keys
   (``RIBO_CLASSIFICATION__MIN_SCORE=30``)
"""
import os
import copy
import json
import logging
from typing import Dict, Any, Optional

import yaml

from ribotyper.exceptions import ConfigurationError
from .schema import ConfigSchema
from .defaults import DEFAULT_CONFIG


def merge_config(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Merge overlay into base in place, descending into nested mappings"""
    for key, value in overlay.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merge_config(current, value)
        else:
            base[key] = value
    return base


def parse_env_value(raw: str) -> Any:
    """Interpret an environment string as bool, None, int, float or str"""
    lowered = raw.strip().lower()
    keywords = {'true': True, 'yes': True, 'false': False, 'no': False,
                'none': None, 'null': None}
    if lowered in keywords:
        return keywords[lowered]
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            pass
    return raw


def local_config_path(config_path: str) -> str:
    """ribotyper.yml -> ribotyper.local.yml in the same directory"""
    stem, ext = os.path.splitext(config_path)
    return f"{stem}.local{ext}"


class ConfigManager:
    """Resolved ribotyper configuration"""

    ENV_PREFIX = "RIBO_"

    def __init__(self, config_path: Optional[str] = None):
        """Load and validate configuration

        Args:
            config_path: YAML or JSON configuration file (optional)

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        self.logger = logging.getLogger("ribotyper.config")
        self.config_path = config_path
        self.config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)

        if config_path:
            if not os.path.exists(config_path):
                raise ConfigurationError(f"Configuration file not found: {config_path}",
                                         {'path': config_path})
            merge_config(self.config, self._read_file(config_path))

            local_path = local_config_path(config_path)
            if os.path.exists(local_path):
                merge_config(self.config, self._read_file(local_path))
                self.logger.info(f"Applied local overrides from {local_path}")

        merge_config(self.config, self._env_overrides())

        errors = ConfigSchema.validate(self.config)
        if errors:
            for error in errors:
                self.logger.error(f"Configuration error: {error}")
            raise ConfigurationError("Invalid configuration", {'errors': errors})

    def _read_file(self, path: str) -> Dict[str, Any]:
        try:
            with open(path) as f:
                data = json.load(f) if path.endswith('.json') else yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            self.logger.error(f"Cannot read configuration {path}: {e}")
            raise ConfigurationError(f"Error loading config file {path}: {e}",
                                     {'path': path}) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping",
                                     {'path': path})
        self.logger.debug(f"Read configuration from {path}")
        return data

    def _env_overrides(self) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        for name, raw in os.environ.items():
            if not name.startswith(self.ENV_PREFIX):
                continue
            *parents, leaf = name[len(self.ENV_PREFIX):].lower().split("__")
            node = overrides
            for part in parents:
                node = node.setdefault(part, {})
            node[leaf] = parse_env_value(raw)
            self.logger.debug(f"Environment override {name}")
        return overrides

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a value by dotted key, e.g. 'classification.min_score'"""
        node: Any = self.config
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_classification_config(self) -> Dict[str, Any]:
        """Classification thresholds and flags"""
        return dict(self.config.get('classification', {}))

    def get_search_method(self) -> str:
        return self.get('search.method', DEFAULT_CONFIG['search']['method'])

