#!/usr/bin/env python3
"""
Layered configuration for orthocds runs

Values are resolved in this order, later layers winning:

1. DEFAULT_CONFIG
2. the configuration file (YAML, or JSON when it ends in '.json')
3. '<name>.local<ext>' next to it, for site-specific tool paths
4. ORTHOCDS_<SECTION>__<KEY> environment variables

Problems are collected in ``errors`` rather than raised so that a command
can report all of them at once.
"""
import os
import copy
import json
import logging
from typing import Dict, Any, Optional, List

import yaml

from .schema import ConfigSchema
from .defaults import DEFAULT_CONFIG

TRUE_WORDS = ('true', 'yes', 'on', '1')
FALSE_WORDS = ('false', 'no', 'off', '0')


def local_config_path(config_path: str) -> str:
    """'conf/orthocds.yml' -> 'conf/orthocds.local.yml'"""
    stem, ext = os.path.splitext(config_path)
    return f"{stem}.local{ext}"


def merge_into(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    """Merge source into target; nested dicts merge, anything else replaces"""
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merge_into(current, value)
        else:
            target[key] = value


def coerce_env_value(value: str, like: Any = None) -> Any:
    """Convert an environment string to the type of the value it replaces

    Without a current value to go by, booleans, ints and floats are
    recognised and anything else stays a string.
    """
    lowered = value.strip().lower()
    if isinstance(like, bool):
        if lowered in TRUE_WORDS:
            return True
        if lowered in FALSE_WORDS:
            return False
        return value
    if isinstance(like, str):
        return value

    if lowered in ('true', 'yes'):
        return True
    if lowered in ('false', 'no'):
        return False
    for convert in (int, float):
        try:
            return convert(value)
        except ValueError:
            continue
    return value


class ConfigManager:
    """Loads, merges and validates the orthocds configuration"""

    ENV_PREFIX = "ORTHOCDS_"

    def __init__(self, config_path: Optional[str] = None):
        self.logger = logging.getLogger("orthocds.config")
        self.config_path = config_path
        self.config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self.errors: List[str] = []

        if config_path:
            if os.path.exists(config_path):
                self._merge_file(config_path)
                local_path = local_config_path(config_path)
                if os.path.exists(local_path):
                    self._merge_file(local_path)
            else:
                self.logger.warning(f"Configuration file not found: {config_path}; using defaults")

        self._merge_environment()
        self._validate()

    def _merge_file(self, path: str) -> None:
        try:
            with open(path, 'r') as f:
                if path.endswith('.json'):
                    loaded = json.load(f)
                else:
                    loaded = yaml.safe_load(f) or {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            message = f"Error loading config file {path}: {e}"
            self.errors.append(message)
            self.logger.error(message)
            return

        if not isinstance(loaded, dict):
            message = f"Error loading config file {path}: top level must be a mapping"
            self.errors.append(message)
            self.logger.error(message)
            return

        merge_into(self.config, loaded)
        self.logger.info(f"Loaded configuration from {path}")

    def _merge_environment(self) -> None:
        """Apply ORTHOCDS_SECTION__KEY=value overrides

        Example: ORTHOCDS_TARGETED__GAP_THRESHOLD=0.2 sets targeted.gap_threshold.
        """
        applied = 0
        for name, value in sorted(os.environ.items()):
            if not name.startswith(self.ENV_PREFIX):
                continue
            parts = name[len(self.ENV_PREFIX):].lower().split('__')
            section = self.config
            for part in parts[:-1]:
                section = section.setdefault(part, {})
                if not isinstance(section, dict):
                    break
            else:
                section[parts[-1]] = coerce_env_value(value, section.get(parts[-1]))
                applied += 1
                continue

            message = f"Ignoring {name}: {'.'.join(parts[:-1])} is not a configuration section"
            self.errors.append(message)
            self.logger.warning(message)

        if applied:
            self.logger.debug(f"Applied {applied} environment override(s)")

    def _validate(self) -> None:
        problems = ConfigSchema.validate(self.config)
        for problem in problems:
            self.logger.error(f"Configuration error: {problem}")
        self.errors.extend(problems)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a value by dotted key, e.g. 'targeted.gap_threshold'"""
        current: Any = self.config
        for part in key.split('.'):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, key: str, value: Any) -> None:
        """Set a value by dotted key, creating sections as needed"""
        *sections, leaf = key.split('.')
        current = self.config
        for part in sections:
            current = current.setdefault(part, {})
        current[leaf] = value

    def get_section(self, section: str) -> Dict[str, Any]:
        return self.config.get(section, {})

    def get_tool_path(self, tool_name: str, default: str = "") -> str:
        """Configured executable for a tool, e.g. get_tool_path('mafft')"""
        return self.get_section('tools').get(f"{tool_name}_path", default)
