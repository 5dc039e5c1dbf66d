"""
context.py -- Configuration and tool factory shared by one orthocds command
"""
import logging
from typing import Any, Dict, Optional

from orthocds.config import ConfigManager
from orthocds.tools.factory import ToolFactory


class ApplicationContext:
    """What a pipeline needs from its surroundings

    The tool factory reads the live configuration dict, so values changed
    through update_config apply to tools created afterwards.
    """

    def __init__(self, config_path: Optional[str] = None,
                 config_manager: Optional[ConfigManager] = None):
        """
        Args:
            config_path: Configuration file, used when no manager is given
            config_manager: Already loaded configuration
        """
        self.logger = logging.getLogger("orthocds.context")
        self.config_manager = config_manager or ConfigManager(config_path)
        self.tools = ToolFactory(self.config_manager.config)

    @property
    def config(self) -> Dict[str, Any]:
        return self.config_manager.config

    def update_config(self, section: str, key: str, value: Any) -> None:
        """Set one value, e.g. update_config('targeted', 'keep_intermediates', True)"""
        self.config.setdefault(section, {})[key] = value
        self.logger.debug(f"Config override {section}.{key} = {value!r}")
