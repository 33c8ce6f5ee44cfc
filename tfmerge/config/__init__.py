"""Configuration package for tfmerge.

- ConfigKey: Enumeration of the keys the merge workflow reads.
- ConfigProvider: Lookup contract used by the workflow.
- ConfigManager: In-memory provider with typed defaults.
"""

from tfmerge.config.config_keys import ConfigKey
from tfmerge.config.config_manager import ConfigManager, ConfigProvider

__all__ = ["ConfigKey", "ConfigManager", "ConfigProvider"]
