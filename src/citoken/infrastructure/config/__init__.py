"""
Infrastructure Config Package.
Loads and validates the project configuration file.
"""

from citoken.infrastructure.config.manager import ConfigManager
from citoken.infrastructure.config.repository import ConfigRepository

__all__ = ["ConfigManager", "ConfigRepository"]
