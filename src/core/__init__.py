"""
Riskmap Cards - Core Utilities
Central configuration and logging.
"""

from src.core.config import Settings, get_settings, settings
from src.core.logging import setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "setup_logging",
]
