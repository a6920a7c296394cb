"""
Core module initialization.
Exports configuration and logging utilities.
"""

from tabletmenu.core.config import (
    get_settings,
    setup_logging,
    Settings,
    EnvironmentMode,
    CategoryDeletePolicy,
)

__all__ = [
    "get_settings",
    "setup_logging",
    "Settings",
    "EnvironmentMode",
    "CategoryDeletePolicy",
]
