"""
Tennis Ranking Backend Application Package.

This package contains the player roster and ranking service.
"""

from .core import get_global_settings, db_manager, get_db

__version__ = "1.0.0"

__all__ = [
    "get_global_settings",
    "db_manager",
    "get_db",
]
