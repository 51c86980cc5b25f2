"""
QualTrack Core - Shared services for all modules.

Usage:
    from qualtrack.core import get_db, get_config, get_logger, QT_PATHS
"""

from qualtrack.core.config import get_config, get_config_value, QT_PATHS
from qualtrack.core.db import get_db, migrate_all
from qualtrack.core.logging import get_logger

__all__ = [
    "get_config",
    "get_config_value",
    "QT_PATHS",
    "get_db",
    "migrate_all",
    "get_logger",
]
