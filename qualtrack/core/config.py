"""
Configuration management for QualTrack.

Loads config.yaml and provides type-safe access to settings.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

# Config file lives inside the qualtrack package
_PACKAGE_DIR = Path(__file__).parent.parent.resolve()
CONFIG_PATH = _PACKAGE_DIR / "config.yaml"

# Cache for loaded config
_config_cache: Optional[Dict[str, Any]] = None


def get_config(reload: bool = False) -> Dict[str, Any]:
    """
    Load configuration from config.yaml.

    Args:
        reload: Force reload even if cached

    Returns:
        Configuration dictionary
    """
    global _config_cache

    if _config_cache is not None and not reload:
        return _config_cache

    if not CONFIG_PATH.exists():
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        _config_cache = yaml.safe_load(f) or {}

    return _config_cache


def get_config_value(*keys: str, default: Any = None) -> Any:
    """
    Get a nested config value safely.

    Args:
        *keys: Path of keys to traverse (e.g., 'destinations', 'database')
        default: Value to return if key not found

    Example:
        max_len = get_config_value("qualifications", "name_max_length", default=100)
    """
    config = get_config()

    for key in keys:
        if isinstance(config, dict) and key in config:
            config = config[key]
        else:
            return default

    return config


def _resolve(raw: str) -> Path:
    path = Path(raw)
    if not path.is_absolute():
        path = _PACKAGE_DIR / path
    return path


class QualTrackPaths:
    """
    Centralized path access.

    Paths come from config.yaml; QUALTRACK_DB overrides the database path.

    Usage:
        from qualtrack.core.config import QT_PATHS
        db = QT_PATHS.database
    """

    def __init__(self):
        self._config = None

    def _ensure_config(self):
        if self._config is None:
            self._config = get_config()

    @property
    def database(self) -> Path:
        env_db = os.environ.get("QUALTRACK_DB")
        if env_db:
            return _resolve(env_db)
        self._ensure_config()
        return _resolve(
            self._config.get("destinations", {}).get("database", "data/qualtrack.db")
        )


# Singleton instance
QT_PATHS = QualTrackPaths()
