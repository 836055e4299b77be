"""
Constants for the Retroplan application.

Note: These constants serve as default fallback values.
Actual values are loaded from .retroplan/config.json at runtime via ConfigManager.
"""
import json
import os
from pathlib import Path
from typing import Any, Optional

# =============================================================================
# Default Fallback Values
# These are used if config.json doesn't exist or doesn't specify a value.
# =============================================================================

# Timeline geometry defaults
DEFAULT_BASE_DAY_WIDTH = 30.0  # pixels per day at zoom 1.0
DEFAULT_ZOOM = 1.0
ZOOM_MIN = 0.4
ZOOM_MAX = 2.0
ZOOM_STEP = 0.2
DEFAULT_EDGE_HANDLE_WIDTH = 2.0  # pixels, resize handle on each bar edge

# Gesture defaults
DEFAULT_DRAG_THRESHOLD_PX = 5.0  # pointer travel that turns a click into a drag

# Plan range padding (not configurable)
RANGE_PAD_BEFORE_DAYS = 7
RANGE_PAD_AFTER_DAYS = 14
EMPTY_PLAN_SPAN_MONTHS = 3
DISPLAY_WINDOW_YEARS = 1

# Storage defaults
DEFAULT_STORAGE_BACKEND = "local"
VALID_STORAGE_BACKENDS = ["local", "remote"]
DEFAULT_DATA_DIR = ".retroplan"
DEFAULT_PLANS_FILENAME = "plans.json"
DEFAULT_DATABASE_URL = "sqlite:///retroplan.db"
DATABASE_URL_ENV = "RETROPLAN_DATABASE_URL"

# Labels
GENERAL_GROUP_LABEL = "General"
IMPORTED_PREFIX = "(Imported) "
COPY_SUFFIX = " (Copy)"

# Validation error messages (not configurable)
VALIDATION_DATE_ORDER = "Start date must be before or equal to End date."
VALIDATION_HOLIDAY_NAME_REQUIRED = "Holiday name is required."
VALIDATION_SUBPROJECT_NAME_REQUIRED = "Sub-project name is required."

# Date format defaults
DEFAULT_DATE_FORMATS = [
    "%Y-%m-%d",      # YYYY-MM-DD (ISO 8601, canonical)
    "%Y/%m/%d",      # YYYY/MM/DD
    "%d/%m/%Y",      # DD/MM/YYYY
    "%d-%m-%Y",      # DD-MM-YYYY
    "%Y%m%d",        # YYYYMMDD
    "%d %B %Y",      # DD Month YYYY (e.g., 31 December 2025)
    "%d %b %Y",      # DD Mon YYYY (e.g., 31 Dec 2025)
]
DATE_FORMATS = DEFAULT_DATE_FORMATS
DATE_FORMAT_ERROR = (
    "Invalid date format. Supported formats: YYYY-MM-DD, YYYY/MM/DD, DD/MM/YYYY, "
    "DD-MM-YYYY, YYYYMMDD, 'DD Month YYYY'. Examples: 2025-12-31, 31/12/2025."
)

MONTH_NAMES = [
    "Janvier", "Février", "Mars", "Avril", "Mai", "Juin",
    "Juillet", "Août", "Septembre", "Octobre", "Novembre", "Décembre",
]


# =============================================================================
# Config Loader
# Load values from .retroplan/config.json at runtime.
# =============================================================================

_config_manager_instance: Optional['ConfigManager'] = None


class ConfigManager:
    """
    Manages loading configuration from a config.json file with fallback to defaults.

    Usage:
        # With default path (.retroplan/config.json)
        config = ConfigManager()
        day_width = config.get_float('base_day_width', DEFAULT_BASE_DAY_WIDTH)

        # With custom path
        config = ConfigManager(config_path=Path("/custom/path/config.json"))
        backend = config.get_str('storage_backend', DEFAULT_STORAGE_BACKEND)
    """

    def __init__(self, config_path: Optional[Path] = None, data_dir: Optional[Path] = None) -> None:
        """
        Initialize ConfigManager.

        Args:
            config_path: Direct path to config.json file. Takes precedence over data_dir.
            data_dir: Path to .retroplan/ directory. Config path will be data_dir/config.json.
        """
        self._config: Optional[dict] = None

        if config_path is not None:
            self._config_path = config_path
        elif data_dir is not None:
            self._config_path = data_dir / "config.json"
        else:
            self._config_path = Path(DEFAULT_DATA_DIR) / "config.json"

    def _load_config(self) -> dict:
        """Load config from config.json file."""
        if self._config is not None:
            return self._config

        if self._config_path.exists():
            try:
                with open(self._config_path, "r") as f:
                    self._config = json.load(f)
            except (json.JSONDecodeError, IOError):
                self._config = {}
        else:
            self._config = {}

        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value with fallback to default.

        Args:
            key: Configuration key name.
            default: Default value if key not found.

        Returns:
            Config value or default.
        """
        config = self._load_config()
        return config.get(key, default)

    def get_int(self, key: str, default: int) -> int:
        """Get an integer config value with fallback."""
        value = self.get(key, default)
        return int(value) if value is not None else default

    def get_float(self, key: str, default: float) -> float:
        """Get a float config value with fallback."""
        value = self.get(key, default)
        return float(value) if value is not None else default

    def get_str(self, key: str, default: str) -> str:
        """Get a string config value with fallback."""
        value = self.get(key, default)
        return str(value) if value is not None else default

    def reload(self) -> dict:
        """Force reload of config from disk."""
        self._config = None
        return self._load_config()

    @property
    def config_path(self) -> Path:
        """Get the config file path."""
        return self._config_path


def get_config_manager(reset: bool = False) -> ConfigManager:
    """
    Get the singleton ConfigManager instance with default path.

    Args:
        reset: If True, reset the singleton and create a new instance.

    Returns:
        ConfigManager singleton instance.
    """
    global _config_manager_instance
    if _config_manager_instance is None or reset:
        _config_manager_instance = ConfigManager()
    return _config_manager_instance


def reset_config_manager() -> None:
    """Reset the singleton ConfigManager instance (useful for testing)."""
    global _config_manager_instance
    _config_manager_instance = None


# Convenience functions for common config access
def get_base_day_width(config: Optional[ConfigManager] = None) -> float:
    """Get the base day width in pixels from config or default."""
    config = config or get_config_manager()
    return config.get_float('base_day_width', DEFAULT_BASE_DAY_WIDTH)


def get_edge_handle_width(config: Optional[ConfigManager] = None) -> float:
    """Get the resize handle width in pixels from config or default."""
    config = config or get_config_manager()
    return config.get_float('edge_handle_width', DEFAULT_EDGE_HANDLE_WIDTH)


def get_drag_threshold(config: Optional[ConfigManager] = None) -> float:
    """Get the click-versus-drag pixel threshold from config or default."""
    config = config or get_config_manager()
    return config.get_float('drag_threshold_px', DEFAULT_DRAG_THRESHOLD_PX)


def get_storage_backend(config: Optional[ConfigManager] = None) -> str:
    """Get the storage backend name ("local" or "remote") from config or default."""
    config = config or get_config_manager()
    return config.get_str('storage_backend', DEFAULT_STORAGE_BACKEND)


def get_database_url(config: Optional[ConfigManager] = None) -> str:
    """Get the remote database URL. The environment variable wins over config."""
    env_value = os.environ.get(DATABASE_URL_ENV)
    if env_value:
        return env_value
    config = config or get_config_manager()
    return config.get_str('database_url', DEFAULT_DATABASE_URL)
