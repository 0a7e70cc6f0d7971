# src/design_auditor/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and user paths.
    """

    # --- Package specific paths ---

    @staticmethod
    def get_package_root() -> Path:
        """
        Returns the absolute path of the 'design_auditor' package directory
        (where settings.json lives), for both source checkouts and installs.
        """
        return Path(__file__).resolve().parent.parent.parent

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_package_root() / "settings.json"

    # --- User specific paths ---

    @staticmethod
    def get_user_config_dir() -> Path:
        """
        Returns the path to the user's config directory.
        (e.g., ~/.design_auditor/)
        """
        return Path.home() / ".design_auditor"

    @staticmethod
    def get_user_settings_file() -> Path:
        """Optional per-user overrides, merged over the packaged settings.json."""
        return PathUtils.get_user_config_dir() / "settings.json"
