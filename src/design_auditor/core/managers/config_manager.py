# src/design_auditor/core/managers/config_manager.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from design_auditor.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

_TRUE_STRINGS = ("1", "true", "yes", "on")


class ConfigManager:
    """
    Process-wide holder of the auditor settings.

    The packaged settings.json is the baseline; ~/.design_auditor/settings.json,
    when present, is merged over it key by key. Values can be changed in
    memory with `set_nested`; `reset` goes back to what is on disk.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance.reset()
            cls._instance = instance
            logger.debug("ConfigManager initialized.")
        return cls._instance

    def get_all(self) -> Dict[str, Any]:
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Looks up a dotted path such as 'analysis.batch_workers'.
        Missing keys, None values and paths through non-dicts give `default`.
        """
        node: Any = self._config
        for key in key_path.split('.'):
            if not isinstance(node, dict):
                return default
            node = node.get(key)
        return default if node is None else node

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a dotted path in memory, creating intermediate sections.

        When the key already holds a scalar, the new value is converted to
        that scalar's type ('20' -> 20, 'false' -> False).

        Returns:
            False if the path runs through a non-dict value, True otherwise.
        """
        *parents, leaf = key_path.split('.')
        section = self._section(parents)
        if section is None:
            logger.error("Cannot set '%s': part of the path is not a section.", key_path)
            return False

        current = section.get(leaf)
        if current is not None and not isinstance(current, dict):
            try:
                value = _cast_like(current, value)
            except (ValueError, TypeError):
                logger.warning("Could not convert value for '%s' to %s. Storing as given.",
                               key_path, type(current).__name__)

        section[leaf] = value
        logger.info("Configuration updated: %s = %s", key_path, value)
        return True

    def reset(self):
        """Reloads the packaged settings and re-applies the user overrides."""
        self._config = _read_json(PathUtils.get_settings_file(), required=True)

        overrides = _read_json(PathUtils.get_user_settings_file(), required=False)
        if overrides:
            _deep_merge(self._config, overrides)
            logger.info("Applied user configuration overrides.")

    def _section(self, keys: List[str]) -> Optional[Dict[str, Any]]:
        """Walks (and creates) the dicts along `keys`; None if a non-dict is in the way."""
        section = self._config
        for key in keys:
            section = section.setdefault(key, {})
            if not isinstance(section, dict):
                return None
        return section


def _read_json(path: Path, required: bool) -> Dict[str, Any]:
    if not path.exists():
        if required:
            logger.warning("settings.json not found at %s. Using empty config.", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load %s: %s", path, e, exc_info=True)
        return {}

    if not isinstance(data, dict):
        logger.error("Configuration file %s does not contain a JSON object.", path)
        return {}

    logger.debug("Configuration loaded from %s.", path)
    return data


def _cast_like(current: Any, value: Any) -> Any:
    if isinstance(current, bool):
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)
    return type(current)(value)


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


# The global singleton instance that the entire package will use.
config_manager = ConfigManager()
