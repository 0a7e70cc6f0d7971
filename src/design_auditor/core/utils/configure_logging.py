# src/design_auditor/core/utils/configure_logging.py
import logging
import sys
from typing import Mapping, Optional, Union

from tqdm import tqdm

from design_auditor.core.managers.config_manager import config_manager

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"

Level = Union[str, int]


class LogWithTqdm(logging.Handler):
    """
    Logging handler that prints through `tqdm.write()`, so log lines emitted
    by worker threads land above an active batch progress bar instead of
    breaking it.
    """
    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=sys.stderr)
            self.flush()
        except Exception:
            self.handleError(record)


def _to_level(level: Level, fallback: int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), fallback)
    return level


def _apply_levels(levels: Optional[Mapping[str, Level]], fallback: int) -> None:
    for name, level in (levels or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, fallback))


def configure_logger(
        general_level: Level = "INFO",
        module_specific_levels: Optional[Mapping[str, Level]] = None,
        silenced_loggers: Optional[Mapping[str, Level]] = None
) -> None:
    """
    Replaces the root handlers with a single tqdm-aware handler.

    Args:
        general_level: Root level, as a name ('DEBUG') or a number.
        module_specific_levels: Per-logger overrides, e.g. {'design_auditor.engine': 'DEBUG'}.
        silenced_loggers: Loggers to muzzle; unknown level names fall back to CRITICAL.
    """
    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(general_level, logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    _apply_levels(module_specific_levels, logging.INFO)
    _apply_levels(silenced_loggers, logging.CRITICAL)


def configure_from_settings() -> None:
    """
    Configures logging from the 'debug' section of settings.json.

    The library never calls this itself; the embedding application does,
    once, from its entry point (before starting a batch with a progress bar).
    """
    configure_logger(
        general_level=config_manager.get_nested("debug.level", "INFO"),
        module_specific_levels=config_manager.get_nested("debug.module_levels", {}),
        silenced_loggers=config_manager.get_nested("debug.silenced_loggers", {}),
    )
