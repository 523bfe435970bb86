from __future__ import annotations

"""Central logging configuration for Arborea.

Import and call :func:`setup_logging` at application start-up.
"""

import copy
import logging
import logging.config
import os
from typing import Any, Dict, Optional

from arborea.config import ConfigManager

__all__ = ["setup_logging"]

_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging() -> None:
    """Configure logging from the packaged/user YAML config.

    The file handler is redirected to ``$ARBOREA_LOG_DIR/app.log``. The
    mapping cached by :class:`ConfigManager` is copied, never edited.
    """
    log_dir = os.environ.get("ARBOREA_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)

    try:
        logging_config = _resolve_config(os.path.join(log_dir, "app.log"))
        if logging_config is None:
            _setup_minimal_logging()
        else:
            logging.config.dictConfig(logging_config)
            logging.info("===== Logging initialised from config files =====")
    except (ValueError, TypeError, AttributeError, ImportError, OSError) as exc:
        # dictConfig raises these for unusable configurations
        _setup_minimal_logging()
        logging.error("Error loading logging config: %s", exc)

    _apply_debug_overrides()


def _resolve_config(log_file: str) -> Optional[Dict[str, Any]]:
    """Return a dictConfig-ready copy of the logging config, or None if unusable."""
    loaded = ConfigManager().get_logging_config()
    if not isinstance(loaded, dict) or not loaded.get("version"):
        return None

    resolved = copy.deepcopy(loaded)
    file_handler = resolved.get("handlers", {}).get("file")
    if isinstance(file_handler, dict):
        file_handler["filename"] = log_file
    return resolved


def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': _LOG_FORMAT,
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'INFO',
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.warning("===== Logging initialised with minimal fallback =====")


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    ARBOREA_DEBUG_MODULES=comma,separated,logger,names -> DEBUG for listed loggers
    """
    extra_modules = os.environ.get('ARBOREA_DEBUG_MODULES', '').strip()
    targets = [m.strip() for m in extra_modules.split(',') if m.strip()]
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        has_debug_handler = any(h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            h = logging.StreamHandler()
            h.setLevel(logging.DEBUG)
            h.setFormatter(logging.Formatter(_LOG_FORMAT))
            logger.addHandler(h)
        logger.info("Debug override active for logger '%s'", name)
