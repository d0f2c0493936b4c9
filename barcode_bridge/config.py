"""
Управление конфигурацией barcode_bridge.

Defaults used by ``encode`` when the caller leaves a field unset, optionally
overridden by a JSON file. Configuration is read-only at call time: it is
loaded once when the package is imported and copied for every caller.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Final, Optional

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_CONFIG",
    "CONFIG_ENV_VAR",
    "load_config",
    "get_config",
]

CONFIG_ENV_VAR: Final[str] = "BARCODE_BRIDGE_CONFIG"
DEFAULT_CONFIG_FILENAME: Final[str] = "barcode_bridge.json"

# Значения конфигурации по умолчанию
DEFAULT_CONFIG: Final[Dict[str, Any]] = {
    "default_format": "qrcode",
    "default_width": 200,
    "default_height": 200,
    "default_margin": 0,
    "image_format": "PNG",
    "log_level": "INFO",
}

_active_config: Optional[Dict[str, Any]] = None


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from a JSON file merged over ``DEFAULT_CONFIG``.

    Keys:
        - default_format: str - format used when ``barcode_format`` is unset
        - default_width: int - output width when ``width`` is unset
        - default_height: int - output height for non-square symbologies
        - default_margin: int - quiet zone (modules) when ``margin`` is unset
        - image_format: str - Pillow format name used without ``output_file``
        - log_level: str - informational; the level itself comes from the
          ``BARCODE_BRIDGE_LOG_LEVEL`` environment variable

    Args:
        config_path: Explicit file. If None, ``$BARCODE_BRIDGE_CONFIG`` or
            ``barcode_bridge.json`` in the current directory is used.

    Returns:
        New dict that always contains every default key. A missing,
        unreadable or malformed file is logged and the defaults are returned.
    """
    if config_path is None:
        config_path = Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILENAME))

    config = dict(DEFAULT_CONFIG)

    if not config_path.exists():
        logger.debug("Config file %s not found, using defaults", config_path)
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = json.load(f)

        if not isinstance(user_config, dict):
            raise ValueError(
                f"config file must contain a JSON object, got {type(user_config).__name__}"
            )

        config.update(user_config)
        logger.info("Configuration loaded from %s", config_path)
        logger.debug("Configuration: %s", config)
    except json.JSONDecodeError as e:
        logger.warning(
            "Could not parse %s: invalid JSON at line %d, column %d. Using defaults.",
            config_path,
            e.lineno,
            e.colno,
        )
        config = dict(DEFAULT_CONFIG)
    except OSError as e:
        logger.warning("Could not read %s: %s. Using defaults.", config_path, e)
        config = dict(DEFAULT_CONFIG)
    except ValueError as e:
        logger.warning("Invalid configuration format: %s. Using defaults.", e)
        config = dict(DEFAULT_CONFIG)

    return config


def get_config() -> Dict[str, Any]:
    """Return a copy of the configuration loaded at import (defaults if none)."""
    global _active_config
    if _active_config is None:
        _active_config = load_config()
    return dict(_active_config)
