"""
LOCUS - Location Utilities for Shipped resources
Configuration and Logging

Copyright (c) 2026 Kay Schäfer. All Rights Reserved.
Proprietary and confidential. See LICENSE for details.

Loads ``locus.yaml``, validates it against :data:`DEFAULT_CONFIG` and
configures the root logger with a rotating log file.
"""

import copy
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import yaml

from .locator import DEFAULT_ENV_VAR, DEFAULT_POSIX_SYSTEM_DIRS, DEFAULT_WINDOWS_SYSTEM_DIRS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "locus.yaml"

# ---------------------------------------------------------------------------
# Default configuration – used as fallback when keys are missing / invalid
# ---------------------------------------------------------------------------
DEFAULT_CONFIG: dict = {
    "search": {
        "env_var": DEFAULT_ENV_VAR,
        "provider": "auto",
        "system_dirs": {
            "windows": list(DEFAULT_WINDOWS_SYSTEM_DIRS),
            "posix": list(DEFAULT_POSIX_SYSTEM_DIRS),
        },
    },
    "logging": {
        "level": "WARNING",
        "file": "",
        "console": True,
    },
}


# ---------------------------------------------------------------------------
# Config helpers
# ---------------------------------------------------------------------------
def _deep_merge(defaults: dict, overrides: dict) -> dict:
    """Recursively merge *overrides* into *defaults* (non-destructive)."""
    merged = copy.deepcopy(defaults)
    for key, default_val in defaults.items():
        if key not in overrides:
            logger.debug("Config key '%s' missing, using default %r", key, default_val)
            continue
        override_val = overrides[key]
        if isinstance(default_val, dict) and isinstance(override_val, dict):
            merged[key] = _deep_merge(default_val, override_val)
        elif isinstance(default_val, dict) and not isinstance(override_val, dict):
            logger.warning(
                "Config key '%s' has wrong type (expected dict), using default", key
            )
        elif not _type_ok(default_val, override_val):
            logger.warning(
                "Config key '%s' has wrong type (expected %s, got %s), using default %r",
                key,
                type(default_val).__name__,
                type(override_val).__name__,
                default_val,
            )
        else:
            merged[key] = override_val
    # Carry forward extra keys from overrides that are not in defaults
    for key in overrides:
        if key not in defaults:
            merged[key] = overrides[key]
    return merged


def _type_ok(default, value) -> bool:
    """Return True when *value* is type-compatible with *default*."""
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, list):
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    if isinstance(default, str):
        return isinstance(value, str)
    return True  # unknown types pass through


def default_config_path() -> Optional[Path]:
    """Locate ``locus.yaml`` next to the application (or ``None``)."""
    from .locator import locate_path

    base = locate_path(CONFIG_FILENAME, "locus")
    if not base:
        return None
    return Path(base) / CONFIG_FILENAME


def load_config(path: Optional[str] = None) -> dict:
    """Load configuration from a YAML file with validation.

    Missing keys or wrong types fall back to ``DEFAULT_CONFIG``.
    If the file cannot be found or parsed the full defaults are returned.

    Args:
        path: Path to config file.  Defaults to ``locus.yaml`` found via
              :func:`default_config_path`.

    Returns:
        Validated configuration dictionary.
    """
    config_path = Path(path) if path else default_config_path()
    if config_path is None:
        logger.debug("No %s found – using defaults", CONFIG_FILENAME)
        return copy.deepcopy(DEFAULT_CONFIG)
    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        if not isinstance(raw, dict):
            logger.warning("Config file did not produce a dict – using defaults")
            return copy.deepcopy(DEFAULT_CONFIG)
        logger.info("Configuration loaded from %s", config_path)
        return _deep_merge(DEFAULT_CONFIG, raw)
    except FileNotFoundError:
        logger.warning("Config file not found: %s – using defaults", config_path)
        return copy.deepcopy(DEFAULT_CONFIG)
    except yaml.YAMLError as exc:
        logger.error("Error parsing config file: %s – using defaults", exc)
        return copy.deepcopy(DEFAULT_CONFIG)


def save_config(config: dict, path: str) -> None:
    """Write the configuration dictionary to a YAML file."""
    config_path = Path(path)
    try:
        with open(config_path, "w", encoding="utf-8") as fh:
            yaml.dump(config, fh, default_flow_style=False, sort_keys=False)
        logger.info("Configuration saved to %s", config_path)
    except OSError as exc:
        logger.error("Failed to save configuration: %s", exc)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
def setup_logging(config: dict, level: Optional[str] = None) -> None:
    """Configure the root logger with an optional RotatingFileHandler.

    Args:
        config: Validated configuration dictionary.
        level:  Overrides ``logging.level`` from *config* (e.g. ``"DEBUG"``).
    """
    log_cfg = config.get("logging", {})
    level_name = (level or log_cfg.get("level", "WARNING")).upper()
    log_level = getattr(logging, level_name, logging.WARNING)
    log_file = log_cfg.get("file")
    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    handlers: list = []
    if log_cfg.get("console", True):
        handlers.append(logging.StreamHandler())
    file_error = None
    if log_file:
        try:
            rotating = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=5 * 1024 * 1024,   # 5 MB
                backupCount=5,
            )
            handlers.append(rotating)
        except OSError as exc:
            file_error = exc

    logging.basicConfig(
        level=log_level,
        format=fmt,
        handlers=handlers or [logging.StreamHandler()],
        force=True,
    )
    if file_error is not None:
        logger.warning("Cannot open log file %s: %s – logging to console only", log_file, file_error)
