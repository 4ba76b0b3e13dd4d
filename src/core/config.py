# core/config.py
from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass

from core.itunes_client import DEFAULT_BASE_URL, normalize_base_url

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


@dataclass(frozen=True)
class Config:
    itunes_base_url: str = DEFAULT_BASE_URL
    itunes_country: str = "US"
    artwork_size: int = 600
    request_timeout_s: float = 15.0
    rotation_interval_ms: int = 3000
    user_agent: str = "pymetaget/0.1"
    metadata_file_name: str = "songMetadata.json"
    library_file_name: str = "library.json"


def _checked(value, default):
    """Return `value` converted to the type of `default`, or None if it does not fit."""
    if isinstance(default, str):
        return value if isinstance(value, str) else None
    # bool is an int subclass; "true" is never a size or a timeout
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(default, int) and not isinstance(value, int):
        return None
    if value <= 0:
        return None
    return type(default)(value)


def load_config(app_data_dir: str) -> Config:
    """
    Read optional overrides from <app_data_dir>/config.json.
    Unknown keys are ignored, and so are values that do not match the type
    of the default (numbers must be positive). An unreadable file falls back
    to defaults.
    """
    path = os.path.join(app_data_dir, CONFIG_FILE_NAME)
    if not os.path.exists(path):
        return Config()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError("config must be a JSON object")
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return Config()

    defaults = Config()
    overrides = {}
    for f in dataclasses.fields(Config):
        if f.name not in raw:
            continue
        value = _checked(raw[f.name], getattr(defaults, f.name))
        if value is None:
            logger.warning("Ignoring config %s=%r in %s (default %r)",
                           f.name, raw[f.name], path, getattr(defaults, f.name))
            continue
        overrides[f.name] = value

    cfg = Config(**overrides)
    return dataclasses.replace(cfg, itunes_base_url=normalize_base_url(cfg.itunes_base_url))
