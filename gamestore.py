#!/usr/bin/env python3
"""
GameStore - game catalog service core helpers.
Logging setup and configuration loading shared by the server, the
database layer and the catalog import.
"""

import json
import logging
import os
from typing import Dict


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Configure the root GameStore logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to WARNING so normal use is quiet.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger('gamestore')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


# Module-level logger used throughout gamestore.py
logger = setup_logging()


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

ANDROID_CATALOG_URL = 'https://interview-marketing-eng-dev.s3.eu-west-1.amazonaws.com/android.top100.json'
IOS_CATALOG_URL = 'https://interview-marketing-eng-dev.s3.eu-west-1.amazonaws.com/ios.top100.json'

DEFAULT_CONFIG: Dict = {
    'android_catalog_url': ANDROID_CATALOG_URL,
    'ios_catalog_url': IOS_CATALOG_URL,
    'fetch_timeout': 10,
    'host': '127.0.0.1',
    'port': 3000,
    'log_level': 'INFO',
}

# config key -> (environment variable, converter)
_ENV_OVERRIDES = {
    'android_catalog_url': ('ANDROID_CATALOG_URL', str),
    'ios_catalog_url': ('IOS_CATALOG_URL', str),
    'fetch_timeout': ('FETCH_TIMEOUT', float),
    'host': ('GAMESTORE_HOST', str),
    'port': ('GAMESTORE_PORT', int),
    'log_level': ('GAMESTORE_LOG_LEVEL', str),
}


class ConfigError(Exception):
    """Raised when the config file or an override cannot be parsed."""


def load_config(config_path: str = 'config.json') -> Dict:
    """Load configuration from JSON file with environment variable support

    The file is optional; missing keys fall back to :data:`DEFAULT_CONFIG`.
    Environment variables take precedence over config file values:
    - ANDROID_CATALOG_URL overrides android_catalog_url
    - IOS_CATALOG_URL overrides ios_catalog_url
    - FETCH_TIMEOUT overrides fetch_timeout
    - GAMESTORE_HOST / GAMESTORE_PORT override host / port
    - GAMESTORE_LOG_LEVEL overrides log_level

    Raises:
        ConfigError: If the file is not valid JSON, is not an object, or an
            override cannot be converted.
    """
    config = dict(DEFAULT_CONFIG)

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Error parsing config file '{config_path}': {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file '{config_path}' must contain a JSON object")
        config.update(file_config)
    elif config_path:
        logger.debug("Config file %s not found, using defaults", config_path)

    for key, (env_var, convert) in _ENV_OVERRIDES.items():
        raw = os.getenv(env_var)
        if not raw:
            continue
        try:
            config[key] = convert(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {env_var}: {raw!r}") from e

    return config
