# Purpose: This file defines configuration variables for the bond comparison engine.
# It centralizes the logging configuration and presentation constants so they
# can be adjusted without modifying the calculation code.

"""
Configuration settings for the bond comparison engine.
"""

import logging.config
import os
from typing import Dict, List, Optional

from core.settings_loader import get_app_config

# Colours used by the workbook export for the two assets
COLOR_PALETTE: List[str] = ["366092", "C0504D"]

# Logging configuration (applied by the CLI through dictConfig)
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {
            "level": "INFO",
            "formatter": "standard",
            "class": "logging.StreamHandler",
        },
    },
    "loggers": {
        "": {  # root logger
            "handlers": ["console"],
            "level": "INFO",
            "propagate": True,
        },
        "bond_comparison.cashflows": {  # per-coupon detail is DEBUG only
            "level": "INFO",
            "propagate": True,
        },
    },
}


def build_logging_config(level: Optional[str] = None, log_file: Optional[str] = None) -> Dict:
    """Return a copy of LOGGING_CONFIG with the level and optional file handler applied.

    The level defaults to ``app_config.log_level`` from settings.yaml.
    """
    level = (level or get_app_config().get("log_level", "INFO")).upper()
    config = {
        **LOGGING_CONFIG,
        "handlers": {name: dict(h) for name, h in LOGGING_CONFIG["handlers"].items()},
        "loggers": {name: dict(lg) for name, lg in LOGGING_CONFIG["loggers"].items()},
    }
    config["handlers"]["console"]["level"] = level
    config["loggers"][""]["level"] = "DEBUG" if log_file else level
    config["loggers"]["bond_comparison.cashflows"]["level"] = "DEBUG" if log_file else level
    if log_file:
        config["handlers"]["file"] = {
            "level": "DEBUG",
            "formatter": "standard",
            "class": "logging.FileHandler",
            "filename": log_file,
            "mode": "a",  # Append mode
        }
        config["loggers"][""]["handlers"] = ["console", "file"]
    return config


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Apply the logging configuration to the root logger."""
    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
    logging.config.dictConfig(build_logging_config(level, log_file))
