"""
Settings loader module for the bond comparison engine.
Provides centralized access to the configuration held in settings.yaml.
"""

import copy
import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

# Path to the settings file
# Always resolve relative to the project root (parent of core/)
_CORE_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _CORE_DIR.parent
SETTINGS_FILE = _PROJECT_ROOT / 'settings.yaml'

# Cache for loaded settings to avoid repeated file reads
_settings_cache = None
_cache_mtime = None

# Built-in defaults used when settings.yaml is absent or incomplete
DEFAULT_SETTINGS = {
    'app_config': {
        'log_level': 'INFO',
        'default_mode': 'natural',
    },
    'comparison_config': {
        'anchor_days': {
            'fundo-cetipado': 10,
            'default': 15,
        },
        'flat_tax_rate': 0.15,
        'regressive_table': [
            {'max_days': 180, 'rate': 0.225},
            {'max_days': 360, 'rate': 0.20},
            {'max_days': 720, 'rate': 0.175},
        ],
        'regressive_floor_rate': 0.15,
        'calculation_rules': {
            'cdb': {'indexed': {'convention': 'BUS/252', 'granularity': 'daily'}},
            'lci-lca': {'indexed': {'convention': 'BUS/252', 'granularity': 'daily'}},
            'cri-cra': {'indexed': {'convention': 'BUS/252', 'granularity': 'monthly'}},
            'debenture-incentivada': {'indexed': {'convention': 'BUS/252', 'granularity': 'monthly'}},
            'fundo-cetipado': {'indexed': {'convention': 'BUS/252', 'granularity': 'monthly'}},
            'tesouro-direto': {'indexed': {'convention': 'ACT/365', 'granularity': 'daily'}},
        },
    },
    'macro_projection': {
        'source': 'focus',
        'description': 'Focus median projections; the last year is held constant (terminal regime).',
        'reference': {2025: 15.0, 2026: 12.25, 2027: 10.5, 2028: 10.0},
        'inflation': {2025: 4.55, 2026: 4.20, 2027: 3.80, 2028: 3.50},
    },
}


def _merge(defaults, overrides):
    """Recursively overlay *overrides* on a copy of *defaults*."""
    merged = copy.deepcopy(defaults)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings():
    """
    Load settings from the YAML file with caching.
    Returns the full settings dictionary merged over the built-in defaults.
    """
    global _settings_cache, _cache_mtime

    settings_path = Path(SETTINGS_FILE)

    # Check if we need to reload (file changed or not cached)
    if settings_path.exists():
        current_mtime = settings_path.stat().st_mtime
        if _settings_cache is None or _cache_mtime != current_mtime:
            with open(settings_path, 'r') as f:
                raw = yaml.safe_load(f) or {}
            if not isinstance(raw, dict):
                raise ValueError(f"Settings file {settings_path} must contain a mapping")
            _settings_cache = _merge(DEFAULT_SETTINGS, raw)
            _cache_mtime = current_mtime
            logger.info(f"Loaded settings from {settings_path.name}")
        return _settings_cache

    logger.warning(f"Settings file {SETTINGS_FILE} not found, using defaults")
    return copy.deepcopy(DEFAULT_SETTINGS)


def get_app_config():
    """Get application configuration settings."""
    settings = load_settings()
    return settings.get('app_config', {})


def get_comparison_config():
    """Get comparison engine configuration (anchor days, rules, tax tables)."""
    settings = load_settings()
    return settings.get('comparison_config', {})


def get_anchor_days():
    """Get the category -> anchor day mapping."""
    return get_comparison_config().get('anchor_days', {})


def get_calculation_rules():
    """Get the category x rate kind -> day-count rules table."""
    return get_comparison_config().get('calculation_rules', {})


def get_flat_tax_rate():
    """Get the default rate for the flat tax regime."""
    return float(get_comparison_config().get('flat_tax_rate', 0.15))


def get_regressive_table():
    """Get the regressive withholding table as (max_days, rate) pairs, ascending."""
    config = get_comparison_config()
    rows = config.get('regressive_table', [])
    table = sorted((int(r['max_days']), float(r['rate'])) for r in rows)
    floor_rate = float(config.get('regressive_floor_rate', 0.15))
    return table, floor_rate


def get_macro_projection_settings():
    """Get the default macro projection scenario."""
    settings = load_settings()
    return settings.get('macro_projection', {})


def reload_settings():
    """Force reload of settings from disk."""
    global _settings_cache, _cache_mtime
    _settings_cache = None
    _cache_mtime = None
    logger.info("Settings cache cleared, will reload on next access")
