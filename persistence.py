"""
Persistence layer for user config (default commission, lookback window)
Saves to JSON file so values persist across app refreshes
"""
import json
import logging
from typing import Dict

import config

logger = logging.getLogger(__name__)

# key -> (default value, description)
DEFAULT_CONFIG = {
    'default_commission': ('0.0', 'Commission applied to option rows with a blank Commission cell'),
    'lookback_months': ('12', 'Months shown on the monthly page when no range is selected'),
}


def load_settings() -> Dict:
    """Load user settings from JSON file"""
    if config.SETTINGS_PATH.exists():
        try:
            with open(config.SETTINGS_PATH, 'r') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not load settings: {e}")
            return {}
    return {}


def save_settings(settings: Dict):
    """Save user settings to JSON file"""
    config.SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(config.SETTINGS_PATH, 'w') as f:
        json.dump(settings, f, indent=2)
    logger.info(f"Settings saved to {config.SETTINGS_PATH}")


def get_all_config() -> Dict[str, Dict[str, str]]:
    """All config keys with current value and description, sorted by key"""
    settings = load_settings()
    return {
        key: {'value': str(settings.get(key, default)), 'description': description}
        for key, (default, description) in sorted(DEFAULT_CONFIG.items())
    }


def get_config_value(key: str, default: str = None) -> str:
    """Get a config value; falls back to the built-in default, then to `default`"""
    settings = load_settings()
    if key in settings:
        return str(settings[key])
    if key in DEFAULT_CONFIG:
        return DEFAULT_CONFIG[key][0]
    return default


def set_config_value(key: str, value: str) -> Dict[str, str]:
    """Update a known config key"""
    if key not in DEFAULT_CONFIG:
        raise KeyError(f"Unknown config key: {key}")
    settings = load_settings()
    settings[key] = str(value)
    save_settings(settings)
    return {'key': key, 'value': str(value), 'description': DEFAULT_CONFIG[key][1]}


def get_default_commission() -> float:
    try:
        return float(get_config_value('default_commission'))
    except (TypeError, ValueError):
        logger.warning("Invalid default_commission in settings, using 0.0")
        return 0.0


def get_lookback_months() -> int:
    try:
        months = int(get_config_value('lookback_months'))
    except (TypeError, ValueError):
        logger.warning("Invalid lookback_months in settings, using default")
        return config.DEFAULT_LOOKBACK_MONTHS
    return months if months > 0 else config.DEFAULT_LOOKBACK_MONTHS
