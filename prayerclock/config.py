"""User settings stored as JSON in the home directory."""

import json
import logging
import os

from prayerclock.prayer_api import DEFAULT_METHOD

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "city": "Jakarta",
    "country": "Indonesia",
    "method": DEFAULT_METHOD,
    "notifications": True,
}

_SETTING_TYPES = {
    "city": str,
    "country": str,
    "method": int,
    "notifications": bool,
}

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".prayerclock")
CONFIG_FILE = os.path.join(CONFIG_DIR, "settings.json")


def load_settings() -> dict:
    """
    Load saved settings merged over DEFAULT_SETTINGS.

    Unknown keys are ignored and values of the wrong type fall back to the
    default, so a hand-edited file never breaks startup.
    """
    settings = dict(DEFAULT_SETTINGS)
    if not os.path.isfile(CONFIG_FILE):
        return settings
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", CONFIG_FILE, exc)
        return settings
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", CONFIG_FILE)
        return settings

    for key, expected in _SETTING_TYPES.items():
        if key not in data:
            continue
        value = data[key]
        # bool is an int subclass; keep them apart
        if isinstance(value, expected) and (expected is bool or not isinstance(value, bool)):
            settings[key] = value
        else:
            logger.warning("Ignoring setting %s=%r, expected %s", key, value, expected.__name__)
    return settings


def save_settings(settings: dict) -> None:
    """Save settings to the config file."""
    os.makedirs(CONFIG_DIR, exist_ok=True)
    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
    logger.info("Saved settings to %s", CONFIG_FILE)


def clear_settings() -> None:
    """Remove the saved settings file."""
    if os.path.isfile(CONFIG_FILE):
        os.remove(CONFIG_FILE)
