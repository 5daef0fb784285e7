"""
Settings module.
Loads and saves broker connection settings from a JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Union

from .constants import DEFAULT_KEEPALIVE, DEFAULT_MQTT_PORT, SETTINGS_FILE
from .utils import get_default_client_id

logger = logging.getLogger(__name__)


def get_default_settings() -> dict:
    """Get default settings."""
    return {
        "mqtt_host": "",
        "mqtt_port": DEFAULT_MQTT_PORT,
        "mqtt_username": "",
        "mqtt_password": "",
        "client_id": get_default_client_id(),
        "keepalive": DEFAULT_KEEPALIVE,
        "will_topic": "",
    }


def get_settings_path(directory: Union[str, Path]) -> Path:
    """Get the path to the settings file in a directory."""
    return Path(directory) / SETTINGS_FILE


def load_settings(path: Union[str, Path]) -> dict:
    """
    Load settings from file.

    Keys missing from the file are filled with defaults. A missing or
    unreadable file yields the defaults.
    """
    settings = get_default_settings()
    settings_path = Path(path)
    if not settings_path.exists():
        return settings
    try:
        with open(settings_path, "r") as f:
            loaded = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error loading settings: {e}")
        return settings
    if not isinstance(loaded, dict):
        logger.error(f"Error loading settings: expected an object in {settings_path}")
        return settings
    settings.update(loaded)
    logger.info("Settings loaded successfully")
    return settings


def save_settings(path: Union[str, Path], settings: dict):
    """Save settings to file."""
    settings_path = Path(path)
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    with open(settings_path, "w") as f:
        json.dump(settings, f, indent=2)
    logger.info("Settings saved successfully")
