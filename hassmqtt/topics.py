"""
Identity, topic and discovery document derivation.

Pure functions shared by every entity type. An entity's composed identifier
is its own ident, prefixed with the owning device's ident when it has one.
"""

from typing import Optional, TYPE_CHECKING

from .constants import MQTT_DISCOVERY_PREFIX

if TYPE_CHECKING:
    from .device import Device


def compose_ident(ident: str, device: Optional["Device"]) -> str:
    """Get the composed identifier of an entity."""
    if device is None:
        return ident
    return f"{device.ident}_{ident}"


def compose_name(ident: str, name: str, device: Optional["Device"]) -> str:
    """Get the display name of an entity, prefixed by its device name."""
    display_name = name if name else ident
    if device is not None:
        return f"{device.name} {display_name}"
    return display_name


def base_topic(category: str, ident: str, device: Optional["Device"]) -> str:
    return f"{MQTT_DISCOVERY_PREFIX}/{category}/{compose_ident(ident, device)}"


def state_topic(category: str, ident: str, device: Optional["Device"]) -> str:
    return f"{base_topic(category, ident, device)}/state"


def discover_topic(category: str, ident: str, device: Optional["Device"]) -> str:
    return f"{base_topic(category, ident, device)}/config"


def command_topic(category: str, ident: str, device: Optional["Device"]) -> str:
    return f"{base_topic(category, ident, device)}/command"


def availability_topic(category: str, ident: str, device: Optional["Device"]) -> str:
    """
    Get the availability topic of an entity.

    Entities attached to a device share the device availability topic, so a
    single last will message marks the whole device offline.
    """
    if device is None:
        return f"{base_topic(category, ident, device)}/availability"
    return device.get_availability_topic()


def discovery_document(
    category: str,
    ident: str,
    name: str,
    device: Optional["Device"],
    **extra: str,
) -> dict:
    """
    Build the discovery document of an entity.

    Keys use Home Assistant's abbreviated names. Optional keys passed through
    ``extra`` (``icon``, ``dev_cla``, ``unit_of_meas``, ``command_topic``) are
    left out when empty, as is ``device`` for standalone entities.
    """
    document = {
        "unique_id": compose_ident(ident, device),
        "name": compose_name(ident, name, device),
        "stat_t": state_topic(category, ident, device),
        "avty_t": availability_topic(category, ident, device),
    }
    for key, value in extra.items():
        if value:
            document[key] = value
    if device is not None:
        document["device"] = device.get_device_info()
    return document
