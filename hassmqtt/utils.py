"""
Utility functions for the Home Assistant MQTT entity library.
"""

import socket


def get_default_hostname() -> str:
    """Get the machine hostname, defaulting to 'hassmqtt' if unavailable."""
    try:
        hostname = socket.gethostname()
        return hostname if hostname else "hassmqtt"
    except OSError:
        return "hassmqtt"


def sanitize_identifier(name: str) -> str:
    """Sanitize a string to be used as an identifier (lowercase, underscores)."""
    return name.lower().replace(" ", "_").replace("-", "_").replace(".", "_")


def get_default_client_id() -> str:
    """Build an MQTT client id from the hostname."""
    return f"hassmqtt_{sanitize_identifier(get_default_hostname())}"
