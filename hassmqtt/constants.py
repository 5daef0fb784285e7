"""
Constants used throughout the Home Assistant MQTT entity library.
"""

# Settings
SETTINGS_FILE = "settings.json"

# MQTT Configuration
MQTT_DISCOVERY_PREFIX = "homeassistant"
DEVICE_TOPIC_PREFIX = "device"
DEFAULT_MQTT_PORT = 1883
DEFAULT_KEEPALIVE = 60
DEFAULT_QOS = 0

# Entity categories, used as the second segment of the discovery topic
CATEGORY_SENSOR = "sensor"
CATEGORY_BINARY_SENSOR = "binary_sensor"
CATEGORY_SWITCH = "switch"

# Payloads
PAYLOAD_AVAILABLE = "online"
PAYLOAD_NOT_AVAILABLE = "offline"
PAYLOAD_ON = "ON"
PAYLOAD_OFF = "OFF"

# Sensor history
DEFAULT_STATE_RETENTION = 10
MOVING_AVERAGE_WINDOW = 5  # Always the 5 most recent states, regardless of retention
DEFAULT_ANOMALY_THRESHOLD = 0.1  # Relative change that gets a new state rejected
