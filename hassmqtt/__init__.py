"""
Home Assistant MQTT entity library.
Devices, sensors, binary sensors and switches published through MQTT Discovery.
"""

from .constants import (
    SETTINGS_FILE,
    MQTT_DISCOVERY_PREFIX,
    DEFAULT_QOS,
    DEFAULT_STATE_RETENTION,
    PAYLOAD_AVAILABLE,
    PAYLOAD_NOT_AVAILABLE,
    PAYLOAD_ON,
    PAYLOAD_OFF,
)
from .errors import (
    HassMQTTError,
    DuplicateIdentifierError,
    ComponentNotFoundError,
    NoDataError,
    AnomalyRejectedError,
    UnknownCommandError,
    PublishTimeoutError,
    BrokerNotConnectedError,
)
from .broker import Broker, PublishHandle, publish_and_wait
from .component import Component
from .device import Device
from .sensor import Sensor
from .binary_sensor import BinarySensor
from .switch import Switch
from .mqtt_client import MQTTClient
from .settings import load_settings, save_settings, get_settings_path

__all__ = [
    'SETTINGS_FILE',
    'MQTT_DISCOVERY_PREFIX',
    'DEFAULT_QOS',
    'DEFAULT_STATE_RETENTION',
    'PAYLOAD_AVAILABLE',
    'PAYLOAD_NOT_AVAILABLE',
    'PAYLOAD_ON',
    'PAYLOAD_OFF',
    'HassMQTTError',
    'DuplicateIdentifierError',
    'ComponentNotFoundError',
    'NoDataError',
    'AnomalyRejectedError',
    'UnknownCommandError',
    'PublishTimeoutError',
    'BrokerNotConnectedError',
    'Broker',
    'PublishHandle',
    'publish_and_wait',
    'Component',
    'Device',
    'Sensor',
    'BinarySensor',
    'Switch',
    'MQTTClient',
    'load_settings',
    'save_settings',
    'get_settings_path',
]
