"""
Binary sensor module.
"""

import json
import logging
import threading
import weakref
from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from .broker import Broker, publish_and_wait
from .constants import CATEGORY_BINARY_SENSOR, PAYLOAD_OFF, PAYLOAD_ON
from . import topics

if TYPE_CHECKING:
    from .device import Device

logger = logging.getLogger(__name__)


class BinarySensor:
    """Home Assistant binary sensor reporting ON/OFF."""

    category = CATEGORY_BINARY_SENSOR

    def __init__(self, ident: str, name: str = "", device_class: str = "", icon: str = ""):
        self.ident = ident
        self.name = name
        self.device_class = device_class
        self.icon = icon
        self._state = False
        self._last_update: Optional[datetime] = None
        self._device_ref: Optional[weakref.ref] = None
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"BinarySensor(ident={self.get_ident()!r}, state={self._state})"

    @property
    def state(self) -> bool:
        return self._state

    @property
    def last_update(self) -> Optional[datetime]:
        return self._last_update

    def set_state(self, state: bool) -> None:
        with self._lock:
            self._state = bool(state)
            self._last_update = datetime.now(timezone.utc)

    def get_device(self) -> Optional["Device"]:
        return self._device_ref() if self._device_ref is not None else None

    def set_device(self, device: Optional["Device"]) -> None:
        self._device_ref = weakref.ref(device) if device is not None else None

    def get_name(self) -> str:
        return topics.compose_name(self.ident, self.name, self.get_device())

    def get_ident(self) -> str:
        return topics.compose_ident(self.ident, self.get_device())

    def get_base_topic(self) -> str:
        return topics.base_topic(self.category, self.ident, self.get_device())

    def get_state_topic(self) -> str:
        return topics.state_topic(self.category, self.ident, self.get_device())

    def get_availability_topic(self) -> str:
        return topics.availability_topic(self.category, self.ident, self.get_device())

    def get_discover_topic(self) -> str:
        return topics.discover_topic(self.category, self.ident, self.get_device())

    def get_discover_payload(self) -> str:
        return json.dumps(topics.discovery_document(
            self.category,
            self.ident,
            self.name,
            self.get_device(),
            icon=self.icon,
            dev_cla=self.device_class,
        ))

    def publish_state(self, broker: Broker, timeout: Optional[float] = None) -> None:
        with self._lock:
            payload = PAYLOAD_ON if self._state else PAYLOAD_OFF
        publish_and_wait(broker, self.get_state_topic(), payload, retain=False, timeout=timeout)

    def publish_discover(self, broker: Broker, timeout: Optional[float] = None) -> None:
        payload = self.get_discover_payload()
        logger.info(f"Publishing binary sensor {self.get_name()} discovery to {self.get_discover_topic()}")
        logger.debug(payload)
        publish_and_wait(broker, self.get_discover_topic(), payload, retain=True, timeout=timeout)
