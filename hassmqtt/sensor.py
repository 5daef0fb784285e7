"""
Sensor module.
Numeric Home Assistant sensor with a bounded state history and a moving
average based anomaly guard.
"""

import json
import logging
import threading
import weakref
from collections import deque
from datetime import datetime, timezone
from typing import List, Optional, TYPE_CHECKING

from .broker import Broker, publish_and_wait
from .constants import (
    CATEGORY_SENSOR,
    DEFAULT_ANOMALY_THRESHOLD,
    DEFAULT_STATE_RETENTION,
    MOVING_AVERAGE_WINDOW,
)
from .errors import AnomalyRejectedError, NoDataError
from . import topics

if TYPE_CHECKING:
    from .device import Device

logger = logging.getLogger(__name__)


class Sensor:
    """Home Assistant sensor reporting a continuous numeric value."""

    category = CATEGORY_SENSOR

    def __init__(
        self,
        ident: str,
        name: str = "",
        device_class: str = "",
        icon: str = "",
        unit_of_measurement: str = "",
        anomaly_detect: bool = False,
        anomaly_threshold: float = DEFAULT_ANOMALY_THRESHOLD,
        state_retention: int = DEFAULT_STATE_RETENTION,
    ):
        if state_retention < 1:
            raise ValueError(f"state_retention must be at least 1, got {state_retention}")
        self.ident = ident
        self.name = name
        self.device_class = device_class
        self.icon = icon
        self.unit_of_measurement = unit_of_measurement
        self.anomaly_detect = anomaly_detect
        self.anomaly_threshold = anomaly_threshold
        self.state_retention = state_retention
        self._states = deque(maxlen=state_retention)
        self._state = 0.0
        self._last_update: Optional[datetime] = None
        self._device_ref: Optional[weakref.ref] = None
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Sensor(ident={self.get_ident()!r}, state={self._state})"

    @property
    def state(self) -> float:
        """Current state."""
        return self._state

    @property
    def last_update(self) -> Optional[datetime]:
        """Time of the last accepted state, None before the first one."""
        return self._last_update

    @property
    def states(self) -> List[float]:
        """Retained states, oldest first."""
        with self._lock:
            return list(self._states)

    def get_device(self) -> Optional["Device"]:
        return self._device_ref() if self._device_ref is not None else None

    def set_device(self, device: Optional["Device"]) -> None:
        self._device_ref = weakref.ref(device) if device is not None else None

    def moving_average(self) -> float:
        """
        Calculate the moving average of the most recent states.

        Only the last 5 states are used, whatever the retention is.

        Raises:
            NoDataError: There are no states yet
        """
        with self._lock:
            if not self._states:
                raise NoDataError("No states to calculate moving average on")
            window = list(self._states)[-MOVING_AVERAGE_WINDOW:]
        return sum(window) / len(window)

    def _check_anomaly(self, state: float) -> None:
        if not self._states:
            return
        average = self.moving_average()
        # Relative to the new state, not the average
        if state == 0:
            if average == 0:
                return
            change = float("inf")
        else:
            change = abs((state - average) / state)
        if change > self.anomaly_threshold:
            raise AnomalyRejectedError(state, average, change, self.anomaly_threshold)

    def add_state(self, state: float) -> None:
        """
        Add a new state to the sensor.

        Raises:
            AnomalyRejectedError: Anomaly detection is on and the state deviates
                too much from the moving average. The sensor is left unchanged.
        """
        with self._lock:
            if self.anomaly_detect:
                try:
                    self._check_anomaly(state)
                except AnomalyRejectedError as e:
                    logger.warning(f"Rejected state for sensor {self.get_ident()}: {e}")
                    raise
            self._state = state
            self._last_update = datetime.now(timezone.utc)
            self._states.append(state)

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
        """Generate the discovery payload JSON."""
        return json.dumps(topics.discovery_document(
            self.category,
            self.ident,
            self.name,
            self.get_device(),
            icon=self.icon,
            dev_cla=self.device_class,
            unit_of_meas=self.unit_of_measurement,
        ))

    def publish_state(self, broker: Broker, timeout: Optional[float] = None) -> None:
        """Publish the current state, formatted with one decimal."""
        with self._lock:
            payload = f"{self._state:.1f}"
        publish_and_wait(broker, self.get_state_topic(), payload, retain=False, timeout=timeout)

    def publish_discover(self, broker: Broker, timeout: Optional[float] = None) -> None:
        """Publish the discovery payload so Home Assistant registers the sensor."""
        payload = self.get_discover_payload()
        logger.info(f"Publishing sensor {self.get_name()} discovery to {self.get_discover_topic()}")
        logger.debug(payload)
        publish_and_wait(broker, self.get_discover_topic(), payload, retain=True, timeout=timeout)
