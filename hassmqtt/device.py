"""
Device module.
Groups entities under one Home Assistant device and owns its availability topic.
"""

import logging
from typing import List, Optional

from .broker import Broker, publish_and_wait
from .component import Component
from .constants import DEVICE_TOPIC_PREFIX, PAYLOAD_AVAILABLE, PAYLOAD_NOT_AVAILABLE
from .errors import ComponentNotFoundError, DuplicateIdentifierError
from .topics import compose_ident

logger = logging.getLogger(__name__)


class Device:
    """A Home Assistant device holding its entities in registration order."""

    def __init__(self, ident: str, name: str = "", manufacturer: str = "", model: str = ""):
        self.ident = ident
        self.name = name
        self.manufacturer = manufacturer
        self.model = model
        self.components: List[Component] = []

    def __repr__(self) -> str:
        return f"Device(ident={self.ident!r}, name={self.name!r}, components={len(self.components)})"

    def add_component(self, component: Component) -> None:
        """
        Attach a component to the device.

        The identifier is checked as the component will be known once
        attached, whatever device it was linked to before.

        Raises:
            DuplicateIdentifierError: A component with the same composed ident exists
        """
        ident = compose_ident(component.ident, self)
        for existing in self.components:
            if existing.get_ident() == ident:
                raise DuplicateIdentifierError(ident)
        component.set_device(self)
        self.components.append(component)
        logger.debug(f"Added {component.category} {ident} to device {self.ident}")

    def get_component(self, ident: str) -> Component:
        """
        Get a component by composed identifier.

        Raises:
            ComponentNotFoundError: No component has this identifier
        """
        for component in self.components:
            if component.get_ident() == ident:
                return component
        raise ComponentNotFoundError(ident)

    def get_availability_topic(self) -> str:
        """Get the availability topic shared by all components of the device."""
        return f"{DEVICE_TOPIC_PREFIX}/{self.ident}/availability"

    def get_device_info(self) -> dict:
        """Get the device info block for MQTT Discovery."""
        info = {
            "ids": self.ident,
            "name": self.name,
            "mf": self.manufacturer,
            "mdl": self.model,
        }
        return {key: value for key, value in info.items() if value}

    def publish_available(self, broker: Broker, timeout: Optional[float] = None) -> None:
        """Mark the device and all its components as online."""
        logger.info(f"Publishing device {self.name} availability to {self.get_availability_topic()}")
        publish_and_wait(broker, self.get_availability_topic(), PAYLOAD_AVAILABLE, retain=True, timeout=timeout)

    def publish_unavailable(self, broker: Broker, timeout: Optional[float] = None) -> None:
        """Mark the device and all its components as offline."""
        logger.info(f"Publishing device {self.name} unavailability to {self.get_availability_topic()}")
        publish_and_wait(broker, self.get_availability_topic(), PAYLOAD_NOT_AVAILABLE, retain=True, timeout=timeout)

    def publish_discover(self, broker: Broker, timeout: Optional[float] = None) -> None:
        """Register every component with Home Assistant."""
        for component in self.components:
            component.publish_discover(broker, timeout=timeout)

    def publish_state(self, broker: Broker, timeout: Optional[float] = None) -> None:
        """Publish the current state of every component."""
        for component in self.components:
            component.publish_state(broker, timeout=timeout)
