"""
Capability set shared by every entity type.
"""

from typing import Optional, Protocol, TYPE_CHECKING

from .broker import Broker

if TYPE_CHECKING:
    from .device import Device


class Component(Protocol):
    """An entity that can be attached to a device and published to Home Assistant."""

    ident: str
    category: str

    def get_name(self) -> str:
        ...

    def get_ident(self) -> str:
        ...

    def get_base_topic(self) -> str:
        ...

    def get_state_topic(self) -> str:
        ...

    def get_availability_topic(self) -> str:
        ...

    def get_discover_topic(self) -> str:
        ...

    def get_discover_payload(self) -> str:
        ...

    def publish_state(self, broker: Broker, timeout: Optional[float] = None) -> None:
        ...

    def publish_discover(self, broker: Broker, timeout: Optional[float] = None) -> None:
        ...

    def get_device(self) -> Optional["Device"]:
        ...

    def set_device(self, device: Optional["Device"]) -> None:
        ...
