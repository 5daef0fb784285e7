"""
Switch module.
Boolean entity that Home Assistant can toggle through a command topic.
"""

import json
import logging
import threading
import weakref
from datetime import datetime, timezone
from typing import Callable, Optional, TYPE_CHECKING

from .broker import Broker, Message, publish_and_wait
from .constants import CATEGORY_SWITCH, DEFAULT_QOS, PAYLOAD_OFF, PAYLOAD_ON
from .errors import UnknownCommandError
from . import topics

if TYPE_CHECKING:
    from .device import Device

logger = logging.getLogger(__name__)

CommandCallback = Callable[[str], None]


class Switch:
    """Home Assistant switch."""

    category = CATEGORY_SWITCH

    def __init__(
        self,
        ident: str,
        name: str = "",
        device_class: str = "",
        icon: str = "",
        default_state: bool = False,
    ):
        self.ident = ident
        self.name = name
        self.device_class = device_class
        self.icon = icon
        self.default_state = default_state
        self._state = default_state
        self._last_update: Optional[datetime] = None
        self._command_callback: Optional[CommandCallback] = None
        self._device_ref: Optional[weakref.ref] = None
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Switch(ident={self.get_ident()!r}, state={self._state})"

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

    def get_command_topic(self) -> str:
        return topics.command_topic(self.category, self.ident, self.get_device())

    def get_discover_payload(self) -> str:
        return json.dumps(topics.discovery_document(
            self.category,
            self.ident,
            self.name,
            self.get_device(),
            command_topic=self.get_command_topic(),
            icon=self.icon,
            dev_cla=self.device_class,
        ))

    def publish_state(self, broker: Broker, timeout: Optional[float] = None) -> None:
        with self._lock:
            payload = PAYLOAD_ON if self._state else PAYLOAD_OFF
        publish_and_wait(broker, self.get_state_topic(), payload, retain=False, timeout=timeout)

    def publish_discover(self, broker: Broker, timeout: Optional[float] = None) -> None:
        payload = self.get_discover_payload()
        logger.info(f"Publishing switch {self.get_name()} discovery to {self.get_discover_topic()}")
        logger.debug(payload)
        publish_and_wait(broker, self.get_discover_topic(), payload, retain=True, timeout=timeout)

    def subscribe_command(self, broker: Broker, callback: CommandCallback) -> None:
        """
        Listen for commands from Home Assistant.

        Args:
            broker: Broker to subscribe on
            callback: Called with "ON" or "OFF" before the new state is published
        """
        self._command_callback = callback
        broker.subscribe(self.get_command_topic(), self.command_received, qos=DEFAULT_QOS)
        logger.info(f"Subscribed switch {self.get_name()} to {self.get_command_topic()}")

    def handle_command(self, broker: Broker, payload: str) -> None:
        """
        Apply a command: run the callback, update the state, publish it.

        Raises:
            UnknownCommandError: The payload is neither ON nor OFF
        """
        if payload not in (PAYLOAD_ON, PAYLOAD_OFF):
            raise UnknownCommandError(payload)
        with self._lock:
            if self._command_callback is not None:
                self._command_callback(payload)
            self.set_state(payload == PAYLOAD_ON)
        self.publish_state(broker)

    def command_received(self, broker: Broker, message: Message) -> None:
        """
        Subscription handler for the command topic.

        Failures are logged, never raised back into the broker client. The
        state publish waits for completion, so the broker must not call this
        from the thread that sends its messages.
        """
        payload = message.payload.decode("utf-8", errors="replace")
        try:
            self.handle_command(broker, payload)
        except UnknownCommandError as e:
            logger.warning(f"Ignoring command for switch {self.get_ident()}: {e}")
        except Exception as e:
            logger.error(f"Error handling command {payload!r} for switch {self.get_ident()}: {e}")
