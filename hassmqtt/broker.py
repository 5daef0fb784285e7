"""
Broker capability consumed by devices and entities.

Entities never open connections themselves. They are handed anything that
can publish and subscribe, usually :class:`hassmqtt.mqtt_client.MQTTClient`.
The publish handle matches paho-mqtt's ``MQTTMessageInfo``.
"""

from typing import Callable, Optional, Protocol, Union

from .constants import DEFAULT_QOS
from .errors import PublishTimeoutError


class PublishHandle(Protocol):
    """Completion handle returned by a publish."""

    def wait_for_publish(self, timeout: Optional[float] = None) -> None:
        ...

    def is_published(self) -> bool:
        ...


class Message(Protocol):
    """Incoming message delivered to a subscription handler."""

    topic: str
    payload: bytes


MessageHandler = Callable[["Broker", Message], None]


class Broker(Protocol):
    """Minimal publish/subscribe contract."""

    def publish(
        self,
        topic: str,
        payload: Union[str, bytes],
        qos: int = DEFAULT_QOS,
        retain: bool = False,
    ) -> PublishHandle:
        ...

    def subscribe(self, topic: str, handler: MessageHandler, qos: int = DEFAULT_QOS) -> None:
        ...


def publish_and_wait(
    broker: Broker,
    topic: str,
    payload: Union[str, bytes],
    retain: bool = False,
    timeout: Optional[float] = None,
) -> None:
    """
    Publish a message and block until the broker client confirms it.

    Args:
        broker: Broker capability to publish through
        topic: Destination topic
        payload: Message payload
        retain: Whether the broker should retain the message
        timeout: Seconds to wait for confirmation, None waits indefinitely

    Raises:
        PublishTimeoutError: The publish was not confirmed within ``timeout``
    """
    handle = broker.publish(topic, payload, qos=DEFAULT_QOS, retain=retain)
    handle.wait_for_publish(timeout)
    if timeout is not None and not handle.is_published():
        raise PublishTimeoutError(topic, timeout)
