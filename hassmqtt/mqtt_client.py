"""
MQTT Client module.
Handles the broker connection and implements the publish/subscribe
capability used by devices and entities.
"""

import logging
import queue
import threading
import time
from typing import Dict, Optional, Tuple, Union

import paho.mqtt.client as mqtt

from .broker import MessageHandler
from .constants import DEFAULT_KEEPALIVE, DEFAULT_MQTT_PORT, DEFAULT_QOS, PAYLOAD_NOT_AVAILABLE
from .errors import BrokerNotConnectedError
from .utils import get_default_client_id

logger = logging.getLogger(__name__)


class MQTTClient:
    """Handles MQTT connection, publishing and subscriptions."""

    def __init__(self):
        self.client = None
        self.connected = False
        self.host = ""
        self.port = DEFAULT_MQTT_PORT
        self.username = ""
        self.password = ""
        self.client_id = ""
        self.keepalive = DEFAULT_KEEPALIVE
        self.will_topic = ""
        self._subscriptions: Dict[str, Tuple[int, MessageHandler]] = {}
        self._lock = threading.Lock()
        self._deliveries: queue.Queue = queue.Queue()
        self._dispatcher: Optional[threading.Thread] = None

    def configure(
        self,
        host: str,
        port: int = DEFAULT_MQTT_PORT,
        username: str = "",
        password: str = "",
        client_id: str = "",
        will_topic: str = "",
        keepalive: int = DEFAULT_KEEPALIVE,
    ):
        """
        Configure MQTT connection parameters.

        Args:
            will_topic: Topic that receives a retained "offline" last will,
                usually a device availability topic
        """
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.client_id = client_id or get_default_client_id()
        self.will_topic = will_topic
        self.keepalive = keepalive

    def configure_from_settings(self, settings: dict):
        """Configure from a settings dictionary, see :mod:`hassmqtt.settings`."""
        self.configure(
            settings.get("mqtt_host", ""),
            settings.get("mqtt_port", DEFAULT_MQTT_PORT),
            settings.get("mqtt_username", ""),
            settings.get("mqtt_password", ""),
            settings.get("client_id", ""),
            settings.get("will_topic", ""),
            settings.get("keepalive", DEFAULT_KEEPALIVE),
        )

    def connect(self) -> bool:
        """Connect to the MQTT broker."""
        try:
            if self.client:
                self.disconnect()

            logger.debug(f"Connecting to MQTT server {self.host}:{self.port} with client id {self.client_id}")
            self.client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=self.client_id)

            if self.username:
                self.client.username_pw_set(self.username, self.password)

            # Last Will message - published by the broker when we disconnect unexpectedly
            if self.will_topic:
                self.client.will_set(
                    topic=self.will_topic,
                    payload=PAYLOAD_NOT_AVAILABLE,
                    qos=DEFAULT_QOS,
                    retain=True
                )
                logger.info(f"Last Will message set for topic: {self.will_topic}")

            self.client.on_connect = self._on_connect
            self.client.on_disconnect = self._on_disconnect

            with self._lock:
                subscriptions = dict(self._subscriptions)
            for topic, (_, handler) in subscriptions.items():
                self.client.message_callback_add(topic, self._queue_delivery(handler))
            if subscriptions:
                self._start_dispatcher()

            self.client.connect(self.host, self.port, keepalive=self.keepalive)
            self.client.loop_start()

            # Wait briefly for connection
            for _ in range(10):
                if self.connected:
                    return True
                time.sleep(0.1)

            return self.connected
        except (OSError, ValueError) as e:
            logger.error(f"Error connecting to MQTT: {e}")
            self.connected = False
            return False

    def _on_connect(self, client, userdata, flags, reason_code, properties):
        if reason_code == 0:
            self.connected = True
            logger.info(f"Connected to MQTT broker at {self.host}:{self.port}")
            # Subscriptions do not survive a new session
            with self._lock:
                subscriptions = dict(self._subscriptions)
            for topic, (qos, _) in subscriptions.items():
                client.subscribe(topic, qos)
        else:
            self.connected = False
            logger.error(f"Failed to connect to MQTT broker: {reason_code}")

    def _on_disconnect(self, client, userdata, flags, reason_code, properties):
        self.connected = False
        logger.info("Disconnected from MQTT broker")

    def disconnect(self):
        """Disconnect from the MQTT broker."""
        if self.client:
            if self.connected and self.will_topic:
                # A clean disconnect does not trigger the last will
                info = self.client.publish(self.will_topic, PAYLOAD_NOT_AVAILABLE, qos=DEFAULT_QOS, retain=True)
                info.wait_for_publish(1.0)
                logger.info(f"Published offline status to {self.will_topic}")
            self.client.loop_stop()
            self.client.disconnect()
            self.client = None
        self.connected = False
        self._stop_dispatcher()

    def publish(
        self,
        topic: str,
        payload: Union[str, bytes],
        qos: int = DEFAULT_QOS,
        retain: bool = False,
    ) -> mqtt.MQTTMessageInfo:
        """
        Publish a message to an MQTT topic.

        Returns paho's message info, whose ``wait_for_publish`` blocks until
        the network loop has written the message. Never wait on it from the
        network loop thread itself.

        Raises:
            BrokerNotConnectedError: connect() has not been called
        """
        if not self.client:
            raise BrokerNotConnectedError(f"Cannot publish to {topic}: not connected")
        return self.client.publish(topic, payload, qos=qos, retain=retain)

    def subscribe(self, topic: str, handler: MessageHandler, qos: int = DEFAULT_QOS) -> None:
        """
        Subscribe to a topic.

        ``handler`` is called with this client and the paho message on the
        client's dispatch thread, one message at a time in arrival order.
        Handlers may publish and wait for completion.

        Raises:
            BrokerNotConnectedError: connect() has not been called
        """
        if not self.client:
            raise BrokerNotConnectedError(f"Cannot subscribe to {topic}: not connected")

        self._start_dispatcher()
        with self._lock:
            self._subscriptions[topic] = (qos, handler)
        self.client.message_callback_add(topic, self._queue_delivery(handler))
        self.client.subscribe(topic, qos)
        logger.debug(f"Subscribed to {topic}")

    def _queue_delivery(self, handler: MessageHandler):
        def on_message(client, userdata, message):
            # Runs on paho's network loop, which must stay free to send
            self._deliveries.put((handler, message))

        return on_message

    def flush_deliveries(self):
        """Block until every message received so far has been handled."""
        self._deliveries.join()

    def _start_dispatcher(self):
        with self._lock:
            if self._dispatcher is not None and self._dispatcher.is_alive():
                return
            self._dispatcher = threading.Thread(
                target=self._dispatch_loop,
                name=f"hassmqtt-dispatch-{self.client_id}",
                daemon=True,
            )
            self._dispatcher.start()

    def _stop_dispatcher(self):
        with self._lock:
            dispatcher = self._dispatcher
            self._dispatcher = None
        if dispatcher is None:
            return
        self._deliveries.put(None)
        if dispatcher is not threading.current_thread():
            dispatcher.join(timeout=1.0)

    def _dispatch_loop(self):
        while True:
            delivery = self._deliveries.get()
            try:
                if delivery is None:
                    return
                handler, message = delivery
                try:
                    handler(self, message)
                except Exception as e:
                    logger.error(f"Error handling message on {message.topic}: {e}")
            finally:
                self._deliveries.task_done()
