"""Unit tests for publish confirmation handling."""

import pytest

from hassmqtt import PublishTimeoutError, Sensor, publish_and_wait


def test_publish_and_wait_blocks_without_timeout(broker):
    publish_and_wait(broker, "some/topic", "payload")
    assert broker.handles[0].waited_with == [None]


def test_unconfirmed_publish_raises_after_timeout(broker):
    broker.confirm = False
    with pytest.raises(PublishTimeoutError) as exc_info:
        publish_and_wait(broker, "some/topic", "payload", timeout=0.5)
    assert exc_info.value.topic == "some/topic"
    assert exc_info.value.timeout == 0.5


def test_entity_publish_propagates_timeout(broker):
    broker.confirm = False
    sensor = Sensor("sensor1")
    sensor.add_state(1)
    with pytest.raises(PublishTimeoutError):
        sensor.publish_state(broker, timeout=0.1)


def test_broker_errors_propagate():
    class FailingBroker:
        def publish(self, topic, payload, qos=0, retain=False):
            raise RuntimeError("queue full")

    with pytest.raises(RuntimeError, match="queue full"):
        Sensor("sensor1").publish_discover(FailingBroker())
