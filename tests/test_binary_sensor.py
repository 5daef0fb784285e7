"""Unit tests for BinarySensor."""

import json

from hassmqtt import BinarySensor, Device


def test_set_state_overwrites():
    sensor = BinarySensor("door")
    assert sensor.state is False
    sensor.set_state(True)
    assert sensor.state is True
    assert sensor.last_update is not None
    sensor.set_state(False)
    assert sensor.state is False


def test_publish_state(broker):
    sensor = BinarySensor("door")
    sensor.set_state(True)
    sensor.publish_state(broker)
    sensor.set_state(False)
    sensor.publish_state(broker)
    assert [m.payload for m in broker.messages] == ["ON", "OFF"]
    assert all(m.topic == "homeassistant/binary_sensor/door/state" for m in broker.messages)
    assert all(m.retain is False for m in broker.messages)


def test_topics_with_device():
    device = Device("hall")
    sensor = BinarySensor("door")
    device.add_component(sensor)
    assert sensor.get_base_topic() == "homeassistant/binary_sensor/hall_door"
    assert sensor.get_discover_topic() == "homeassistant/binary_sensor/hall_door/config"
    assert sensor.get_availability_topic() == "device/hall/availability"


def test_discover_payload_keeps_device_class():
    device = Device("hall", name="Hall")
    sensor = BinarySensor("door", name="Door", device_class="door", icon="mdi:door")
    device.add_component(sensor)
    payload = json.loads(sensor.get_discover_payload())
    assert payload == {
        "unique_id": "hall_door",
        "name": "Hall Door",
        "stat_t": "homeassistant/binary_sensor/hall_door/state",
        "avty_t": "device/hall/availability",
        "icon": "mdi:door",
        "dev_cla": "door",
        "device": {"ids": "hall", "name": "Hall"},
    }
    assert "unit_of_meas" not in payload


def test_publish_discover(broker):
    BinarySensor("door").publish_discover(broker)
    message = broker.last()
    assert message.topic == "homeassistant/binary_sensor/door/config"
    assert message.retain is True
