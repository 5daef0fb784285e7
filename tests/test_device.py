"""Unit tests for Device registration and availability."""

import json

import pytest

from hassmqtt import (
    BinarySensor,
    ComponentNotFoundError,
    Device,
    DuplicateIdentifierError,
    Sensor,
    Switch,
)


@pytest.fixture
def device() -> Device:
    return Device("device01", name="Device", manufacturer="Acme", model="M1")


def test_added_component_is_linked_to_device(device):
    sensor = Sensor("sensor01")
    device.add_component(sensor)
    assert sensor.get_device() is device
    assert device.components == [sensor]


def test_duplicate_ident_is_rejected(device):
    device.add_component(Sensor("sensor01"))
    duplicate = Sensor("sensor01")
    with pytest.raises(DuplicateIdentifierError) as exc_info:
        device.add_component(duplicate)
    assert exc_info.value.ident == "device01_sensor01"
    assert len(device.components) == 1
    assert duplicate.get_device() is None


def test_same_ident_across_types_collides(device):
    device.add_component(Sensor("thing"))
    with pytest.raises(DuplicateIdentifierError):
        device.add_component(Switch("thing"))


def test_components_keep_registration_order(device):
    components = [Switch("c"), Sensor("a"), BinarySensor("b")]
    for component in components:
        device.add_component(component)
    assert device.components == components


def test_get_component_by_composed_ident(device):
    sensor = Sensor("sensor01")
    switch = Switch("switch01")
    device.add_component(sensor)
    device.add_component(switch)
    assert device.get_component("device01_switch01") is switch
    assert device.get_component("device01_sensor01") is sensor


def test_get_component_not_found(device):
    device.add_component(Sensor("sensor01"))
    with pytest.raises(ComponentNotFoundError):
        device.get_component("sensor01")


def test_reattaching_overwrites_link(device):
    other = Device("device02")
    sensor = Sensor("sensor01")
    device.add_component(sensor)
    other.add_component(sensor)
    assert sensor.get_device() is other
    assert sensor.get_ident() == "device02_sensor01"


def test_device_link_does_not_keep_device_alive():
    device = Device("device01")
    sensor = Sensor("sensor01")
    device.add_component(sensor)
    del device
    assert sensor.get_device() is None
    assert sensor.get_ident() == "sensor01"


def test_availability_topic(device):
    assert device.get_availability_topic() == "device/device01/availability"


def test_components_share_device_availability_topic(device):
    sensor = Sensor("sensor01")
    switch = Switch("switch01")
    device.add_component(sensor)
    device.add_component(switch)
    assert sensor.get_availability_topic() == switch.get_availability_topic() == device.get_availability_topic()


def test_publish_available(device, broker):
    device.publish_available(broker)
    message = broker.last()
    assert message.topic == "device/device01/availability"
    assert message.payload == "online"
    assert message.retain is True
    assert message.qos == 0


def test_publish_unavailable(device, broker):
    device.publish_unavailable(broker)
    message = broker.last()
    assert message.payload == "offline"
    assert message.retain is True


def test_publish_waits_for_completion(device, broker):
    device.publish_available(broker, timeout=2.0)
    assert broker.handles[-1].waited_with == [2.0]


def test_device_info_omits_empty_fields():
    assert Device("device01", name="Device").get_device_info() == {"ids": "device01", "name": "Device"}


def test_publish_discover_and_state_for_all_components(device, broker):
    sensor = Sensor("temp")
    switch = Switch("relay")
    device.add_component(sensor)
    device.add_component(switch)
    sensor.add_state(20)

    device.publish_discover(broker)
    device.publish_state(broker)

    topics = [message.topic for message in broker.messages]
    assert topics == [
        "homeassistant/sensor/device01_temp/config",
        "homeassistant/switch/device01_relay/config",
        "homeassistant/sensor/device01_temp/state",
        "homeassistant/switch/device01_relay/state",
    ]
    assert json.loads(broker.messages[0].payload)["device"]["mf"] == "Acme"
