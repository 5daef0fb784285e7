"""Shared fixtures for hassmqtt tests."""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import pytest


@dataclass
class FakeMessage:
    topic: str
    payload: bytes


@dataclass
class Published:
    topic: str
    payload: str
    qos: int
    retain: bool


class FakeHandle:
    """Publish handle that is confirmed immediately unless told otherwise."""

    def __init__(self, published: bool = True):
        self.published = published
        self.waited_with: List[Optional[float]] = []

    def wait_for_publish(self, timeout: Optional[float] = None) -> None:
        self.waited_with.append(timeout)

    def is_published(self) -> bool:
        return self.published


@dataclass
class FakeBroker:
    """In-memory broker recording publishes and subscriptions."""

    messages: List[Published] = field(default_factory=list)
    handlers: Dict[str, Callable] = field(default_factory=dict)
    handles: List[FakeHandle] = field(default_factory=list)
    confirm: bool = True

    def publish(self, topic, payload, qos=0, retain=False):
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        self.messages.append(Published(topic, payload, qos, retain))
        handle = FakeHandle(self.confirm)
        self.handles.append(handle)
        return handle

    def subscribe(self, topic, handler, qos=0):
        self.handlers[topic] = handler

    def deliver(self, topic: str, payload: bytes) -> None:
        self.handlers[topic](self, FakeMessage(topic, payload))

    def last(self) -> Published:
        return self.messages[-1]


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker()
