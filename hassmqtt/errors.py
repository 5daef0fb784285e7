"""
Exceptions raised by the Home Assistant MQTT entity library.
"""


class HassMQTTError(Exception):
    """Base class for all library errors."""


class DuplicateIdentifierError(HassMQTTError):
    """A component with the same composed identifier is already on the device."""

    def __init__(self, ident: str):
        super().__init__(f"Component already added with ident {ident}")
        self.ident = ident


class ComponentNotFoundError(HassMQTTError, LookupError):
    """No component on the device matches the requested identifier."""

    def __init__(self, ident: str):
        super().__init__(f"Component not found: {ident}")
        self.ident = ident


class NoDataError(HassMQTTError):
    """Raised when a moving average is requested from an empty history."""


class AnomalyRejectedError(HassMQTTError):
    """A sensor state was rejected because it deviates too much from the moving average."""

    def __init__(self, value: float, average: float, change: float, threshold: float):
        super().__init__(
            f"Change of {change:.1%} from moving average {average} to {value} "
            f"is bigger than {threshold:.0%}"
        )
        self.value = value
        self.average = average
        self.change = change
        self.threshold = threshold


class UnknownCommandError(HassMQTTError, ValueError):
    """A switch received a command payload other than ON/OFF."""

    def __init__(self, payload: str):
        super().__init__(f"Unknown switch command: {payload!r}")
        self.payload = payload


class PublishTimeoutError(HassMQTTError):
    """The broker did not confirm a publish within the given timeout."""

    def __init__(self, topic: str, timeout: float):
        super().__init__(f"Publishing to {topic} not confirmed within {timeout}s")
        self.topic = topic
        self.timeout = timeout


class BrokerNotConnectedError(HassMQTTError):
    """The MQTT client has no active broker connection."""
