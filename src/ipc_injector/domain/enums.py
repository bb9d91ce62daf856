from enum import Enum


class Lifetime(str, Enum):
    """Defines the lifetime of a provider instance.

    Attributes:
        SINGLETON: Single instance shared by every resolution of a container.
        TRANSIENT: New instance created on each resolution.
    """

    TRANSIENT = "transient"
    SINGLETON = "singleton"

    def __str__(self) -> str:
        return self.value


class HandlerMode(str, Enum):
    """How a transport channel delivers messages to a handler.

    Attributes:
        REQUEST_REPLY: The caller waits for the handler result.
        FIRE_AND_FORGET: The handler result is discarded.
    """

    REQUEST_REPLY = "invoke"
    FIRE_AND_FORGET = "send"

    def __str__(self) -> str:
        return self.value


class ParamRole(str, Enum):
    """Source of a handler argument."""

    CONTEXT = "ctx"
    EVENT = "event"
    PAYLOAD = "payload"
    CUSTOM = "custom"

    def __str__(self) -> str:
        return self.value
