"""
Infrastructure layer - External integrations.

This layer contains the decorators, the pydantic payload validator, the
in-memory transport, settings and logging setup. Testing helpers live in
``ipc_injector.infrastructure.testing``.
"""

from .decorators import (
    Ctx,
    Event,
    Payload,
    apply_decorators,
    catch,
    controller,
    create_param_decorator,
    injectable,
    on_invoke,
    on_send,
    set_metadata,
    use_guards,
)
from .logging_config import configure_logging
from .settings import InjectorSettings
from .transport import ChannelEvent, InMemoryTransport
from .validation import PydanticPayloadValidator

__all__ = [
    # Decorators
    "controller",
    "injectable",
    "on_invoke",
    "on_send",
    "use_guards",
    "catch",
    "set_metadata",
    "apply_decorators",
    "create_param_decorator",
    "Payload",
    "Event",
    "Ctx",
    # Validation
    "PydanticPayloadValidator",
    # Transport
    "InMemoryTransport",
    "ChannelEvent",
    # Settings and logging
    "InjectorSettings",
    "configure_logging",
]
