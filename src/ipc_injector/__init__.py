"""
ipc-injector: Controller-based dispatch of IPC channels with dependency injection.

Public API exports for the ipc-injector package.
"""

# Application exports
from ipc_injector.application import Application, Container, Reflector

# Domain exports
from ipc_injector.domain import (
    CanActivate,
    ChannelAlreadyRegistered,
    ChannelNotFound,
    CircularDependency,
    ConfigOptions,
    ControllerIsNotValid,
    DataValidationError,
    EmptyStreamError,
    ExceptionFilter,
    ExecutionContext,
    ForbiddenAccessError,
    HandlerMode,
    InjectorException,
    InvalidHandlerSignature,
    IsNotExceptionFilter,
    Lifetime,
    ProviderDescriptor,
    ProviderIsNotInjectable,
    ProviderNotFound,
    ResultUnwrapError,
    UnresolvableDependency,
    ValidationOptions,
)

# Infrastructure exports
from ipc_injector.infrastructure import (
    ChannelEvent,
    Ctx,
    Event,
    InMemoryTransport,
    InjectorSettings,
    Payload,
    apply_decorators,
    catch,
    configure_logging,
    controller,
    create_param_decorator,
    injectable,
    on_invoke,
    on_send,
    set_metadata,
    use_guards,
)

__version__ = "0.1.0"

__all__ = [
    # Application
    "Application",
    "Container",
    "Reflector",
    # Context and configuration
    "ExecutionContext",
    "ConfigOptions",
    "ValidationOptions",
    "ProviderDescriptor",
    "InjectorSettings",
    "configure_logging",
    # Contracts
    "CanActivate",
    "ExceptionFilter",
    # Enums
    "Lifetime",
    "HandlerMode",
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
    # Transport
    "InMemoryTransport",
    "ChannelEvent",
    # Exceptions
    "InjectorException",
    "ProviderNotFound",
    "CircularDependency",
    "ProviderIsNotInjectable",
    "UnresolvableDependency",
    "ControllerIsNotValid",
    "InvalidHandlerSignature",
    "IsNotExceptionFilter",
    "ForbiddenAccessError",
    "DataValidationError",
    "ResultUnwrapError",
    "EmptyStreamError",
    "ChannelAlreadyRegistered",
    "ChannelNotFound",
]
