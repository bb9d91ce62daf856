"""
Domain layer - Core models and contracts.

This layer contains the value objects, errors, interfaces and metadata
store shared by every other layer. It has no dependencies on other layers.
"""

from .context import ExecutionContext
from .enums import HandlerMode, Lifetime, ParamRole
from .exceptions import (
    ChannelAlreadyRegistered,
    ChannelNotFound,
    CircularDependency,
    ControllerIsNotValid,
    DataValidationError,
    EmptyStreamError,
    ForbiddenAccessError,
    InjectorException,
    InvalidHandlerSignature,
    IsNotExceptionFilter,
    ProviderIsNotInjectable,
    ProviderNotFound,
    ResultUnwrapError,
    UnresolvableDependency,
)
from .interfaces import CanActivate, ExceptionFilter, IContainer, IPayloadValidator, ITransport
from .metadata import MetadataStore, default_metadata_store
from .models import (
    ConfigOptions,
    HandlerMetadata,
    ParamDescriptor,
    ProviderDescriptor,
    RouteDefinition,
    ValidationFailure,
    ValidationOptions,
)

__all__ = [
    # Context
    "ExecutionContext",
    # Enums
    "Lifetime",
    "HandlerMode",
    "ParamRole",
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
    # Interfaces
    "IContainer",
    "CanActivate",
    "ExceptionFilter",
    "IPayloadValidator",
    "ITransport",
    # Metadata
    "MetadataStore",
    "default_metadata_store",
    # Models
    "ProviderDescriptor",
    "HandlerMetadata",
    "ParamDescriptor",
    "ValidationFailure",
    "ValidationOptions",
    "ConfigOptions",
    "RouteDefinition",
]
