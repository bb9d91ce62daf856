from typing import TYPE_CHECKING, Any, Optional, Sequence

if TYPE_CHECKING:
    from ipc_injector.domain.models import ValidationFailure


def _name_of(token: Any) -> str:
    return getattr(token, "__name__", repr(token))


class InjectorException(Exception):
    """Base exception for ipc-injector errors."""


class ProviderNotFound(InjectorException):
    """Raised when no provider is registered for the requested token.

    Attributes:
        token: The token that could not be found.
    """

    def __init__(self, token: Any) -> None:
        self.token = token
        super().__init__(f"Provider '{_name_of(token)}' not found")


class CircularDependency(InjectorException):
    """Raised when a token appears twice on the current resolution path.

    Attributes:
        dependency_chain: Tokens involved in the cycle, first and last being the same.
    """

    def __init__(self, dependency_chain: Sequence[Any]) -> None:
        self.dependency_chain = list(dependency_chain)
        self.token = self.dependency_chain[-1] if self.dependency_chain else None
        chain = " -> ".join(_name_of(token) for token in self.dependency_chain)
        super().__init__(f"Circular dependency detected for provider '{_name_of(self.token)}': {chain}")


class ProviderIsNotInjectable(InjectorException):
    """Raised when a provider's implementation carries no lifetime metadata.

    Attributes:
        token: The token whose implementation is not injectable.
    """

    def __init__(self, token: Any) -> None:
        self.token = token
        super().__init__(
            f"Provider '{_name_of(token)}' is not injectable. Please ensure it is decorated with @injectable()"
        )


class UnresolvableDependency(InjectorException):
    """Raised when a provider cannot be built.

    This occurs when:
    - A constructor parameter lacks both a type hint and a default value.
    - The constructor itself raises.

    Attributes:
        token: The token that could not be built.
        reason: Optional reason for the failure.
    """

    def __init__(self, token: Any, reason: Optional[str] = None) -> None:
        self.token = token
        self.reason = reason
        message = f"Cannot resolve provider '{_name_of(token)}'"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class ControllerIsNotValid(InjectorException):
    """Raised at bootstrap when a controller class has no controller prefix."""

    def __init__(self, controller: Any) -> None:
        self.controller = controller
        super().__init__(
            f"Controller '{_name_of(controller)}' is not valid. Please ensure it is decorated with @controller()"
        )


class InvalidHandlerSignature(InjectorException):
    """Raised when a routed method declares a parameter the dispatcher cannot pass.

    Handler arguments are always passed positionally.

    Attributes:
        handler: The decorated function.
        parameter: Name of the offending parameter.
    """

    def __init__(self, handler: Any, parameter: str, reason: str) -> None:
        self.handler = handler
        self.parameter = parameter
        super().__init__(f"Handler '{_name_of(handler)}' cannot be routed: parameter '{parameter}' {reason}")


class IsNotExceptionFilter(InjectorException):
    """Raised when registering a global filter that declares no handled errors."""

    def __init__(self, filter_class: Any) -> None:
        self.filter_class = filter_class
        super().__init__(
            f"Filter '{_name_of(filter_class)}' is not an exception filter. "
            "Please ensure it is decorated with @catch()"
        )


class ForbiddenAccessError(InjectorException):
    """Returned to the caller when a guard denies access to a channel.

    Attributes:
        path: The channel path that was requested.
        guard_name: Name of the guard that denied access.
    """

    def __init__(self, path: str, guard_name: str) -> None:
        self.path = path
        self.guard_name = guard_name
        super().__init__(f"Access to '{path}' was denied by guard '{guard_name}'")


class DataValidationError(InjectorException):
    """Raised when a payload does not satisfy its declared shape.

    Attributes:
        failure: The first failing field with its constraint messages.
    """

    def __init__(self, failure: "ValidationFailure") -> None:
        self.failure = failure
        messages = "; ".join(failure.constraints.values())
        super().__init__(f"Validation failed for field '{failure.field}': {messages}")

    @property
    def constraints(self):
        return self.failure.constraints


class ResultUnwrapError(InjectorException):
    """Raised when a result keeps producing awaitables or streams past the depth limit."""

    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        super().__init__(f"Result is still wrapped after {max_depth} unwrap steps")


class EmptyStreamError(InjectorException):
    """Raised when a stream completes without emitting a value."""

    def __init__(self) -> None:
        super().__init__("Stream completed without emitting a value")


class ChannelAlreadyRegistered(InjectorException):
    """Raised when a second reply handler is registered for a channel."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"A reply handler is already registered for channel '{path}'")


class ChannelNotFound(InjectorException):
    """Raised when invoking a channel that has no reply handler."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"No handler registered for channel '{path}'")
