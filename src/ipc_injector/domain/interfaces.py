from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Sequence, Tuple, Type, TypeVar, Union

from ipc_injector.domain.context import ExecutionContext
from ipc_injector.domain.metadata import MetadataStore
from ipc_injector.domain.models import ProviderDescriptor, ValidationFailure, ValidationOptions

T = TypeVar("T")

ChannelHandler = Callable[[Any, Any], Awaitable[Any]]


class IContainer(ABC):
    """Abstract interface for dependency injection container operations."""

    @property
    @abstractmethod
    def metadata(self) -> MetadataStore:
        """The metadata store the container reads lifetimes and dependencies from."""

    @abstractmethod
    def add_provider(self, provider: Union[Type, ProviderDescriptor]) -> None:
        """Register a provider, replacing any prior registration for its token.

        Args:
            provider: A bare injectable class or a token/implementation descriptor.
        """

    @abstractmethod
    def has_provider(self, token: Any) -> bool:
        """Return whether a provider is registered for the token."""

    @abstractmethod
    def resolve(self, token: Type[T], path: Sequence[Any] = ()) -> T:
        """Resolve and return an instance for the requested token.

        Args:
            token: The token to resolve.
            path: Tokens currently being constructed, outermost first.
        """

    @abstractmethod
    def clear(self) -> None:
        """Clear all registrations and cached instances from the container."""


class CanActivate(ABC):
    """Access check run before a handler.

    ``can_activate`` may return a bool, an awaitable of a bool, or an async
    stream whose first value is the verdict.
    """

    @abstractmethod
    def can_activate(self, context: ExecutionContext) -> Any:
        """Decide whether the dispatch described by ``context`` may proceed."""


class ExceptionFilter(ABC):
    """Translates an error raised during a dispatch into a response."""

    @abstractmethod
    def catch(self, error: BaseException, context: ExecutionContext) -> Any:
        """Build the response for ``error``.

        The result may be a plain value, an awaitable or an async stream.
        """


class IPayloadValidator(ABC):
    """Abstract interface for payload validation."""

    @abstractmethod
    def has_rules(self, shape: Any) -> bool:
        """Return whether ``shape`` declares validation rules."""

    @abstractmethod
    def validate(
        self,
        shape: Any,
        payload: Any,
        options: ValidationOptions,
    ) -> Tuple[Any, List[ValidationFailure]]:
        """Transform ``payload`` into ``shape`` and validate it.

        Returns:
            The transformed value (``None`` on failure) and the list of
            failing fields, empty when the payload is valid.
        """


class ITransport(ABC):
    """Channel system that delivers inbound messages to handlers."""

    @abstractmethod
    def register_reply_channel(self, path: str, handler: ChannelHandler) -> None:
        """Register a handler whose result is sent back to the caller."""

    @abstractmethod
    def register_fire_and_forget_channel(self, path: str, handler: ChannelHandler) -> None:
        """Register a handler whose result is discarded."""
