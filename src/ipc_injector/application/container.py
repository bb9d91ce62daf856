import logging
from typing import Any, Callable, Dict, Optional, Sequence, Type, TypeVar, Union

from ipc_injector.application.circular_detector import CircularDependencyDetector
from ipc_injector.application.lifetime_manager import LifetimeManager
from ipc_injector.application.reflector import Reflector
from ipc_injector.application.resolver import DependencyResolver
from ipc_injector.domain import (
    IContainer,
    Lifetime,
    MetadataStore,
    ProviderDescriptor,
    ProviderIsNotInjectable,
    ProviderNotFound,
    default_metadata_store,
)
from ipc_injector.domain.metadata import INJECTABLE

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Container(IContainer):
    """Main dependency injection container.

    Resolves provider tokens to instances, building the dependency graph
    declared on each implementation and caching singletons.

    Attributes:
        _providers: Dictionary mapping tokens to their provider descriptors.
        _utilities: Framework tokens built fresh on every resolution.
        _resolver: Component reading the dependency list of a class.
        _lifetime_manager: Component managing instance lifetimes.
        _circular_detector: Component detecting circular dependencies.
    """

    def __init__(self, metadata: Optional[MetadataStore] = None) -> None:
        """Initialize the container with an empty registry.

        Args:
            metadata: Store holding injectable and dependency metadata.
                      Defaults to the store the decorators write to.
        """
        self._metadata = metadata if metadata is not None else default_metadata_store
        self._providers: Dict[Any, ProviderDescriptor] = {}
        self._utilities: Dict[Any, Callable[[], Any]] = {
            Reflector: lambda: Reflector(self._metadata),
        }
        self._resolver = DependencyResolver(self._metadata)
        self._lifetime_manager = LifetimeManager()
        self._circular_detector = CircularDependencyDetector()

    @property
    def metadata(self) -> MetadataStore:
        return self._metadata

    def add_provider(self, provider: Union[Type, ProviderDescriptor]) -> None:
        """Register a provider, replacing any prior registration for its token.

        Args:
            provider: A bare class (its own token) or a ``ProviderDescriptor``.

        Example:
            >>> container.add_provider(UserRepository)
            >>> container.add_provider(ProviderDescriptor(provided=Cache, use_class=MemoryCache))
        """
        descriptor = ProviderDescriptor.of(provider)
        if descriptor.provided in self._providers:
            # Replaced registrations must not serve a stale singleton
            self._lifetime_manager.evict(descriptor.provided)
        self._providers[descriptor.provided] = descriptor
        logger.debug("Provider %s loaded", getattr(descriptor.provided, "__name__", descriptor.provided))

    def has_provider(self, token: Any) -> bool:
        return token in self._providers

    def resolve(self, token: Type[T], path: Sequence[Any] = ()) -> T:
        """Resolve and return an instance for the token.

        Args:
            token: The token to resolve.
            path: Tokens currently being constructed, outermost first.

        Returns:
            Instance of the registered implementation with its dependencies injected.

        Raises:
            ProviderNotFound: If no provider is registered for the token.
            CircularDependency: If the token is already on the resolution path.
            ProviderIsNotInjectable: If the implementation carries no lifetime.
            UnresolvableDependency: If the implementation cannot be constructed.

        Example:
            >>> user_service = container.resolve(UserService)
        """
        utility = self._utilities.get(token)
        if utility is not None:
            return utility()

        if self._lifetime_manager.is_cached(token):
            return self._lifetime_manager.get_cached(token)

        descriptor = self._providers.get(token)
        if descriptor is None:
            raise ProviderNotFound(token)

        self._circular_detector.check(token, path)

        implementation = descriptor.use_class
        lifetime = self._metadata.get(INJECTABLE, implementation)
        if lifetime is None:
            raise ProviderIsNotInjectable(token)

        def factory() -> Any:
            dependencies = self._resolver.get_dependencies(implementation)
            child_path = self._circular_detector.extend(path, token)
            arguments = [self.resolve(dependency, child_path) for dependency in dependencies]
            return implementation(*arguments)

        return self._lifetime_manager.get_or_create(token, Lifetime(lifetime), factory)

    def clear(self) -> None:
        """Clear all registrations and cached instances.

        Useful for testing or resetting the container state.
        """
        self._providers.clear()
        self._lifetime_manager.clear_cache()
