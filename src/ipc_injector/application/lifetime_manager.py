import threading
from typing import Any, Callable, Dict

from ipc_injector.domain import InjectorException, Lifetime, UnresolvableDependency


class LifetimeManager:
    """Manages instance lifetimes for singleton and transient providers.

    Singleton creation is guarded by one lock per token, so the first
    resolution wins even when several threads race for the same token.

    Attributes:
        _singleton_cache: Cache for singleton instances, keyed by token.
        _locks: One re-entrant lock per singleton token.
    """

    def __init__(self) -> None:
        self._singleton_cache: Dict[Any, Any] = {}
        self._locks: Dict[Any, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, token: Any) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(token)
            if lock is None:
                lock = threading.RLock()
                self._locks[token] = lock
            return lock

    def get_cached(self, token: Any) -> Any:
        """Return the cached singleton for ``token`` or ``None``."""
        return self._singleton_cache.get(token)

    def is_cached(self, token: Any) -> bool:
        return token in self._singleton_cache

    def get_or_create(self, token: Any, lifetime: Lifetime, factory: Callable[[], Any]) -> Any:
        """Get existing instance or create a new one based on lifetime.

        Args:
            token: The provider token.
            lifetime: Lifetime declared by the implementation.
            factory: Function to create a new instance if needed.

        Returns:
            Instance according to lifetime rules:
            - Singleton: Returns cached instance or creates and caches new one
            - Transient: Always creates new instance
        """
        if lifetime == Lifetime.SINGLETON:
            if token in self._singleton_cache:
                return self._singleton_cache[token]
            with self._lock_for(token):
                if token not in self._singleton_cache:
                    self._singleton_cache[token] = self._create(token, factory)
                return self._singleton_cache[token]

        # Lifetime.TRANSIENT
        return self._create(token, factory)

    def set_instance(self, token: Any, instance: Any) -> None:
        """Seed the singleton cache with a ready-made instance."""
        with self._lock_for(token):
            self._singleton_cache[token] = instance

    def evict(self, token: Any) -> None:
        self._singleton_cache.pop(token, None)

    def clear_cache(self) -> None:
        """Clear all cached singleton instances.

        Useful for testing or resetting container state.
        """
        self._singleton_cache.clear()

    @staticmethod
    def _create(token: Any, factory: Callable[[], Any]) -> Any:
        try:
            return factory()
        except InjectorException:
            raise
        except Exception as e:
            raise UnresolvableDependency(token, f"Failed to create instance: {str(e)}") from e
