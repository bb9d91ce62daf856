"""Queryable metadata attached to classes and functions.

Decorators write inert facts here (controller prefix, lifetime, guards,
parameter roles...) and the container and application read them back at
bootstrap time.
"""

import inspect
import threading
import weakref
from typing import Any, Dict, Optional, Tuple

CONTROLLER = "ipc_injector:controller"
INJECTABLE = "ipc_injector:injectable"
DEPENDENCIES = "ipc_injector:dependencies"
HANDLER = "ipc_injector:handler"
GUARD = "ipc_injector:guard"
PARAM = "ipc_injector:param"
FILTER = "ipc_injector:filter"

_MISSING = object()


class MetadataStore:
    """Mapping of ``(subject, key) -> value``.

    Subjects are held weakly so classes defined at runtime (for example in
    tests) do not outlive their last reference.
    """

    def __init__(self) -> None:
        self._entries: "weakref.WeakKeyDictionary[Any, Dict[Any, Any]]" = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()

    def define(self, key: Any, value: Any, subject: Any) -> None:
        """Attach ``value`` to ``subject`` under ``key``, replacing any previous value."""
        with self._lock:
            entries = self._entries.get(subject)
            if entries is None:
                entries = {}
                self._entries[subject] = entries
            entries[key] = value

    def _lookup(self, key: Any, subject: Any) -> Tuple[bool, Any]:
        # Classes inherit metadata from their bases, nearest class first
        candidates = subject.__mro__ if inspect.isclass(subject) else (subject,)
        for candidate in candidates:
            try:
                entries = self._entries.get(candidate)
            except TypeError:
                # Subject cannot be weakly referenced, so nothing was ever stored for it.
                continue
            if entries is not None and key in entries:
                return True, entries[key]
        return False, None

    def get(self, key: Any, subject: Any, default: Optional[Any] = None) -> Any:
        """Return the value attached to ``subject`` under ``key``, or ``default``.

        A class without its own value for ``key`` inherits the value of the
        nearest base class in its MRO.
        """
        found, value = self._lookup(key, subject)
        return value if found else default

    def get_own(self, key: Any, subject: Any, default: Optional[Any] = None) -> Any:
        """Like ``get``, without looking at base classes."""
        try:
            entries = self._entries.get(subject)
        except TypeError:
            return default
        if entries is None:
            return default
        return entries.get(key, default)

    def owner(self, key: Any, subject: Any) -> Optional[Any]:
        """Return the class in ``subject``'s MRO that defines ``key``, if any."""
        if not inspect.isclass(subject):
            return subject if self.has(key, subject) else None
        for candidate in subject.__mro__:
            if self.get_own(key, candidate, _MISSING) is not _MISSING:
                return candidate
        return None

    def has(self, key: Any, subject: Any) -> bool:
        return self._lookup(key, subject)[0]

    def delete(self, key: Any, subject: Any) -> None:
        with self._lock:
            entries = self._entries.get(subject)
            if entries is not None:
                entries.pop(key, None)


default_metadata_store = MetadataStore()
