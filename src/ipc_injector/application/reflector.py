from typing import Any, List, Optional

from ipc_injector.domain import MetadataStore, default_metadata_store


class Reflector:
    """Reads metadata from handlers and controllers.

    Available to guards and filters through the container without being
    registered as a provider.

    Example:
        >>> @injectable()
        ... class RolesGuard(CanActivate):
        ...     def __init__(self, reflector: Reflector):
        ...         self.reflector = reflector
        ...
        ...     def can_activate(self, context):
        ...         roles = self.reflector.get_all_and_override("roles", context.handler, context.class_ref)
        ...         return not roles or context.payload.get("role") in roles
    """

    def __init__(self, metadata: Optional[MetadataStore] = None) -> None:
        self._metadata = metadata if metadata is not None else default_metadata_store

    def get(self, key: Any, target: Any) -> Any:
        return self._metadata.get(key, target)

    def get_all(self, key: Any, *targets: Any) -> List[Any]:
        return [self.get(key, target) for target in targets]

    def get_all_and_override(self, key: Any, *targets: Any) -> Any:
        """Return the value of the last target that defines ``key``."""
        for value in reversed(self.get_all(key, *targets)):
            if value is not None:
                return value
        return None

    def get_all_and_merge(self, key: Any, *targets: Any) -> Any:
        """Combine the values of every target defining ``key``.

        Lists are concatenated and dicts merged (later targets win); any
        other value replaces what was accumulated so far.
        """
        merged: Any = None
        for value in self.get_all(key, *targets):
            if value is None:
                continue
            if isinstance(merged, list) and isinstance(value, list):
                merged = merged + value
            elif isinstance(merged, dict) and isinstance(value, dict):
                merged = {**merged, **value}
            elif isinstance(value, list):
                merged = list(value)
            elif isinstance(value, dict):
                merged = dict(value)
            else:
                merged = value
        return merged
