import inspect
from typing import Any, List, Type, get_type_hints

from ipc_injector.domain import MetadataStore, UnresolvableDependency
from ipc_injector.domain.metadata import DEPENDENCIES


class DependencyResolver:
    """Works out the ordered constructor dependencies of a class.

    A dependency list declared through metadata always wins. Without one,
    the list is read from the constructor's type hints.
    """

    def __init__(self, metadata: MetadataStore) -> None:
        self._metadata = metadata

    def get_dependencies(self, cls: Type) -> List[Any]:
        """Return the tokens to resolve, in constructor argument order.

        Args:
            cls: The class about to be instantiated.

        Returns:
            Ordered list of provider tokens.

        Raises:
            UnresolvableDependency: If a required parameter lacks a type hint.

        Example:
            >>> class UserService:
            ...     def __init__(self, db: DatabaseConnection, logger: Logger):
            ...         self.db = db
            ...         self.logger = logger
            >>>
            >>> resolver.get_dependencies(UserService)
            [DatabaseConnection, Logger]
        """
        # Declared lists describe the declaring class's constructor only
        owner = self._metadata.owner(DEPENDENCIES, cls)
        if owner is not None and owner.__init__ is cls.__init__:
            return list(self._metadata.get_own(DEPENDENCIES, owner))

        if cls.__init__ is object.__init__:
            return []

        try:
            signature = inspect.signature(cls.__init__)
            type_hints = get_type_hints(cls.__init__)
        except Exception as e:
            raise UnresolvableDependency(cls, f"Failed to inspect constructor: {e}") from e

        dependencies = []
        for param_name, param in signature.parameters.items():
            if param_name == "self":
                continue

            # Skip *args and **kwargs parameters (VAR_POSITIONAL and VAR_KEYWORD)
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            # Parameters with defaults keep their default values
            if param.default is not inspect.Parameter.empty:
                continue

            # Dependencies are passed positionally
            if param.kind == inspect.Parameter.KEYWORD_ONLY:
                raise UnresolvableDependency(
                    cls,
                    f"Keyword-only parameter '{param_name}' has no default value.",
                )

            if param_name not in type_hints:
                raise UnresolvableDependency(
                    cls,
                    f"Parameter '{param_name}' lacks type hint and has no default value.",
                )

            dependencies.append(type_hints[param_name])

        return dependencies
