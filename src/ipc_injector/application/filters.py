import logging
from typing import Any, Dict, List, Tuple, Type

from ipc_injector.application.invoker import DEFAULT_MAX_UNWRAP_DEPTH, unwrap
from ipc_injector.domain import ExecutionContext, IContainer, IsNotExceptionFilter, ProviderIsNotInjectable
from ipc_injector.domain.metadata import FILTER, INJECTABLE

logger = logging.getLogger(__name__)


def failure_envelope(error: BaseException) -> Dict[str, Any]:
    """Build the generic failure response sent back over a reply channel."""
    return {"success": False, "error": error}


class FilterDispatcher:
    """Routes dispatch errors to the exception filter registered for their type.

    Entries are scanned in registration order and the first error class the
    error is an instance of wins.

    Attributes:
        _container: Container the filter instances are resolved from.
        _filters: Error class mapped to the filter class handling it.
    """

    def __init__(self, container: IContainer, max_depth: int = DEFAULT_MAX_UNWRAP_DEPTH) -> None:
        self._container = container
        self._max_depth = max_depth
        self._filters: Dict[Type[BaseException], Type] = {}

    def register(self, filter_class: Type) -> None:
        """Register a filter class for every error class it declares.

        Raises:
            IsNotExceptionFilter: If the class declares no handled errors.
            ProviderIsNotInjectable: If the class carries no lifetime.
        """
        error_classes = self._container.metadata.get(FILTER, filter_class)
        if not error_classes:
            raise IsNotExceptionFilter(filter_class)
        # A filter the container cannot build would silently never run
        if not self._container.metadata.has(INJECTABLE, filter_class):
            raise ProviderIsNotInjectable(filter_class)

        for error_class in error_classes:
            self._filters[error_class] = filter_class
        self._container.add_provider(filter_class)
        logger.debug(
            "Filter %s registered for %s",
            filter_class.__name__,
            ", ".join(error_class.__name__ for error_class in error_classes),
        )

    @property
    def entries(self) -> List[Tuple[Type[BaseException], Type]]:
        return list(self._filters.items())

    async def handle(self, error: BaseException, context: ExecutionContext) -> Any:
        """Convert ``error`` into a response.

        Args:
            error: The error raised by a guard, a parameter or the handler.
            context: The context of the failed dispatch.

        Returns:
            The matching filter's unwrapped response, or the generic failure envelope.
        """
        logger.error("Error while dispatching %r: %s", context, error, exc_info=error)

        for error_class, filter_class in self._filters.items():
            if not isinstance(error, error_class):
                continue

            try:
                filter_instance = self._container.resolve(filter_class)
                return await unwrap(filter_instance.catch(error, context), self._max_depth)
            except Exception as filter_error:
                logger.error(
                    "Exception filter %s failed: %s",
                    filter_class.__name__,
                    filter_error,
                    exc_info=filter_error,
                )
                return failure_envelope(error)

        return failure_envelope(error)
