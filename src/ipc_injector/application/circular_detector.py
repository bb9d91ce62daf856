"""Application layer - Circular dependency detection."""

from typing import Any, Sequence, Tuple

from ipc_injector.domain import CircularDependency


class CircularDependencyDetector:
    """Detects circular dependencies on a resolution path.

    The path is the chain of tokens currently being constructed, threaded
    explicitly through recursive resolution so concurrent resolutions never
    share state.
    """

    def check(self, token: Any, path: Sequence[Any]) -> None:
        """Ensure ``token`` is not already being constructed.

        Args:
            token: The token about to be resolved.
            path: Tokens currently being constructed, outermost first.

        Raises:
            CircularDependency: If the token is already on the path.

        Example:
            >>> detector = CircularDependencyDetector()
            >>> detector.check(ServiceA, (ServiceA, ServiceB))  # Raises CircularDependency
        """
        if token in path:
            # Build cycle path from first occurrence to current
            cycle_start_index = list(path).index(token)
            cycle = list(path[cycle_start_index:]) + [token]
            raise CircularDependency(cycle)

    def extend(self, path: Sequence[Any], token: Any) -> Tuple[Any, ...]:
        """Return a new path with ``token`` appended."""
        return tuple(path) + (token,)
