import logging
from typing import Any, Optional, Sequence

from ipc_injector.application.invoker import DEFAULT_MAX_UNWRAP_DEPTH, unwrap
from ipc_injector.domain import ExecutionContext

logger = logging.getLogger(__name__)


class GuardChainEvaluator:
    """Runs guards in order and stops at the first one that denies access.

    Errors raised by a guard are not handled here; they reach the pipeline's
    error stage like any handler error.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_UNWRAP_DEPTH) -> None:
        self._max_depth = max_depth

    async def evaluate(self, guards: Sequence[Any], context: ExecutionContext) -> Optional[Any]:
        """Evaluate ``guards`` against ``context``.

        Args:
            guards: Guard instances, in execution order.
            context: The context of the current dispatch.

        Returns:
            The guard that denied access, or ``None`` when every guard allows it.
        """
        for guard in guards:
            verdict = await unwrap(guard.can_activate(context), self._max_depth)
            if not verdict:
                logger.debug("Guard %s denied access to %r", type(guard).__name__, context)
                return guard
        return None
