import logging
from typing import Any

from ipc_injector.application.filters import FilterDispatcher, failure_envelope
from ipc_injector.application.guards import GuardChainEvaluator
from ipc_injector.application.invoker import HandlerInvoker
from ipc_injector.application.params import ParameterResolver
from ipc_injector.domain import ExecutionContext, ForbiddenAccessError, RouteDefinition

logger = logging.getLogger(__name__)


class RequestPipeline:
    """Runs one inbound message through guards, parameters, handler and filters.

    Every error raised along the way is turned into a response by the filter
    dispatcher; a guard denial short-circuits with a forbidden envelope.
    """

    def __init__(
        self,
        guard_evaluator: GuardChainEvaluator,
        parameter_resolver: ParameterResolver,
        handler_invoker: HandlerInvoker,
        filter_dispatcher: FilterDispatcher,
    ) -> None:
        self._guards = guard_evaluator
        self._params = parameter_resolver
        self._invoker = handler_invoker
        self._filters = filter_dispatcher

    async def dispatch(self, route: RouteDefinition, event: Any, payload: Any) -> Any:
        """Dispatch ``payload`` to ``route``.

        Args:
            route: The bootstrapped route the message is addressed to.
            event: The raw transport event.
            payload: The deserialized message payload.

        Returns:
            The handler's unwrapped value, a filter response, or a failure envelope.
        """
        context = ExecutionContext(route.controller, route.handler, payload, event)

        try:
            denied_by = await self._guards.evaluate(route.guards, context)
            if denied_by is not None:
                guard_name = type(denied_by).__name__
                logger.info("Access to %s denied by %s", route.path, guard_name)
                return failure_envelope(ForbiddenAccessError(route.path, guard_name))

            args = await self._params.resolve(route.params, context)
            return await self._invoker.invoke(route.instance, route.handler, args)
        except Exception as error:
            return await self._filters.handle(error, context)
