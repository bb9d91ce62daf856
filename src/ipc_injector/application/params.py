import asyncio
import inspect
from typing import Any, List, Optional, Sequence

from ipc_injector.domain import (
    DataValidationError,
    ExecutionContext,
    IPayloadValidator,
    ParamDescriptor,
    ParamRole,
    ValidationOptions,
)


class ParameterResolver:
    """Produces the positional arguments of a handler from its parameter descriptors.

    Attributes:
        _validator: Validates payload arguments declaring a shape.
        _options: Options forwarded to the validator.
    """

    def __init__(self, validator: IPayloadValidator, options: Optional[ValidationOptions] = None) -> None:
        self._validator = validator
        self._options = options if options is not None else ValidationOptions()

    async def resolve(self, params: Sequence[Optional[ParamDescriptor]], context: ExecutionContext) -> List[Any]:
        """Resolve every parameter concurrently, keeping positional order.

        Args:
            params: One descriptor (or ``None``) per handler parameter.
            context: The context of the current dispatch.

        Returns:
            Arguments in the same order as ``params``.

        Raises:
            DataValidationError: If a payload argument fails validation.
        """
        if not params:
            return []
        tasks = [asyncio.ensure_future(self._resolve_one(param, context)) for param in params]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # The first failure aborts the slots still running
            for task in tasks:
                task.cancel()
            raise

    async def _resolve_one(self, param: Optional[ParamDescriptor], context: ExecutionContext) -> Any:
        if param is None:
            return None

        if param.role == ParamRole.CONTEXT:
            return context

        if param.role == ParamRole.EVENT:
            return context.event

        if param.role == ParamRole.PAYLOAD:
            return self._resolve_payload(param, context)

        if param.role == ParamRole.CUSTOM and param.factory is not None:
            value = param.factory(context)
            if inspect.isawaitable(value):
                value = await value
            return value

        return None

    def _resolve_payload(self, param: ParamDescriptor, context: ExecutionContext) -> Any:
        if param.shape is None or not self._validator.has_rules(param.shape):
            return context.payload

        transformed, failures = self._validator.validate(param.shape, context.payload, self._options)
        if failures:
            raise DataValidationError(failures[0])

        if self._options.transform:
            context.payload = transformed
        return context.payload
