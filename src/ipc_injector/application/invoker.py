"""Application layer - Handler invocation and result unwrapping."""

import inspect
from typing import Any, Callable, Sequence

from ipc_injector.domain import EmptyStreamError, ResultUnwrapError

DEFAULT_MAX_UNWRAP_DEPTH = 32


def is_stream(value: Any) -> bool:
    """Return whether ``value`` is an async stream (an async iterable)."""
    return hasattr(value, "__aiter__")


async def first_value(stream: Any) -> Any:
    """Take the first value emitted by an async stream, then close it.

    Raises:
        EmptyStreamError: If the stream completes without emitting.
    """
    iterator = stream.__aiter__()
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        raise EmptyStreamError() from None
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


async def unwrap(result: Any, max_depth: int = DEFAULT_MAX_UNWRAP_DEPTH) -> Any:
    """Reduce any nesting of awaitables and async streams to a plain value.

    Awaitables are awaited; streams contribute their first value. Each step
    counts towards ``max_depth``.

    Raises:
        ResultUnwrapError: If a plain value is not reached within ``max_depth`` steps.

    Example:
        >>> async def stream():
        ...     yield "ok"
        >>> async def handler():
        ...     return stream()
        >>> await unwrap(handler())
        'ok'
    """
    depth = 0
    while inspect.isawaitable(result) or is_stream(result):
        if depth >= max_depth:
            if inspect.iscoroutine(result):
                result.close()
            raise ResultUnwrapError(max_depth)
        depth += 1
        if inspect.isawaitable(result):
            result = await result
        else:
            result = await first_value(result)
    return result


class HandlerInvoker:
    """Calls a handler on its controller and unwraps the result.

    Attributes:
        _max_depth: Maximum number of unwrap steps per call.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_UNWRAP_DEPTH) -> None:
        self._max_depth = max_depth

    async def invoke(self, instance: Any, handler: Callable[..., Any], args: Sequence[Any]) -> Any:
        """Bind ``handler`` to ``instance``, call it with ``args`` and unwrap its result.

        Args:
            instance: The controller instance.
            handler: The unbound handler function.
            args: Positional arguments, already resolved.

        Returns:
            The plain value produced by the handler.
        """
        bound = handler.__get__(instance, type(instance))
        return await unwrap(bound(*args), self._max_depth)

    async def unwrap(self, result: Any) -> Any:
        return await unwrap(result, self._max_depth)
