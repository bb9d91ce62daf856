from typing import Any, Callable, Optional, Type


class ExecutionContext:
    """Per-dispatch carrier of the target controller, handler, payload and raw event.

    A single instance is shared by every guard, parameter resolver and filter
    of one dispatch, so a payload replaced by one stage is seen by the next.

    Attributes:
        class_ref: The controller class that owns the handler.
        handler: The unbound handler function.
        payload: The current payload, replaceable by pipeline stages.
        event: The transport event the message arrived with.
    """

    def __init__(
        self,
        class_ref: Type,
        handler: Callable[..., Any],
        payload: Any,
        event: Optional[Any] = None,
    ) -> None:
        self._class_ref = class_ref
        self._handler = handler
        self._payload = payload
        self._event = event

    @property
    def class_ref(self) -> Type:
        return self._class_ref

    @property
    def handler(self) -> Callable[..., Any]:
        return self._handler

    @property
    def event(self) -> Optional[Any]:
        return self._event

    @property
    def payload(self) -> Any:
        return self._payload

    @payload.setter
    def payload(self, payload: Any) -> None:
        self._payload = payload

    def __repr__(self) -> str:
        return (
            f"ExecutionContext(class_ref={self._class_ref.__name__}, "
            f"handler={getattr(self._handler, '__name__', self._handler)!r})"
        )
