"""Decorators attaching routing, injection and parameter metadata.

The decorators never wrap their target: they record facts in the metadata
store and return the class or function unchanged.

Example:
    >>> @injectable()
    ... class UsersService:
    ...     def find(self, user_id: int) -> dict:
    ...         return {"id": user_id}
    >>>
    >>> @controller("users")
    ... class UsersController:
    ...     def __init__(self, service: UsersService):
    ...         self.service = service
    ...
    ...     @on_invoke("get")
    ...     def get(self, data: Annotated[GetUser, Payload()]):
    ...         return self.service.find(data["id"])
"""

import inspect
from typing import Annotated, Any, Callable, List, Optional, Sequence, Type, TypeVar, get_args, get_origin

from ipc_injector.domain import (
    HandlerMetadata,
    HandlerMode,
    InvalidHandlerSignature,
    Lifetime,
    MetadataStore,
    ParamDescriptor,
    ParamRole,
    default_metadata_store,
)
from ipc_injector.domain.metadata import CONTROLLER, DEPENDENCIES, FILTER, GUARD, HANDLER, INJECTABLE, PARAM

T = TypeVar("T")


def Payload(shape: Optional[Any] = None) -> ParamDescriptor:
    """Mark a handler parameter as the message payload.

    Args:
        shape: Type to validate the payload against. Defaults to the annotated type.
    """
    return ParamDescriptor(role=ParamRole.PAYLOAD, shape=shape)


def Event() -> ParamDescriptor:
    """Mark a handler parameter as the raw transport event."""
    return ParamDescriptor(role=ParamRole.EVENT)


def Ctx() -> ParamDescriptor:
    """Mark a handler parameter as the execution context."""
    return ParamDescriptor(role=ParamRole.CONTEXT)


def create_param_decorator(factory: Callable[..., Any]) -> Callable[[], ParamDescriptor]:
    """Create a parameter marker whose value is derived from the execution context.

    Args:
        factory: Called with the execution context; may return an awaitable.

    Example:
        >>> Sender = create_param_decorator(lambda ctx: ctx.event.sender)
        >>>
        >>> @on_invoke("whoami")
        ... def whoami(self, sender: Annotated[str, Sender()]):
        ...     return sender
    """

    def marker() -> ParamDescriptor:
        return ParamDescriptor(role=ParamRole.CUSTOM, factory=factory)

    return marker


def controller(prefix: str = "", deps: Optional[Sequence[Any]] = None, store: MetadataStore = default_metadata_store):
    """Declare a class as a controller whose routes live under ``prefix``."""

    def decorator(cls: Type[T]) -> Type[T]:
        store.define(CONTROLLER, prefix, cls)
        if deps is not None:
            store.define(DEPENDENCIES, list(deps), cls)
        return cls

    return decorator


def injectable(
    lifetime: Lifetime = Lifetime.SINGLETON,
    deps: Optional[Sequence[Any]] = None,
    store: MetadataStore = default_metadata_store,
):
    """Declare a class as resolvable by the container.

    Args:
        lifetime: Singleton (default) or transient.
        deps: Constructor dependencies in argument order. Read from the
              constructor's type hints when omitted.
    """

    def decorator(cls: Type[T]) -> Type[T]:
        store.define(INJECTABLE, Lifetime(lifetime), cls)
        if deps is not None:
            store.define(DEPENDENCIES, list(deps), cls)
        return cls

    return decorator


def _collect_params(func: Callable[..., Any]) -> List[Optional[ParamDescriptor]]:
    parameters = list(inspect.signature(func).parameters.values())
    # The first parameter receives the controller instance
    params: List[Optional[ParamDescriptor]] = []
    for parameter in parameters[1:]:
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        annotation = parameter.annotation
        marker = None
        base = annotation
        if get_origin(annotation) is Annotated:
            base, *extras = get_args(annotation)
            marker = next((extra for extra in extras if isinstance(extra, ParamDescriptor)), None)

        # Arguments are passed positionally
        if parameter.kind == inspect.Parameter.KEYWORD_ONLY:
            if marker is not None:
                raise InvalidHandlerSignature(func, parameter.name, "is keyword-only and cannot receive a marked value")
            if parameter.default is inspect.Parameter.empty:
                raise InvalidHandlerSignature(func, parameter.name, "is keyword-only and has no default value")
            continue

        if marker is None:
            params.append(None)
            continue

        if marker.role == ParamRole.PAYLOAD and marker.shape is None:
            marker = marker.model_copy(update={"shape": base})
        params.append(marker)

    # Trailing unmarked slots are left to their defaults
    while params and params[-1] is None:
        params.pop()
    return params


def _route(path: str, mode: HandlerMode, store: MetadataStore):
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        store.define(HANDLER, HandlerMetadata(path=path, mode=mode), func)
        store.define(PARAM, _collect_params(func), func)
        return func

    return decorator


def on_invoke(path: str = "", store: MetadataStore = default_metadata_store):
    """Route a request-reply channel to the decorated method."""
    return _route(path, HandlerMode.REQUEST_REPLY, store)


def on_send(path: str = "", store: MetadataStore = default_metadata_store):
    """Route a fire-and-forget channel to the decorated method."""
    return _route(path, HandlerMode.FIRE_AND_FORGET, store)


def use_guards(*guards: Type, store: MetadataStore = default_metadata_store):
    """Attach guards to a controller class or a handler method.

    Guards added by an outer decorator run before those already attached.
    """

    def decorator(target: T) -> T:
        previous = [guard for guard in store.get(GUARD, target, []) if guard not in guards]
        store.define(GUARD, [*guards, *previous], target)
        return target

    return decorator


def catch(*error_classes: Type[BaseException], store: MetadataStore = default_metadata_store):
    """Declare the error classes an exception filter handles."""

    def decorator(cls: Type[T]) -> Type[T]:
        store.define(FILTER, list(error_classes), cls)
        return cls

    return decorator


def set_metadata(key: Any, value: Any, store: MetadataStore = default_metadata_store):
    """Attach arbitrary metadata, readable by guards through ``Reflector``."""

    def decorator(target: T) -> T:
        store.define(key, value, target)
        return target

    return decorator


def apply_decorators(*decorators: Callable[[Any], Any]):
    """Combine several decorators into one, applied in the given order."""

    def decorator(target: T) -> T:
        for apply in decorators:
            apply(target)
        return target

    return decorator
