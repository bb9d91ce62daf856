import logging
from typing import Any, Callable, List, Optional, Type

from ipc_injector.application.container import Container
from ipc_injector.application.filters import FilterDispatcher
from ipc_injector.application.guards import GuardChainEvaluator
from ipc_injector.application.invoker import HandlerInvoker
from ipc_injector.application.params import ParameterResolver
from ipc_injector.application.pipeline import RequestPipeline
from ipc_injector.application.resolver import DependencyResolver
from ipc_injector.domain import (
    ConfigOptions,
    ControllerIsNotValid,
    HandlerMetadata,
    HandlerMode,
    IContainer,
    IPayloadValidator,
    ITransport,
    RouteDefinition,
    ValidationOptions,
)
from ipc_injector.domain.metadata import CONTROLLER, GUARD, HANDLER, PARAM
from ipc_injector.infrastructure.logging_config import configure_logging
from ipc_injector.infrastructure.settings import InjectorSettings
from ipc_injector.infrastructure.validation import PydanticPayloadValidator

logger = logging.getLogger(__name__)


def build_path(controller_prefix: str, method_path: str) -> str:
    """Join a controller prefix and a method path into a channel path.

    Example:
        >>> build_path("users", "get")
        'users:get'
        >>> build_path("", "ping")
        'ping'
    """
    prefix = controller_prefix.strip()
    path = method_path.strip()
    if prefix and path:
        return f"{prefix}:{path}"
    return prefix or path


class Application:
    """Wires controllers to transport channels through the request pipeline.

    Attributes:
        container: Container resolving providers, guards, filters and controller dependencies.
        routes: Routes registered by ``bootstrap``.
    """

    def __init__(
        self,
        config: ConfigOptions,
        validation_options: Optional[ValidationOptions] = None,
        settings: Optional[InjectorSettings] = None,
        container: Optional[IContainer] = None,
        validator: Optional[IPayloadValidator] = None,
    ) -> None:
        self._config = config
        self._settings = settings if settings is not None else InjectorSettings()
        self.container: IContainer = container if container is not None else Container()
        self.routes: List[RouteDefinition] = []
        self._resolver = DependencyResolver(self.container.metadata)

        max_depth = self._settings.MAX_UNWRAP_DEPTH
        self._filters = FilterDispatcher(self.container, max_depth)
        self._pipeline = RequestPipeline(
            GuardChainEvaluator(max_depth),
            ParameterResolver(
                validator if validator is not None else PydanticPayloadValidator(),
                validation_options,
            ),
            HandlerInvoker(max_depth),
            self._filters,
        )

        self._load_providers()

    @classmethod
    def create(
        cls,
        config: ConfigOptions,
        validation_options: Optional[ValidationOptions] = None,
        settings: Optional[InjectorSettings] = None,
        container: Optional[IContainer] = None,
    ) -> "Application":
        """Create an application and configure the package logger.

        Example:
            >>> app = Application.create(ConfigOptions(providers=[UsersService], controllers=[UsersController]))
            >>> app.use_global_filters(ValueErrorFilter)
            >>> app.bootstrap(transport)
        """
        settings = settings if settings is not None else InjectorSettings()
        configure_logging(settings)
        return cls(config, validation_options, settings, container)

    @property
    def pipeline(self) -> RequestPipeline:
        return self._pipeline

    def _load_providers(self) -> None:
        for provider in self._config.providers:
            self.container.add_provider(provider)

    def use_global_filters(self, *filters: Type) -> None:
        """Register exception filters applied to every route.

        Raises:
            IsNotExceptionFilter: If a class declares no handled errors.
            ProviderIsNotInjectable: If a filter class is not injectable.
        """
        for filter_class in filters:
            self._filters.register(filter_class)

    def bootstrap(self, transport: ITransport) -> List[RouteDefinition]:
        """Register one transport channel per routed controller method.

        Raises:
            ControllerIsNotValid: If a controller has no prefix metadata.
            ProviderNotFound: If a dependency or guard cannot be found.
            CircularDependency: If a dependency cycle is found.
        """
        metadata = self.container.metadata
        routes = []

        for controller in self._config.controllers:
            prefix = self._get_controller_prefix(controller)
            dependencies = self._resolver.get_dependencies(controller)
            instance = controller(*[self.container.resolve(dependency) for dependency in dependencies])
            controller_guards = metadata.get(GUARD, controller, [])

            for member in vars(controller).values():
                if not callable(member):
                    continue
                handler_metadata: Optional[HandlerMetadata] = metadata.get(HANDLER, member)
                if handler_metadata is None:
                    continue

                handler_guards = metadata.get(GUARD, member, [])
                guard_tokens = [guard for guard in controller_guards if guard not in handler_guards]
                guard_tokens.extend(handler_guards)

                route = RouteDefinition(
                    path=build_path(prefix, handler_metadata.path),
                    mode=handler_metadata.mode,
                    controller=controller,
                    instance=instance,
                    handler=member,
                    guards=[self._resolve_guard(guard) for guard in guard_tokens],
                    params=metadata.get(PARAM, member, []),
                )

                callback = self._make_callback(route)
                if route.mode == HandlerMode.REQUEST_REPLY:
                    transport.register_reply_channel(route.path, callback)
                else:
                    transport.register_fire_and_forget_channel(route.path, callback)

                routes.append(route)
                logger.debug("Route %s has initialized (%s)", route.path, route.mode)

        self.routes.extend(routes)
        return routes

    def _make_callback(self, route: RouteDefinition) -> Callable[[Any, Any], Any]:
        async def handle(event: Any, payload: Any) -> Any:
            return await self._pipeline.dispatch(route, event, payload)

        handle.__name__ = f"handle_{route.handler.__name__}"
        return handle

    def _resolve_guard(self, guard: Type) -> Any:
        if not self.container.has_provider(guard):
            self.container.add_provider(guard)
        return self.container.resolve(guard)

    def _get_controller_prefix(self, controller: Type) -> str:
        prefix = self.container.metadata.get(CONTROLLER, controller)
        if not isinstance(prefix, str):
            raise ControllerIsNotValid(controller)
        return prefix
