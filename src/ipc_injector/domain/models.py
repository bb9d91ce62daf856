from typing import Any, Callable, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from ipc_injector.domain.enums import HandlerMode, ParamRole


class ProviderDescriptor(BaseModel):
    """Value object pairing a provider token with its implementation.

    Attributes:
        provided: The token consumers resolve.
        use_class: The class instantiated for that token.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    provided: Any = Field(..., description="The token consumers resolve.")
    use_class: Type = Field(..., description="The class instantiated for the token.")

    @classmethod
    def of(cls, provider: Union[Type, "ProviderDescriptor"]) -> "ProviderDescriptor":
        """Normalize a bare class or a descriptor into a descriptor."""
        if isinstance(provider, ProviderDescriptor):
            return provider
        return cls(provided=provider, use_class=provider)


class HandlerMetadata(BaseModel):
    """Routing information attached to a handler method."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(default="", description="Channel path relative to the controller prefix.")
    mode: HandlerMode = Field(..., description="Whether the channel expects a reply.")


class ParamDescriptor(BaseModel):
    """Describes where a single handler argument comes from.

    Attributes:
        role: The argument source.
        shape: Target type of a payload argument, used for validation.
        factory: Deriving function for custom arguments.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    role: ParamRole
    shape: Optional[Any] = None
    factory: Optional[Callable[..., Any]] = None


class ValidationFailure(BaseModel):
    """A single field that failed payload validation.

    Attributes:
        field: Dotted location of the failing field.
        value: The offending input value, if any.
        constraints: Constraint code mapped to its message.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    field: str
    value: Optional[Any] = None
    constraints: Dict[str, str] = Field(default_factory=dict)


class ValidationOptions(BaseModel):
    """Options applied when validating payload arguments.

    Attributes:
        strict: Disable type coercion while validating.
        transform: Pass the validated model to the handler instead of the raw payload.
    """

    strict: bool = False
    transform: bool = False


class ConfigOptions(BaseModel):
    """Providers and controllers an application is built from."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    providers: List[Union[ProviderDescriptor, Type]] = Field(default_factory=list)
    controllers: List[Type] = Field(default_factory=list)


class RouteDefinition(BaseModel):
    """A bootstrapped route: one controller method bound to one channel."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    path: str
    mode: HandlerMode
    controller: Type
    instance: Any
    handler: Callable[..., Any]
    guards: List[Any] = Field(default_factory=list)
    params: List[Optional[ParamDescriptor]] = Field(default_factory=list)
