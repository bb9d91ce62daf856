"""Unit tests for the metadata decorators."""

from typing import Annotated

import pytest
from pydantic import BaseModel

from ipc_injector.domain import (
    HandlerMode,
    InvalidHandlerSignature,
    Lifetime,
    MetadataStore,
    ParamRole,
    default_metadata_store,
)
from ipc_injector.domain.metadata import CONTROLLER, DEPENDENCIES, FILTER, GUARD, HANDLER, INJECTABLE, PARAM
from ipc_injector.infrastructure.decorators import (
    Ctx,
    Event,
    Payload,
    apply_decorators,
    catch,
    controller,
    create_param_decorator,
    injectable,
    on_invoke,
    on_send,
    set_metadata,
    use_guards,
)


class CreateUser(BaseModel):
    name: str


class GuardA:
    pass


class GuardB:
    pass


class GuardC:
    pass


class TestClassDecorators:
    """Test cases for controller, injectable and catch."""

    def test_controller_prefix(self):
        """Test that controller stores its prefix and returns the class."""

        @controller("users")
        class UsersController:
            pass

        assert default_metadata_store.get(CONTROLLER, UsersController) == "users"

    def test_controller_default_prefix(self):
        """Test that the prefix defaults to an empty string."""

        @controller()
        class RootController:
            pass

        assert default_metadata_store.get(CONTROLLER, RootController) == ""

    def test_controller_dependencies(self):
        """Test that controller dependencies can be declared."""

        @controller("users", deps=[GuardA])
        class UsersController:
            pass

        assert default_metadata_store.get(DEPENDENCIES, UsersController) == [GuardA]

    def test_injectable_defaults_to_singleton(self):
        """Test that injectable defaults to singleton lifetime."""

        @injectable()
        class Service:
            pass

        assert default_metadata_store.get(INJECTABLE, Service) is Lifetime.SINGLETON
        assert not default_metadata_store.has(DEPENDENCIES, Service)

    def test_injectable_transient_with_deps(self):
        """Test that lifetime and dependencies are recorded."""

        @injectable("transient", deps=(GuardA, GuardB))
        class Service:
            pass

        assert default_metadata_store.get(INJECTABLE, Service) is Lifetime.TRANSIENT
        assert default_metadata_store.get(DEPENDENCIES, Service) == [GuardA, GuardB]

    def test_catch_records_error_classes(self):
        """Test that catch records the handled errors."""

        @catch(ValueError, TypeError)
        class Filter:
            pass

        assert default_metadata_store.get(FILTER, Filter) == [ValueError, TypeError]

    def test_custom_store(self):
        """Test that decorators can write to a dedicated store."""
        store = MetadataStore()

        @injectable(store=store)
        class Service:
            pass

        assert store.get(INJECTABLE, Service) is Lifetime.SINGLETON
        assert not default_metadata_store.has(INJECTABLE, Service)


class TestRouteDecorators:
    """Test cases for on_invoke and on_send."""

    def test_on_invoke_metadata(self):
        """Test that on_invoke records a request-reply route."""

        class Controller:
            @on_invoke("get")
            def get(self):
                pass

        metadata = default_metadata_store.get(HANDLER, Controller.get)
        assert metadata.path == "get"
        assert metadata.mode is HandlerMode.REQUEST_REPLY

    def test_on_send_metadata(self):
        """Test that on_send records a fire-and-forget route."""

        class Controller:
            @on_send()
            def notify(self):
                pass

        metadata = default_metadata_store.get(HANDLER, Controller.notify)
        assert metadata.path == ""
        assert metadata.mode is HandlerMode.FIRE_AND_FORGET

    def test_function_returned_unchanged(self):
        """Test that route decorators do not wrap the function."""

        def handler(self):
            return "value"

        assert on_invoke("x")(handler) is handler

    def test_params_from_annotations(self):
        """Test that parameter roles are read from Annotated markers."""

        class Controller:
            @on_invoke("create")
            def create(self, data: Annotated[CreateUser, Payload()], unused, ctx: Annotated[object, Ctx()], event: Annotated[object, Event()]):
                pass

        params = default_metadata_store.get(PARAM, Controller.create)
        assert [param.role if param else None for param in params] == [
            ParamRole.PAYLOAD,
            None,
            ParamRole.CONTEXT,
            ParamRole.EVENT,
        ]
        assert params[0].shape is CreateUser

    def test_explicit_payload_shape_wins(self):
        """Test that Payload(shape) overrides the annotated type."""

        class Controller:
            @on_invoke("create")
            def create(self, data: Annotated[dict, Payload(CreateUser)]):
                pass

        assert default_metadata_store.get(PARAM, Controller.create)[0].shape is CreateUser

    def test_trailing_unmarked_params_dropped(self):
        """Test that unmarked trailing parameters keep their defaults."""

        class Controller:
            @on_invoke("list")
            def list_users(self, event: Annotated[object, Event()], limit: int = 10):
                pass

        params = default_metadata_store.get(PARAM, Controller.list_users)
        assert len(params) == 1

    def test_custom_param_decorator(self):
        """Test that custom markers carry their factory."""

        def sender(ctx):
            return ctx.event.sender

        Sender = create_param_decorator(sender)

        class Controller:
            @on_invoke("whoami")
            def whoami(self, who: Annotated[str, Sender()]):
                pass

        param = default_metadata_store.get(PARAM, Controller.whoami)[0]
        assert param.role is ParamRole.CUSTOM
        assert param.factory is sender

    def test_marked_keyword_only_param_rejected(self):
        """Test that a marked keyword-only parameter fails at decoration time."""
        with pytest.raises(InvalidHandlerSignature) as exc_info:

            class Controller:
                @on_invoke("get")
                def get(self, *, data: Annotated[CreateUser, Payload()]):
                    pass

        assert exc_info.value.parameter == "data"

    def test_required_keyword_only_param_rejected(self):
        """Test that a keyword-only parameter without default cannot be routed."""
        with pytest.raises(InvalidHandlerSignature):

            class Controller:
                @on_send("log")
                def log(self, line: Annotated[str, Payload()], *, level):
                    pass

    def test_keyword_only_param_with_default_skipped(self):
        """Test that keyword-only parameters with defaults are left alone."""

        class Controller:
            @on_invoke("list")
            def list_users(self, data: Annotated[dict, Payload()], *, limit: int = 10):
                pass

        params = default_metadata_store.get(PARAM, Controller.list_users)
        assert [param.role for param in params] == [ParamRole.PAYLOAD]


class TestGuardDecorator:
    """Test cases for use_guards."""

    def test_guards_on_class(self):
        """Test that class-level guards are recorded in order."""

        @use_guards(GuardA, GuardB)
        class Controller:
            pass

        assert default_metadata_store.get(GUARD, Controller) == [GuardA, GuardB]

    def test_outer_decorator_runs_first(self):
        """Test that stacked decorators put the outermost guards first without duplicates."""

        class Controller:
            @use_guards(GuardC, GuardA)
            @use_guards(GuardA, GuardB)
            @on_invoke("get")
            def get(self):
                pass

        assert default_metadata_store.get(GUARD, Controller.get) == [GuardC, GuardA, GuardB]


class TestMetadataHelpers:
    """Test cases for set_metadata and apply_decorators."""

    def test_set_metadata(self):
        """Test that arbitrary metadata is recorded."""

        @set_metadata("roles", ["admin"])
        def handler(self):
            pass

        assert default_metadata_store.get("roles", handler) == ["admin"]

    def test_apply_decorators(self):
        """Test that apply_decorators applies each decorator in order."""
        Admin = apply_decorators(set_metadata("roles", ["admin"]), use_guards(GuardA))

        class Controller:
            @Admin
            @on_invoke("delete")
            def delete(self):
                pass

        assert default_metadata_store.get("roles", Controller.delete) == ["admin"]
        assert default_metadata_store.get(GUARD, Controller.delete) == [GuardA]
        assert default_metadata_store.get(HANDLER, Controller.delete).path == "delete"
