"""Unit tests for ParameterResolver."""

import asyncio

import pytest
from pydantic import BaseModel

from ipc_injector.application.params import ParameterResolver
from ipc_injector.domain import (
    DataValidationError,
    ExecutionContext,
    ParamDescriptor,
    ParamRole,
    ValidationOptions,
)
from ipc_injector.infrastructure.validation import PydanticPayloadValidator


class RequiresX(BaseModel):
    x: int
    label: str = "none"


class Controller:
    def handler(self):
        pass


def make_context(payload=None, event="event"):
    return ExecutionContext(Controller, Controller.handler, payload, event)


def make_resolver(**options):
    return ParameterResolver(PydanticPayloadValidator(), ValidationOptions(**options))


class TestParameterRoles:
    """Test cases for each parameter role."""

    @pytest.mark.asyncio
    async def test_empty_params(self):
        """Test that a handler without params gets no arguments."""
        assert await make_resolver().resolve([], make_context()) == []

    @pytest.mark.asyncio
    async def test_context_event_and_payload(self):
        """Test that built-in roles resolve from the context."""
        context = make_context({"id": 1}, "raw-event")
        params = [
            ParamDescriptor(role=ParamRole.CONTEXT),
            ParamDescriptor(role=ParamRole.EVENT),
            ParamDescriptor(role=ParamRole.PAYLOAD),
        ]

        assert await make_resolver().resolve(params, context) == [context, "raw-event", {"id": 1}]

    @pytest.mark.asyncio
    async def test_unmarked_slot_is_none(self):
        """Test that slots without a role resolve to None."""
        params = [None, ParamDescriptor(role=ParamRole.EVENT)]

        assert await make_resolver().resolve(params, make_context()) == [None, "event"]

    @pytest.mark.asyncio
    async def test_custom_factory(self):
        """Test that custom factories receive the context."""
        params = [ParamDescriptor(role=ParamRole.CUSTOM, factory=lambda ctx: ctx.payload["id"] * 2)]

        assert await make_resolver().resolve(params, make_context({"id": 21})) == [42]

    @pytest.mark.asyncio
    async def test_async_custom_factory(self):
        """Test that awaitable factory results are awaited."""

        async def load_user(ctx):
            await asyncio.sleep(0)
            return {"name": "ada"}

        params = [ParamDescriptor(role=ParamRole.CUSTOM, factory=load_user)]

        assert await make_resolver().resolve(params, make_context()) == [{"name": "ada"}]

    @pytest.mark.asyncio
    async def test_positional_order_kept_with_uneven_completion(self):
        """Test that results keep positional order whatever the completion order."""

        async def slow(ctx):
            await asyncio.sleep(0.02)
            return "slow"

        async def fast(ctx):
            return "fast"

        params = [
            ParamDescriptor(role=ParamRole.CUSTOM, factory=slow),
            ParamDescriptor(role=ParamRole.CUSTOM, factory=fast),
        ]

        assert await make_resolver().resolve(params, make_context()) == ["slow", "fast"]

    @pytest.mark.asyncio
    async def test_factory_error_propagates(self):
        """Test that an error in any slot aborts resolution."""

        def broken(ctx):
            raise LookupError("no session")

        params = [ParamDescriptor(role=ParamRole.EVENT), ParamDescriptor(role=ParamRole.CUSTOM, factory=broken)]

        with pytest.raises(LookupError, match="no session"):
            await make_resolver().resolve(params, make_context())

    @pytest.mark.asyncio
    async def test_failure_cancels_pending_slots(self):
        """Test that slots still running when another fails never complete."""
        effects = []

        async def audit(ctx):
            await asyncio.sleep(0.02)
            effects.append("audited")
            return "audit"

        params = [
            ParamDescriptor(role=ParamRole.CUSTOM, factory=audit),
            ParamDescriptor(role=ParamRole.PAYLOAD, shape=RequiresX),
        ]

        with pytest.raises(DataValidationError):
            await make_resolver().resolve(params, make_context({}))

        await asyncio.sleep(0.05)
        assert effects == []


class TestPayloadValidation:
    """Test cases for payload validation."""

    @pytest.mark.asyncio
    async def test_missing_required_field(self):
        """Test that an empty payload fails with the required field's constraints only."""
        params = [ParamDescriptor(role=ParamRole.PAYLOAD, shape=RequiresX)]

        with pytest.raises(DataValidationError) as exc_info:
            await make_resolver().resolve(params, make_context({}))

        assert exc_info.value.failure.field == "x"
        assert set(exc_info.value.constraints) == {"missing"}

    @pytest.mark.asyncio
    async def test_valid_payload_returns_raw_payload(self):
        """Test that a valid payload is passed through untouched by default."""
        payload = {"x": "3"}
        params = [ParamDescriptor(role=ParamRole.PAYLOAD, shape=RequiresX)]

        result = await make_resolver().resolve(params, make_context(payload))

        assert result[0] is payload

    @pytest.mark.asyncio
    async def test_transform_replaces_payload(self):
        """Test that transform passes the model and updates the context."""
        context = make_context({"x": "3"})
        params = [ParamDescriptor(role=ParamRole.PAYLOAD, shape=RequiresX)]

        result = await make_resolver(transform=True).resolve(params, context)

        assert result[0] == RequiresX(x=3)
        assert context.payload is result[0]

    @pytest.mark.asyncio
    async def test_strict_mode_rejects_coercion(self):
        """Test that strict validation refuses string numbers."""
        params = [ParamDescriptor(role=ParamRole.PAYLOAD, shape=RequiresX)]

        with pytest.raises(DataValidationError) as exc_info:
            await make_resolver(strict=True).resolve(params, make_context({"x": "3"}))

        assert exc_info.value.failure.field == "x"

    @pytest.mark.asyncio
    async def test_shape_without_rules_skips_validation(self):
        """Test that non-model shapes do not validate."""
        params = [ParamDescriptor(role=ParamRole.PAYLOAD, shape=dict)]

        assert await make_resolver().resolve(params, make_context("not a dict")) == ["not a dict"]
