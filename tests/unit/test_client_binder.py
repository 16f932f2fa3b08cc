"""Unit tests for the client proxy."""

import inspect

import pytest
from pydantic import BaseModel

from agreement import Agreement, params, proxy
from agreement.binders import AgreementProxy
from agreement.utils.exceptions import (
    AgreementDefinitionError,
    ChannelCapabilityError,
    PayloadValidationError,
)

ADD_PATH = "/agreement/calc@1.0.0/add"


@pytest.fixture
def secure_agreement():
    return Agreement(role="calc", version="1.0.0", routes={
        "add": params({"a": float, "b": float}).returns(float).headers({"token": str}),
        "ping": params().returns(str),
    })


class TestProxySurface:
    """Test the generated call surface."""

    def test_one_callable_per_route(self, recording_channel, secure_agreement):
        api = proxy(recording_channel, secure_agreement)

        assert isinstance(api, AgreementProxy)
        assert list(api) == ["add", "ping"]
        assert "add" in api
        assert api.channel is recording_channel
        assert api.paths == {
            "add": ADD_PATH,
            "ping": "/agreement/calc@1.0.0/ping",
        }
        assert inspect.iscoroutinefunction(api.add)

    def test_signatures_mirror_routes(self, recording_channel, secure_agreement):
        """Test call signatures follow the route's param and return schemas."""
        api = proxy(recording_channel, secure_agreement)

        add = inspect.signature(api.add)
        assert list(add.parameters) == ["params"]
        assert add.parameters["params"].annotation is secure_agreement.routes["add"].param.annotation
        assert add.return_annotation is float

        ping = inspect.signature(api.ping)
        assert list(ping.parameters) == []
        assert ping.return_annotation is str

    def test_route_names_colliding_with_attributes(self, recording_channel):
        """Test item access for routes shadowed by proxy attributes."""
        agreement = Agreement(role="svc", version="1", routes={"channel": params()})
        api = proxy(recording_channel, agreement)
        assert api.channel is recording_channel
        assert api["channel"].__name__ == "channel"

    def test_unknown_route(self, recording_channel, calc_agreement):
        api = proxy(recording_channel, calc_agreement)
        with pytest.raises(AttributeError):
            api.subtract

    def test_rejects_non_channel(self, calc_agreement):
        with pytest.raises(ChannelCapabilityError):
            proxy(object(), calc_agreement)

    def test_rejects_non_callable_header_supplier(self, recording_channel, calc_agreement):
        with pytest.raises(AgreementDefinitionError):
            proxy(recording_channel, calc_agreement, {"token": "t"})


class TestProxyCalls:
    """Test payloads sent by proxied calls."""

    @pytest.mark.asyncio
    async def test_params_payload(self, recording_channel, calc_agreement):
        recording_channel.responses[ADD_PATH] = 5.0
        api = proxy(recording_channel, calc_agreement)

        assert await api.add({"a": 2, "b": 3}) == 5.0
        assert recording_channel.calls == [(ADD_PATH, {"params": {"a": 2.0, "b": 3.0}})]

    @pytest.mark.asyncio
    async def test_model_params(self, recording_channel, calc_agreement):
        """Test passing an instance of the route's own param model."""
        recording_channel.responses[ADD_PATH] = 3.0
        api = proxy(recording_channel, calc_agreement)
        model = calc_agreement.routes["add"].param.annotation

        assert await api.add(model(a=1, b=2)) == 3.0
        assert recording_channel.calls[0][1] == {"params": {"a": 1.0, "b": 2.0}}

    @pytest.mark.asyncio
    async def test_parameterless_route_sends_empty_payload(self, recording_channel, secure_agreement):
        """Test no params and no headers for a bare route."""
        recording_channel.responses["/agreement/calc@1.0.0/ping"] = "pong"
        api = proxy(recording_channel, secure_agreement, lambda: {"token": "t"})

        assert await api.ping() == "pong"
        assert recording_channel.calls == [("/agreement/calc@1.0.0/ping", {})]

    @pytest.mark.asyncio
    async def test_headers_are_supplied_per_call(self, recording_channel, secure_agreement):
        """Test the header supplier runs on every call."""
        recording_channel.responses[ADD_PATH] = 1.0
        counter = {"n": 0}

        def headers():
            counter["n"] += 1
            return {"token": f"token-{counter['n']}"}

        api = proxy(recording_channel, secure_agreement, headers)
        await api.add({"a": 0, "b": 1})
        await api.add({"a": 0, "b": 1})

        tokens = [payload["headers"]["token"] for _, payload in recording_channel.calls]
        assert tokens == ["token-1", "token-2"]

    @pytest.mark.asyncio
    async def test_invalid_headers_fail_before_sending(self, recording_channel, secure_agreement):
        """Test header validation happens before the channel is used."""
        api = proxy(recording_channel, secure_agreement, lambda: {})

        with pytest.raises(PayloadValidationError) as exc_info:
            await api.add({"a": 2, "b": 3})

        assert exc_info.value.route == "add"
        assert recording_channel.calls == []

    @pytest.mark.asyncio
    async def test_missing_header_supplier(self, recording_channel, secure_agreement):
        """Test a headered route on a proxy without a supplier names the supplier."""
        api = proxy(recording_channel, secure_agreement)
        with pytest.raises(PayloadValidationError, match="no header_supplier") as exc_info:
            await api.add({"a": 2, "b": 3})

        assert exc_info.value.route == "add"
        assert exc_info.value.errors[0]["field"] == "headers"
        assert recording_channel.calls == []

    @pytest.mark.asyncio
    async def test_invalid_params_fail_before_sending(self, recording_channel, calc_agreement):
        api = proxy(recording_channel, calc_agreement)
        with pytest.raises(PayloadValidationError):
            await api.add({"a": "two", "b": 3})
        assert recording_channel.calls == []

    @pytest.mark.asyncio
    async def test_response_is_validated(self, recording_channel, calc_agreement):
        """Test responses that break the return schema."""
        recording_channel.responses[ADD_PATH] = "five"
        api = proxy(recording_channel, calc_agreement)
        with pytest.raises(PayloadValidationError, match="Return validation failed"):
            await api.add({"a": 2, "b": 3})

    @pytest.mark.asyncio
    async def test_response_model(self, recording_channel):
        """Test model return schemas give back model instances."""
        class Total(BaseModel):
            value: float
            currency: str

        agreement = Agreement(role="till", version="2", routes={"total": params().returns(Total)})
        recording_channel.responses["/agreement/till@2/total"] = {"value": 9.5, "currency": "EUR"}
        api = proxy(recording_channel, agreement)

        assert await api.total() == Total(value=9.5, currency="EUR")
