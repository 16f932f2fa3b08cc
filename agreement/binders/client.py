"""
Client binder

``proxy`` turns an agreement into an object with one coroutine function
per route. Payloads are validated locally before the channel is touched,
and sent on the same versioned path the server binder registers.
"""

import inspect
from typing import Any, Callable, Dict, Iterator, Optional

import structlog

from agreement.binders.context import HeaderSupplier
from agreement.channel.protocol import Channel, ensure_channel
from agreement.contracts.agreement_spec import Agreement, normalize_agreement
from agreement.contracts.route import Route
from agreement.contracts.validation import transfer_model, validate_transfer, validate_value
from agreement.utils.exceptions import AgreementDefinitionError, PayloadValidationError

logger = structlog.get_logger(__name__)


class AgreementProxy:
    """
    Client surface of an agreement.

    Routes are reachable as attributes (``api.add(...)``) or by name
    (``api["add"](...)``) when a route name collides with an attribute.
    """

    def __init__(
        self,
        channel: Channel,
        agreement: Agreement,
        calls: Dict[str, Callable[..., Any]],
        paths: Dict[str, str],
    ):
        self.channel = channel
        self.agreement = agreement
        self.paths = paths
        self._calls = calls

    def __getattr__(self, name: str) -> Callable[..., Any]:
        calls = self.__dict__.get("_calls", {})
        if name in calls:
            return calls[name]
        raise AttributeError(f"{type(self).__name__} has no route '{name}'")

    def __getitem__(self, name: str) -> Callable[..., Any]:
        return self._calls[name]

    def __contains__(self, name: object) -> bool:
        return name in self._calls

    def __iter__(self) -> Iterator[str]:
        return iter(self._calls)

    def __dir__(self):
        return sorted(set(super().__dir__()) | set(self._calls))

    def __repr__(self) -> str:
        return (
            f"<AgreementProxy {self.agreement.role}@{self.agreement.version} "
            f"routes={list(self._calls)}>"
        )


def proxy(
    channel: Channel,
    agreement: Any,
    header_supplier: Optional[HeaderSupplier] = None,
    *,
    prefix: Optional[str] = None,
) -> AgreementProxy:
    """
    Build a client proxy for an agreement.

    Args:
        channel: Channel whose peer implements the agreement
        agreement: Agreement, import wrapper, or mapping of either
        header_supplier: Called on every call to routes that declare headers
        prefix: Route path prefix, defaults to ``AGREEMENT_ROUTE_PREFIX``

    Returns:
        Proxy with one coroutine function per route
    """
    ensure_channel(channel)
    agreement = normalize_agreement(agreement)
    if header_supplier is not None and not callable(header_supplier):
        raise AgreementDefinitionError("header_supplier must be callable")

    calls: Dict[str, Callable[..., Any]] = {}
    paths: Dict[str, str] = {}
    for name, route in agreement.routes.items():
        path = agreement.path_for(name, prefix)
        paths[name] = path
        calls[name] = _client_call(channel, agreement, name, path, route, header_supplier)

    logger.debug(
        "Agreement proxied",
        role=agreement.role,
        version=agreement.version,
        routes=list(calls),
    )
    return AgreementProxy(channel, agreement, calls, paths)


def _client_call(
    channel: Channel,
    agreement: Agreement,
    name: str,
    path: str,
    route: Route,
    header_supplier: Optional[HeaderSupplier],
) -> Callable[..., Any]:
    transfer = transfer_model(name, route)

    async def send(params: Any) -> Any:
        payload: Dict[str, Any] = {}
        if params is not None:
            payload["params"] = params
        if route.header is not None:
            if header_supplier is None:
                raise PayloadValidationError(
                    name,
                    f"Route '{name}' declares headers but the proxy has no header_supplier",
                    errors=[{
                        'field': 'headers',
                        'message': 'No header_supplier given to proxy()',
                        'type': 'missing',
                        'input': None
                    }]
                )
            payload["headers"] = header_supplier()

        envelope = validate_transfer(transfer, name, payload)
        result = await channel.invoke_remote(
            path, envelope.model_dump(mode="json", exclude_unset=True)
        )

        if route.return_ is not None:
            return validate_value(route.return_, result, name, "Return")
        return result

    if route.takes_params:
        async def call(params: Any) -> Any:
            return await send(params)
        parameters = [
            inspect.Parameter(
                "params",
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
                annotation=route.param.annotation,
            )
        ]
    else:
        async def call() -> Any:
            return await send(None)
        parameters = []

    return_annotation = route.return_.annotation if route.return_ is not None else None
    call.__name__ = name
    call.__qualname__ = f"{agreement.role}.{name}"
    call.__doc__ = f"Call {path}."
    call.__signature__ = inspect.Signature(parameters, return_annotation=return_annotation)
    call.__annotations__ = {p.name: p.annotation for p in parameters}
    call.__annotations__["return"] = return_annotation
    return call
