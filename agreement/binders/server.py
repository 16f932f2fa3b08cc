"""
Server binder

``implement`` wires implementation functions to an agreement's routes on a
channel. Every route handler validates the transfer envelope, resolves the
caller, runs the optional validator hook and only then the implementation.
"""

import inspect
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import TypeAdapter
import structlog

from agreement.binders.context import CallContext, Validator
from agreement.binders.diagnostics import (
    BindingReport,
    Diagnostic,
    DiagnosticKind,
    Observer,
    emit,
)
from agreement.channel.protocol import Channel, Handler, caller_identity, ensure_channel
from agreement.contracts.agreement_spec import Agreement, normalize_agreement
from agreement.contracts.route import Route
from agreement.contracts.validation import (
    plain_mapping,
    sanitize_for_logging,
    transfer_model,
    validate_transfer,
    validate_value,
)
from agreement.utils.exceptions import AgreementDefinitionError, ImplementationMismatchError

logger = structlog.get_logger(__name__)

_WIRE = TypeAdapter(Any)


def implement(
    channel: Channel,
    agreement_or_import: Any,
    implementations: Any,
    validator: Optional[Validator] = None,
    *,
    observer: Optional[Observer] = None,
    prefix: Optional[str] = None,
) -> BindingReport:
    """
    Implement an agreement on a channel.

    Args:
        channel: Channel to register route handlers on
        agreement_or_import: Agreement, import wrapper, or mapping of either
        implementations: Mapping (or object with attributes) of route name to function
        validator: Optional hook ``(route, headers, context)`` that raises to reject a call
        observer: Optional receiver for non-fatal diagnostics
        prefix: Route path prefix, defaults to ``AGREEMENT_ROUTE_PREFIX``

    Returns:
        Report of registered paths and diagnostics

    Raises:
        AgreementDefinitionError: If the agreement, an implementation or the
            validator is malformed. Nothing is registered in that case.
    """
    ensure_channel(channel)
    agreement = normalize_agreement(agreement_or_import)
    table = _implementation_table(agreement, implementations)
    if validator is not None and not callable(validator):
        raise AgreementDefinitionError("validator must be callable")

    report = BindingReport(role=agreement.role, version=agreement.version)
    handlers: List[Tuple[str, Handler]] = []

    for name, route in agreement.routes.items():
        implementation = table.get(name)
        if implementation is None:
            diagnostic = Diagnostic(
                kind=DiagnosticKind.MISSING_IMPLEMENTATION,
                role=agreement.role,
                version=agreement.version,
                route=name,
                message=f"No implementation for route '{name}'",
            )
            emit(diagnostic, observer)
            report.diagnostics.append(diagnostic)
            continue

        path = agreement.path_for(name, prefix)
        call = _wrap_implementation(name, route, implementation)
        handlers.append((path, _transfer_adapter(channel, name, path, route, call, validator)))

    for path, handler in handlers:
        channel.register_method(path, handler)
        report.registered.append(path)

    logger.info(
        "Agreement implemented",
        role=agreement.role,
        version=agreement.version,
        registered=len(report.registered),
        missing=report.missing,
    )
    return report


def _implementation_table(agreement: Agreement, implementations: Any) -> Dict[str, Callable]:
    if isinstance(implementations, Mapping):
        table = dict(implementations)
    else:
        table = {
            name: getattr(implementations, name)
            for name in agreement.routes
            if hasattr(implementations, name)
        }

    for name, fn in table.items():
        if not callable(fn):
            raise AgreementDefinitionError(f"Implementation for '{name}' is not callable")
    return table


def _wrap_implementation(
    name: str,
    route: Route,
    implementation: Callable[..., Any],
) -> Callable[[Any], Awaitable[Any]]:
    """Check the implementation fits the route and wrap it with return validation."""
    _check_signature(name, route, implementation)

    async def call(params: Any) -> Any:
        if route.takes_params:
            result = implementation(params)
        else:
            result = implementation()
        if inspect.isawaitable(result):
            result = await result

        if route.return_ is None:
            return _WIRE.dump_python(result, mode="json")
        result = validate_value(route.return_, result, name, "Return")
        return route.return_.dump(result)

    return call


def _check_signature(name: str, route: Route, implementation: Callable[..., Any]) -> None:
    try:
        signature = inspect.signature(implementation)
    except (TypeError, ValueError):
        # builtins without introspectable signatures are taken on trust
        return

    try:
        if route.takes_params:
            signature.bind(None)
        else:
            signature.bind()
    except TypeError:
        if route.takes_params:
            raise ImplementationMismatchError(
                name, f"must accept exactly one argument, has signature {signature}"
            )
        raise ImplementationMismatchError(
            name, f"must be callable without arguments, has signature {signature}"
        )


def _transfer_adapter(
    channel: Channel,
    name: str,
    path: str,
    route: Route,
    call: Callable[[Any], Awaitable[Any]],
    validator: Optional[Validator],
) -> Handler:
    transfer = transfer_model(name, route)

    async def handler(payload: Any = None) -> Any:
        envelope = validate_transfer(transfer, name, payload)
        headers = plain_mapping(envelope.headers)
        context = CallContext(
            route=name,
            remote_public_key=caller_identity(channel),
            params=envelope.params,
            headers=headers,
        )

        if validator is not None:
            try:
                outcome = validator(name, headers, context)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                logger.warning(
                    "Call rejected by validator",
                    path=path,
                    remote_public_key=context.remote_public_key,
                    headers=sanitize_for_logging(headers),
                    error=str(e),
                )
                raise

        return await call(envelope.params)

    handler.__name__ = f"{name}_handler"
    return handler
