"""
Agreement: schema-driven RPC contracts over multiplexed channels.

Declare an agreement once, then bind it on both ends::

    calc = Agreement(role="calc", version="1.0.0", routes={
        "add": params({"a": float, "b": float}).returns(float),
    })
    implement(server_channel, calc, {"add": lambda p: p.a + p.b})
    api = proxy(client_channel, calc)
    await api.add({"a": 2, "b": 3})
"""

from agreement.contracts import (
    Agreement,
    AgreementImport,
    Route,
    Schema,
    SerializedDocument,
    normalize_agreement,
    params,
    route_path,
)
from agreement.channel import Channel, LoopbackChannel
from agreement.binders import (
    AgreementProxy,
    BindingReport,
    CallContext,
    Diagnostic,
    implement,
    proxy,
)
from agreement.publication import (
    LoadedAgreement,
    add_meta_routes,
    dump_document,
    enact,
    load,
    load_agreement,
    serialize,
)
from agreement.utils import (
    AgreementError,
    AgreementDefinitionError,
    ImplementationMismatchError,
    PayloadValidationError,
    CallerIdentityError,
    MethodNotFoundError,
    configure_logging,
)

__all__ = [
    "Agreement",
    "AgreementImport",
    "Route",
    "Schema",
    "SerializedDocument",
    "normalize_agreement",
    "params",
    "route_path",
    "Channel",
    "LoopbackChannel",
    "AgreementProxy",
    "BindingReport",
    "CallContext",
    "Diagnostic",
    "implement",
    "proxy",
    "LoadedAgreement",
    "add_meta_routes",
    "dump_document",
    "enact",
    "load",
    "load_agreement",
    "serialize",
    "AgreementError",
    "AgreementDefinitionError",
    "ImplementationMismatchError",
    "PayloadValidationError",
    "CallerIdentityError",
    "MethodNotFoundError",
    "configure_logging",
]
