"""Agreement contracts: schemas, routes, agreements and their documents."""

from agreement.contracts.schema import Schema, describe
from agreement.contracts.route import Route, params
from agreement.contracts.agreement_spec import (
    Agreement,
    AgreementImport,
    VERSION_PATTERN,
    normalize_agreement,
    route_path,
)
from agreement.contracts.document import RouteDocument, SerializedDocument
from agreement.contracts.validation import (
    transfer_model,
    validate_transfer,
    validate_value,
    sanitize_for_logging,
)

__all__ = [
    "Schema",
    "describe",
    "Route",
    "params",
    "Agreement",
    "AgreementImport",
    "VERSION_PATTERN",
    "normalize_agreement",
    "route_path",
    "RouteDocument",
    "SerializedDocument",
    "transfer_model",
    "validate_transfer",
    "validate_value",
    "sanitize_for_logging",
]
